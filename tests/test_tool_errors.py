"""Tests for tool error types and result rendering."""

from __future__ import annotations

from hostlens.tools import (
    ConfirmationDeclinedError,
    DispatchResult,
    ErrorCode,
    ResultStatus,
    ToolError,
    ToolRuntimeError,
    UnsupportedLanguageToolError,
    ValidationError,
    render_value,
)
from hostlens.tools.results import truncate_text


class TestToolErrors:
    def test_base_error(self) -> None:
        error = ToolError(error_code="custom", message="Something broke", details={"a": 1})

        assert str(error) == "[custom] Something broke"
        assert error.to_text() == "Error (custom): Something broke"
        assert error.to_dict() == {"error": "custom", "message": "Something broke", "details": {"a": 1}}

    def test_subclass_defaults(self) -> None:
        assert ValidationError().error_code == ErrorCode.VALIDATION_ERROR
        assert ConfirmationDeclinedError().error_code == ErrorCode.CONFIRMATION_DECLINED
        assert isinstance(ValidationError(), Exception)

    def test_runtime_error_from_exception(self) -> None:
        error = ToolRuntimeError.from_exception(KeyError("missing"))

        assert error.error_code == ErrorCode.RUNTIME_ERROR
        assert error.exception_type == "KeyError"
        assert error.to_dict()["exception_type"] == "KeyError"

    def test_runtime_error_without_message(self) -> None:
        assert ToolRuntimeError.from_exception(RuntimeError()).message == "RuntimeError"

    def test_unsupported_language_carries_unit(self) -> None:
        error = UnsupportedLanguageToolError(message="no rule", unit="f.py")

        assert error.to_dict()["unit"] == "f.py"

    def test_validation_problems_serialized(self) -> None:
        error = ValidationError(message="bad", problems=["a", "b"])

        assert error.to_dict()["problems"] == ["a", "b"]


class TestRenderValue:
    def test_none_is_empty(self) -> None:
        assert render_value(None) == ""

    def test_scalars_pass_through(self) -> None:
        assert render_value(True) is True
        assert render_value(3) == 3
        assert render_value(2.5) == 2.5
        assert render_value("text") == "text"

    def test_sequences_are_newline_joined(self) -> None:
        assert render_value(["a", "b", None, False]) == "a\nb\n\nfalse"
        assert render_value(()) == ""

    def test_mappings_are_sorted_lines(self) -> None:
        assert render_value({"b": 2, "a": [1, 2]}) == "a: 1\n2\nb: 2"

    def test_sets_are_sorted(self) -> None:
        assert render_value({"z", "a"}) == "a\nz"

    def test_other_objects_use_str(self) -> None:
        assert render_value(b"bytes") == "bytes"


def test_truncate_text() -> None:
    assert truncate_text("abc", 0) == ("abc", False)
    assert truncate_text("abc", 5) == ("abc", False)
    text, truncated = truncate_text("abcdef", 3)
    assert truncated is True
    assert text.startswith("abc\n[")


class TestDispatchResult:
    def test_ok_result_text(self) -> None:
        result = DispatchResult(status=ResultStatus.OK, tool_name="t", correlation_id="c", content=True)

        assert result.success is True
        assert result.to_text() == "true"
        assert result.to_dict()["content"] is True

    def test_error_result(self) -> None:
        error = ToolRuntimeError(message="boom", exception_type="RuntimeError")
        result = DispatchResult(status=ResultStatus.ERROR, tool_name="t", correlation_id="c", error=error)

        assert result.success is False
        assert result.to_text() == "Error (runtime_error): boom"
        data = result.to_dict()
        assert data["status"] == "error"
        assert data["error"]["error"] == "runtime_error"
        assert "content" not in data

    def test_pending_result(self) -> None:
        result = DispatchResult(status=ResultStatus.PENDING, tool_name="t", correlation_id="c")

        assert result.pending is True
        assert "content" not in result.to_dict()

    def test_ok_result_dict_fields(self) -> None:
        result = DispatchResult(
            status=ResultStatus.OK,
            tool_name="t",
            correlation_id="c",
            content="text",
            truncated=True,
        )

        assert result.to_dict() == {
            "status": "ok",
            "tool_name": "t",
            "correlation_id": "c",
            "execution_time_ms": 0.0,
            "content": "text",
            "truncated": True,
        }
