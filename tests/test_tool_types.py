"""Tests for tool declarations and argument validation."""

from __future__ import annotations

import pytest

from hostlens.tools import (
    ErrorCode,
    ToolCategory,
    ToolDeclarationError,
    ToolInvocation,
    ToolSpec,
    ValidationError,
    normalize_schema,
    validate_arguments,
)


def _source_spec() -> ToolSpec:
    return ToolSpec(
        name="symbol_source",
        description="Source of a symbol.",
        parameters={
            "type": "object",
            "properties": {
                "symbol": {"type": "string"},
                "kind": {"type": "enum", "enum": ["function", "variable", "face"]},
                "options": {
                    "type": "object",
                    "properties": {"depth": {"type": "integer"}},
                    "required": ["depth"],
                },
            },
            "required": ["symbol", "kind"],
        },
        category=ToolCategory.INTROSPECTION,
    )


# =============================================================================
# Schema normalisation
# =============================================================================


class TestNormalizeSchema:
    def test_enum_type_becomes_constraint(self) -> None:
        schema = normalize_schema({"type": "enum", "enum": ["a", "b"]})

        assert schema == {"enum": ["a", "b"]}

    def test_enum_mixed_with_other_type(self) -> None:
        schema = normalize_schema({"type": ["string", "enum"], "enum": ["a"]})

        assert schema == {"type": "string", "enum": ["a"]}

    def test_nested_properties_and_items(self) -> None:
        schema = normalize_schema(
            {
                "type": "object",
                "properties": {
                    "modes": {"type": "array", "items": {"type": "enum", "enum": ["x"]}},
                },
            }
        )

        assert schema["properties"]["modes"]["items"] == {"enum": ["x"]}

    def test_input_is_not_mutated(self) -> None:
        original = {"type": "enum", "enum": ["a"]}

        normalize_schema(original)

        assert original == {"type": "enum", "enum": ["a"]}

    @pytest.mark.parametrize(
        "schema",
        [
            {"type": "symbol"},
            {"type": "enum"},
            {"type": "enum", "enum": []},
            {"type": "object", "properties": {"x": {"type": "date"}}},
        ],
    )
    def test_rejects_bad_declarations(self, schema: dict) -> None:
        with pytest.raises(ValueError):
            normalize_schema(schema)


# =============================================================================
# ToolSpec
# =============================================================================


class TestToolSpec:
    def test_defaults(self) -> None:
        spec = ToolSpec(name="list_manuals", description="Manuals.")

        assert spec.confirm is False
        assert spec.is_async is False
        assert spec.category == ToolCategory.UTILITY
        assert spec.json_schema == {"type": "object", "properties": {}}
        assert spec.required == []

    def test_json_schema_is_normalized(self) -> None:
        spec = _source_spec()

        assert spec.json_schema["properties"]["kind"] == {"enum": ["function", "variable", "face"]}
        assert spec.parameters["properties"]["kind"]["type"] == "enum"
        assert spec.required == ["symbol", "kind"]

    def test_unknown_type_is_a_declaration_error(self) -> None:
        with pytest.raises(ToolDeclarationError) as excinfo:
            ToolSpec(
                name="broken",
                description="",
                parameters={"type": "object", "properties": {"x": {"type": "symbol"}}},
            )

        assert excinfo.value.name == "broken"
        assert "symbol" in str(excinfo.value)

    def test_parameters_must_be_object_schema(self) -> None:
        with pytest.raises(ToolDeclarationError):
            ToolSpec(name="broken", description="", parameters={"type": "string"})

    def test_invalid_json_schema(self) -> None:
        with pytest.raises(ToolDeclarationError):
            ToolSpec(
                name="broken",
                description="",
                parameters={"type": "object", "required": "symbol"},
            )

    def test_empty_name(self) -> None:
        with pytest.raises(ToolDeclarationError):
            ToolSpec(name=" ", description="")

    def test_openai_export(self) -> None:
        exported = _source_spec().to_openai_tool()

        assert exported["type"] == "function"
        assert exported["function"]["name"] == "symbol_source"
        assert exported["function"]["parameters"]["properties"]["kind"] == {
            "enum": ["function", "variable", "face"]
        }

    def test_to_dict(self) -> None:
        data = ToolSpec(name="evaluate", description="Eval.", confirm=True).to_dict()

        assert data["confirm"] is True
        assert data["async"] is False


def test_invocations_get_unique_correlation_ids() -> None:
    first = ToolInvocation("symbol_exists", {"symbol": "car"})
    second = ToolInvocation("symbol_exists", {"symbol": "car"})

    assert first.correlation_id != second.correlation_id
    assert ToolInvocation("x", correlation_id="fixed").correlation_id == "fixed"


# =============================================================================
# Validation
# =============================================================================


class TestValidateArguments:
    def test_valid_arguments(self) -> None:
        assert validate_arguments(_source_spec(), {"symbol": "car", "kind": "function"}) is None

    def test_missing_required(self) -> None:
        error = validate_arguments(_source_spec(), {"symbol": "car"})

        assert isinstance(error, ValidationError)
        assert error.error_code == ErrorCode.VALIDATION_ERROR
        assert "'kind' is a required property" in error.message

    def test_enum_membership(self) -> None:
        error = validate_arguments(_source_spec(), {"symbol": "car", "kind": "macro"})

        assert error is not None
        assert error.problems[0].startswith("kind: 'macro' is not one of")

    def test_nested_required(self) -> None:
        error = validate_arguments(
            _source_spec(), {"symbol": "car", "kind": "face", "options": {}}
        )

        assert error is not None
        assert error.problems == ["options: 'depth' is a required property"]

    def test_type_mismatch_and_count(self) -> None:
        error = validate_arguments(_source_spec(), {"symbol": 3, "kind": "face", "options": {"depth": "x"}})

        assert error is not None
        assert len(error.problems) == 2
        assert "(+1 more issue)" in error.message

    def test_arguments_must_be_mapping(self) -> None:
        error = validate_arguments(_source_spec(), ["car"])

        assert error is not None
        assert error.problems == ["arguments must be an object, got list"]
