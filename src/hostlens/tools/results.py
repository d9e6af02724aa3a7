"""Dispatch results and their caller-safe rendering."""

from __future__ import annotations

from collections.abc import Mapping, Set
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from .errors import ToolError

__all__ = ["ResultStatus", "DispatchResult", "Scalar", "render_value", "truncate_text"]

Scalar = Union[str, int, float, bool]

_TRUNCATION_NOTICE = "\n[... output truncated]"


class ResultStatus(str, Enum):
    OK = "ok"
    ERROR = "error"
    PENDING = "pending"


def render_value(value: Any) -> Scalar:
    """Encode a tool return value as text or a scalar.

    ``None`` becomes ``""``; sequences are newline-joined; mappings become
    ``key: value`` lines sorted by key. Everything else uses ``str``.
    """

    if value is None:
        return ""
    if isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    if isinstance(value, Mapping):
        lines = [f"{key}: {_render_item(value[key])}" for key in sorted(value, key=str)]
        return "\n".join(lines)
    if isinstance(value, Set):
        return "\n".join(sorted(_render_item(item) for item in value))
    if isinstance(value, (list, tuple)):
        return "\n".join(_render_item(item) for item in value)
    return str(value)


def _render_item(item: Any) -> str:
    if item is None:
        return ""
    if isinstance(item, bool):
        return "true" if item else "false"
    rendered = render_value(item)
    return rendered if isinstance(rendered, str) else str(rendered)


def truncate_text(text: str, limit: int) -> tuple[str, bool]:
    if limit <= 0 or len(text) <= limit:
        return text, False
    return text[:limit] + _TRUNCATION_NOTICE, True


@dataclass(slots=True)
class DispatchResult:
    """Outcome of one tool invocation.

    A successful result may carry descriptive "not found" text; that is
    still ``ok``. Only failures of the call itself are ``error``.

    Attributes:
        status: ``ok``, ``error`` or ``pending`` (async work scheduled).
        tool_name: Name of the invoked tool.
        correlation_id: Id of the invocation this result answers.
        content: Caller-safe value; empty for errors and pending results.
        error: Normalised failure, when ``status`` is ``error``.
        execution_time_ms: Time spent in the dispatcher.
        truncated: Whether ``content`` was shortened.
    """

    status: ResultStatus
    tool_name: str
    correlation_id: str
    content: Scalar = ""
    error: ToolError | None = None
    execution_time_ms: float = 0.0
    truncated: bool = False

    @property
    def success(self) -> bool:
        return self.status is ResultStatus.OK

    @property
    def pending(self) -> bool:
        return self.status is ResultStatus.PENDING

    def to_text(self) -> str:
        """The result as the text the calling agent reads."""
        if self.status is ResultStatus.ERROR:
            return self.error.to_text() if self.error else "Error (unknown): Unknown error"
        if self.status is ResultStatus.PENDING:
            return f"Pending: {self.tool_name} ({self.correlation_id})"
        return _render_item(self.content)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "status": self.status.value,
            "tool_name": self.tool_name,
            "correlation_id": self.correlation_id,
            "execution_time_ms": self.execution_time_ms,
        }
        if self.status is ResultStatus.ERROR:
            data["error"] = self.error.to_dict() if self.error else {"message": "Unknown error"}
        elif self.status is ResultStatus.OK:
            data["content"] = self.content
            if self.truncated:
                data["truncated"] = True
        return data
