"""Standardized error types for tool results.

Every failure that crosses the dispatcher boundary is one of these, so the
caller always receives a code and a human-readable message.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar


# -----------------------------------------------------------------------------
# Error Code Constants
# -----------------------------------------------------------------------------

class ErrorCode:
    """Constants for error codes used in tool results."""

    VALIDATION_ERROR = "validation_error"
    RUNTIME_ERROR = "runtime_error"
    UNSUPPORTED_LANGUAGE = "unsupported_language"
    TOOL_NOT_FOUND = "tool_not_found"
    CONFIRMATION_REQUIRED = "confirmation_required"
    CONFIRMATION_DECLINED = "confirmation_declined"
    DUPLICATE_INVOCATION = "duplicate_invocation"


# -----------------------------------------------------------------------------
# Base Error Class
# -----------------------------------------------------------------------------

@dataclass
class ToolError(Exception):
    """Base exception class for all tool errors.

    Attributes:
        error_code: Machine-readable error identifier.
        message: Human-readable error description.
        details: Additional structured error information.
    """

    error_code: str
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    severity: ClassVar[str] = "error"

    def __post_init__(self) -> None:
        Exception.__init__(self, self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a dictionary."""
        result: dict[str, Any] = {
            "error": self.error_code,
            "message": self.message,
        }
        if self.details:
            result["details"] = dict(self.details)
        return result

    def to_text(self) -> str:
        return f"Error ({self.error_code}): {self.message}"

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"


# -----------------------------------------------------------------------------
# Dispatch Errors
# -----------------------------------------------------------------------------

@dataclass
class ValidationError(ToolError):
    """Arguments do not satisfy the tool's parameter schema."""

    error_code: str = field(default=ErrorCode.VALIDATION_ERROR)
    message: str = field(default="Arguments do not match the tool schema")
    details: dict[str, Any] = field(default_factory=dict)

    problems: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.problems:
            result["problems"] = list(self.problems)
        return result


@dataclass
class ToolRuntimeError(ToolError):
    """A bound operation raised while executing."""

    error_code: str = field(default=ErrorCode.RUNTIME_ERROR)
    message: str = field(default="Tool execution failed")
    details: dict[str, Any] = field(default_factory=dict)

    exception_type: str | None = field(default=None)

    @classmethod
    def from_exception(cls, exc: BaseException) -> "ToolRuntimeError":
        message = str(exc) or exc.__class__.__name__
        return cls(message=message, exception_type=exc.__class__.__name__)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.exception_type:
            result["exception_type"] = self.exception_type
        return result


@dataclass
class UnsupportedLanguageToolError(ToolError):
    """Source extraction has no rule for the definition's language."""

    error_code: str = field(default=ErrorCode.UNSUPPORTED_LANGUAGE)
    message: str = field(default="No extraction rule for this source")
    details: dict[str, Any] = field(default_factory=dict)

    unit: str | None = field(default=None)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.unit is not None:
            result["unit"] = self.unit
        return result


@dataclass
class ToolNotFoundError(ToolError):
    """No enabled tool is registered under the requested name."""

    error_code: str = field(default=ErrorCode.TOOL_NOT_FOUND)
    message: str = field(default="Tool is not registered or disabled")
    details: dict[str, Any] = field(default_factory=dict)

    tool_name: str | None = field(default=None)


@dataclass
class ConfirmationRequiredError(ToolError):
    """The tool needs operator approval and no approval was obtained."""

    error_code: str = field(default=ErrorCode.CONFIRMATION_REQUIRED)
    message: str = field(default="This tool requires operator confirmation")
    details: dict[str, Any] = field(default_factory=dict)


@dataclass
class ConfirmationDeclinedError(ToolError):
    """The operator refused to run the tool."""

    error_code: str = field(default=ErrorCode.CONFIRMATION_DECLINED)
    message: str = field(default="The operator declined this tool call")
    details: dict[str, Any] = field(default_factory=dict)


@dataclass
class DuplicateInvocationError(ToolError):
    """An async invocation with the same correlation id is still running."""

    error_code: str = field(default=ErrorCode.DUPLICATE_INVOCATION)
    message: str = field(default="An invocation with this correlation id is in flight")
    details: dict[str, Any] = field(default_factory=dict)


__all__ = [
    "ErrorCode",
    "ToolError",
    "ValidationError",
    "ToolRuntimeError",
    "UnsupportedLanguageToolError",
    "ToolNotFoundError",
    "ConfirmationRequiredError",
    "ConfirmationDeclinedError",
    "DuplicateInvocationError",
]
