"""Tool declarations, registry and dispatcher.

Example:
    registry = ToolRegistry()
    register_builtin_tools(registry, host=host, store=store)
    dispatcher = ToolDispatcher(registry, on_async_result=deliver)
    result = await dispatcher.call("symbol_exists", {"symbol": "car"})
"""

from .errors import (
    ConfirmationDeclinedError,
    ConfirmationRequiredError,
    DuplicateInvocationError,
    ErrorCode,
    ToolError,
    ToolNotFoundError,
    ToolRuntimeError,
    UnsupportedLanguageToolError,
    ValidationError,
)
from .types import (
    PARAMETER_TYPES,
    ToolCategory,
    ToolDeclarationError,
    ToolHandler,
    ToolInvocation,
    ToolSpec,
    normalize_schema,
)
from .validation import collect_problems, validate_arguments
from .registry import DuplicateToolError, ToolRegistration, ToolRegistry
from .results import DispatchResult, ResultStatus, render_value
from .dispatcher import AsyncResultCallback, ConfirmationGate, DispatchListener, ToolDispatcher
from .builtin import BUILTIN_TOOL_NAMES, BuiltinTools, builtin_specs, register_builtin_tools

__all__ = [
    # Errors
    "ConfirmationDeclinedError",
    "ConfirmationRequiredError",
    "DuplicateInvocationError",
    "ErrorCode",
    "ToolError",
    "ToolNotFoundError",
    "ToolRuntimeError",
    "UnsupportedLanguageToolError",
    "ValidationError",
    # Declarations
    "PARAMETER_TYPES",
    "ToolCategory",
    "ToolDeclarationError",
    "ToolHandler",
    "ToolInvocation",
    "ToolSpec",
    "normalize_schema",
    "collect_problems",
    "validate_arguments",
    # Registry
    "DuplicateToolError",
    "ToolRegistration",
    "ToolRegistry",
    # Dispatch
    "DispatchResult",
    "ResultStatus",
    "render_value",
    "AsyncResultCallback",
    "ConfirmationGate",
    "DispatchListener",
    "ToolDispatcher",
    # Builtins
    "BUILTIN_TOOL_NAMES",
    "BuiltinTools",
    "builtin_specs",
    "register_builtin_tools",
]
