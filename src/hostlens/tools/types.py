"""Tool declaration and invocation types.

A :class:`ToolSpec` is declared once at startup and never changes. Parameter
schemas are JSON Schema objects, with one extension: ``{"type": "enum",
"enum": [...]}`` declares a closed set of values and is normalised to a plain
``enum`` constraint before validation or export.
"""

from __future__ import annotations

import copy
import uuid
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Mapping, Union

from jsonschema import Draft202012Validator
from jsonschema.exceptions import SchemaError

__all__ = [
    "PARAMETER_TYPES",
    "ToolCategory",
    "ToolDeclarationError",
    "ToolSpec",
    "ToolInvocation",
    "ToolHandler",
    "normalize_schema",
]

PARAMETER_TYPES = frozenset(
    {"string", "number", "integer", "boolean", "object", "array", "null", "enum"}
)

_EMPTY_OBJECT_SCHEMA: Mapping[str, Any] = {"type": "object", "properties": {}}

ToolHandler = Callable[..., Union[Any, Awaitable[Any]]]


# -----------------------------------------------------------------------------
# Tool Categories
# -----------------------------------------------------------------------------


class ToolCategory:
    """Standard tool categories. Informational only."""

    INTROSPECTION = "introspection"
    DOCUMENTATION = "documentation"
    EVALUATION = "evaluation"
    UTILITY = "utility"


class ToolDeclarationError(ValueError):
    """Raised when a tool is declared with an unusable schema."""

    def __init__(self, name: str, problem: str) -> None:
        self.name = name
        self.problem = problem
        super().__init__(f"Tool '{name}' has an invalid declaration: {problem}")


# -----------------------------------------------------------------------------
# Schema normalisation
# -----------------------------------------------------------------------------


def normalize_schema(schema: Mapping[str, Any], *, path: str = "$") -> dict[str, Any]:
    """Return a JSON Schema copy of ``schema`` with ``enum`` types expanded.

    Raises:
        ValueError: If a type outside :data:`PARAMETER_TYPES` is declared, or an
            ``enum`` type has no allowed values.
    """

    result = copy.deepcopy(dict(schema))
    declared = result.get("type")
    if declared is not None:
        types = declared if isinstance(declared, list) else [declared]
        for item in types:
            if item not in PARAMETER_TYPES:
                raise ValueError(f"{path}: unsupported type '{item}'")
        if "enum" in types:
            allowed = result.get("enum")
            if not isinstance(allowed, list) or not allowed:
                raise ValueError(f"{path}: enum type needs a non-empty 'enum' list")
            remaining = [item for item in types if item != "enum"]
            if not remaining:
                result.pop("type")
            elif len(remaining) == 1:
                result["type"] = remaining[0]
            else:
                result["type"] = remaining

    properties = result.get("properties")
    if isinstance(properties, Mapping):
        result["properties"] = {
            name: normalize_schema(sub, path=f"{path}.{name}") for name, sub in properties.items()
        }
    items = result.get("items")
    if isinstance(items, Mapping):
        result["items"] = normalize_schema(items, path=f"{path}[]")
    return result


# -----------------------------------------------------------------------------
# Tool Declarations
# -----------------------------------------------------------------------------


@dataclass(slots=True, frozen=True)
class ToolSpec:
    """Static declaration of an invocable tool.

    Attributes:
        name: Unique identifier for the tool.
        description: Text for the calling agent; opaque to hostlens.
        parameters: Parameter schema (an object schema).
        confirm: Whether an operator must approve each call.
        is_async: Whether results are delivered out of band.
        category: Informational grouping.
    """

    name: str
    description: str
    parameters: Mapping[str, Any] = field(default_factory=lambda: dict(_EMPTY_OBJECT_SCHEMA))
    confirm: bool = False
    is_async: bool = False
    category: str = ToolCategory.UTILITY
    json_schema: dict[str, Any] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ToolDeclarationError(self.name, "name must be non-empty")
        raw = dict(self.parameters) if self.parameters else dict(_EMPTY_OBJECT_SCHEMA)
        if raw.get("type", "object") != "object":
            raise ToolDeclarationError(self.name, "parameters must be an object schema")
        raw.setdefault("type", "object")
        raw.setdefault("properties", {})
        try:
            normalized = normalize_schema(raw)
            Draft202012Validator.check_schema(normalized)
        except (ValueError, SchemaError) as exc:
            message = exc.message if isinstance(exc, SchemaError) else str(exc)
            raise ToolDeclarationError(self.name, message) from exc
        object.__setattr__(self, "json_schema", normalized)

    @property
    def required(self) -> list[str]:
        return list(self.json_schema.get("required", []))

    def to_openai_tool(self) -> dict[str, Any]:
        """Convert to OpenAI tool definition format."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": copy.deepcopy(self.json_schema),
            },
        }

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "name": self.name,
            "description": self.description,
            "parameters": copy.deepcopy(self.json_schema),
            "confirm": self.confirm,
            "async": self.is_async,
            "category": self.category,
        }


# -----------------------------------------------------------------------------
# Tool Invocation
# -----------------------------------------------------------------------------


def _new_correlation_id() -> str:
    return uuid.uuid4().hex


@dataclass(slots=True, frozen=True)
class ToolInvocation:
    """A single request to run a tool."""

    name: str
    arguments: Mapping[str, Any] = field(default_factory=dict)
    correlation_id: str = field(default_factory=_new_correlation_id)
