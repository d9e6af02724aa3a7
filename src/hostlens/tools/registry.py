"""Tool registry.

Holds the tool declarations and the operations bound to them. Names are
unique: registering a second tool under an existing name is an error.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

from .types import ToolHandler, ToolSpec

__all__ = [
    "ToolRegistry",
    "ToolRegistration",
    "DuplicateToolError",
]

LOGGER = logging.getLogger(__name__)


class DuplicateToolError(Exception):
    """Raised when attempting to register a tool with a name that already exists."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Tool '{name}' is already registered")


@dataclass(slots=True)
class ToolRegistration:
    """Record of a registered tool.

    Attributes:
        spec: Tool declaration.
        handler: Bound operation, called with the arguments as keywords.
        enabled: Whether the tool is currently enabled.
        metadata: Additional registration metadata.
    """

    spec: ToolSpec
    handler: ToolHandler
    enabled: bool = True
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return self.spec.name


class ToolRegistry:
    """Registry for managing tool registrations.

    Example:
        registry = ToolRegistry()
        registry.register(
            ToolSpec(name="greet", description="Greet someone"),
            lambda name="World": f"Hello, {name}!",
        )
    """

    def __init__(self) -> None:
        self._tools: dict[str, ToolRegistration] = {}

    def register(
        self,
        spec: ToolSpec,
        handler: ToolHandler,
        *,
        enabled: bool = True,
        metadata: Mapping[str, Any] | None = None,
    ) -> ToolRegistration:
        """Register ``handler`` under ``spec.name``.

        Raises:
            DuplicateToolError: If the name is already registered.
            TypeError: If ``handler`` is not callable.
        """
        if spec.name in self._tools:
            raise DuplicateToolError(spec.name)
        if not callable(handler):
            raise TypeError(f"Handler for tool '{spec.name}' is not callable")

        registration = ToolRegistration(
            spec=spec,
            handler=handler,
            enabled=enabled,
            metadata=dict(metadata) if metadata else {},
        )
        self._tools[spec.name] = registration
        LOGGER.debug(
            "Registered tool: %s (category=%s, confirm=%s, async=%s)",
            spec.name,
            spec.category,
            spec.confirm,
            spec.is_async,
        )
        return registration

    def unregister(self, name: str) -> bool:
        if name in self._tools:
            del self._tools[name]
            LOGGER.debug("Unregistered tool: %s", name)
            return True
        return False

    def get_registration(self, name: str) -> ToolRegistration | None:
        return self._tools.get(name)

    def get_spec(self, name: str) -> ToolSpec | None:
        registration = self._tools.get(name)
        return registration.spec if registration else None

    def has(self, name: str) -> bool:
        """True if the tool exists and is enabled."""
        registration = self._tools.get(name)
        return registration is not None and registration.enabled

    def list_specs(self, *, include_disabled: bool = False) -> list[ToolSpec]:
        return [
            registration.spec
            for registration in self._tools.values()
            if registration.enabled or include_disabled
        ]

    def list_names(
        self,
        *,
        category: str | None = None,
        include_disabled: bool = False,
    ) -> list[str]:
        return [
            registration.name
            for registration in self._tools.values()
            if (registration.enabled or include_disabled)
            and (category is None or registration.spec.category == category)
        ]

    def to_openai_tools(
        self,
        *,
        filter_names: Sequence[str] | None = None,
    ) -> list[dict[str, Any]]:
        """Tool definitions in OpenAI function-calling format."""
        tools: list[dict[str, Any]] = []
        for registration in self._tools.values():
            if not registration.enabled:
                continue
            if filter_names is not None and registration.name not in filter_names:
                continue
            tools.append(registration.spec.to_openai_tool())
        return tools

    def enable(self, name: str) -> bool:
        registration = self._tools.get(name)
        if registration is None:
            return False
        registration.enabled = True
        return True

    def disable(self, name: str) -> bool:
        registration = self._tools.get(name)
        if registration is None:
            return False
        registration.enabled = False
        return True

    def clear(self) -> None:
        self._tools.clear()

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools
