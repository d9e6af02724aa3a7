"""Protocol describing what hostlens needs from a host runtime."""

from __future__ import annotations

from typing import Any, Iterable, Protocol, runtime_checkable

from .types import SymbolKind

__all__ = [
    "HostRuntime",
    "HostError",
    "SourceUnavailableError",
    "EvaluationUnavailableError",
]


class HostError(Exception):
    """Base class for failures reported by a host adapter."""


class SourceUnavailableError(HostError, LookupError):
    """Raised when a source unit cannot be read."""

    def __init__(self, unit: str) -> None:
        self.unit = unit
        super().__init__(f"Source unit '{unit}' is not available")


class EvaluationUnavailableError(HostError):
    """Raised when the host has no evaluation primitive."""

    def __init__(self, message: str = "This host does not support evaluation") -> None:
        super().__init__(message)


@runtime_checkable
class HostRuntime(Protocol):
    """Read access to a live host, plus its opaque evaluation primitive.

    Implementations must treat every method except :meth:`evaluate` as
    side-effect free. Host state may change between calls; callers never
    cache results.
    """

    def symbol_names(self) -> Iterable[str]:
        """Enumerate symbol names in the host's native order."""
        ...

    def is_function(self, name: str) -> bool:
        ...

    def is_variable(self, name: str) -> bool:
        ...

    def is_face(self, name: str) -> bool:
        ...

    def find_definition(self, name: str, kind: SymbolKind) -> tuple[str, int] | None:
        """Return ``(unit, offset)`` for the definition, or ``None``."""
        ...

    def source_text(self, unit: str) -> str:
        """Return the full text of a source unit.

        Raises:
            SourceUnavailableError: If the unit cannot be read.
        """
        ...

    def documentation(self, name: str, kind: SymbolKind) -> str | None:
        ...

    def variable_value(self, name: str) -> Any:
        """Return the current value of a variable.

        Raises:
            LookupError: If the variable is unbound.
        """
        ...

    def evaluate(self, expression: str) -> Any:
        """Evaluate ``expression`` in the host. May mutate host state."""
        ...
