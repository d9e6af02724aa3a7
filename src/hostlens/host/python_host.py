"""Host adapter over a live Python namespace."""

from __future__ import annotations

import inspect
import logging
from pathlib import Path
from typing import Any, Iterable, Mapping, MutableMapping

from .runtime import SourceUnavailableError
from .types import SymbolKind

__all__ = ["PythonHost"]

LOGGER = logging.getLogger(__name__)


class PythonHost:
    """Expose a namespace (typically a module ``__dict__``) as a host.

    Callables are functions and every other binding is a variable. Python
    has no faces; a mapping of named display styles can be injected to
    stand in for them.
    """

    def __init__(
        self,
        namespace: MutableMapping[str, Any],
        *,
        faces: Mapping[str, Any] | None = None,
        encoding: str = "utf-8",
    ) -> None:
        self._namespace = namespace
        self._faces = faces or {}
        self._encoding = encoding

    def symbol_names(self) -> Iterable[str]:
        names = list(self._namespace)
        names.extend(name for name in self._faces if name not in self._namespace)
        return names

    def is_function(self, name: str) -> bool:
        return name in self._namespace and callable(self._namespace[name])

    def is_variable(self, name: str) -> bool:
        return name in self._namespace and not callable(self._namespace[name])

    def is_face(self, name: str) -> bool:
        return name in self._faces

    def find_definition(self, name: str, kind: SymbolKind) -> tuple[str, int] | None:
        if kind is not SymbolKind.FUNCTION or not self.is_function(name):
            return None
        target = inspect.unwrap(self._namespace[name])
        unit = inspect.getsourcefile(target)
        if unit is None:
            return None
        _, first_line = inspect.getsourcelines(target)
        text = self.source_text(unit)
        return unit, _line_offset(text, first_line)

    def source_text(self, unit: str) -> str:
        try:
            return Path(unit).read_text(encoding=self._encoding)
        except OSError:
            raise SourceUnavailableError(unit) from None

    def documentation(self, name: str, kind: SymbolKind) -> str | None:
        if kind is SymbolKind.FUNCTION and self.is_function(name):
            return inspect.getdoc(self._namespace[name])
        if kind is SymbolKind.FACE and name in self._faces:
            face = self._faces[name]
            return face if isinstance(face, str) else inspect.getdoc(face)
        return None

    def variable_value(self, name: str) -> Any:
        if not self.is_variable(name):
            raise LookupError(f"Variable '{name}' is unbound")
        return self._namespace[name]

    def evaluate(self, expression: str) -> Any:
        try:
            code = compile(expression, "<hostlens>", "eval")
        except SyntaxError:
            # Statements (assignments, imports) have no value.
            exec(compile(expression, "<hostlens>", "exec"), self._namespace)
            return None
        return eval(code, self._namespace)


def _line_offset(text: str, line_number: int) -> int:
    # inspect reports 1-based lines; module-level objects report line 0.
    if line_number <= 1:
        return 0
    lines = text.splitlines(keepends=True)
    return sum(len(line) for line in lines[: line_number - 1])
