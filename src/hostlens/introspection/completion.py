"""Component-wise fuzzy completion over symbol names."""

from __future__ import annotations

import re
from typing import Callable, Iterable

from ..host.types import SymbolKind
from .registry import SymbolRegistry

__all__ = ["CompletionFilter", "split_query", "matches", "filter_names"]

NamePredicate = Callable[[str], bool]

_COMPONENT_SPLIT = re.compile(r"[\s\-]+")


def split_query(query: str | None) -> list[str]:
    """Split a query on whitespace and hyphens, dropping empty parts."""
    if not query:
        return []
    return [part for part in _COMPONENT_SPLIT.split(query) if part]


def matches(name: str, components: Iterable[str], *, case_sensitive: bool = True) -> bool:
    """True when every component occurs somewhere in ``name``."""
    haystack = name if case_sensitive else name.lower()
    for component in components:
        needle = component if case_sensitive else component.lower()
        if needle not in haystack:
            return False
    return True


def filter_names(
    names: Iterable[str],
    query: str | None,
    predicate: NamePredicate | None = None,
    *,
    case_sensitive: bool = True,
) -> list[str]:
    """Filter ``names`` keeping their order and dropping duplicates.

    ``"buf name"`` and ``"name-buf"`` both match ``buffer-file-name``: the
    components may appear anywhere, in any order.
    """

    components = split_query(query)
    seen: set[str] = set()
    result: list[str] = []
    for name in names:
        if name in seen:
            continue
        if components and not matches(name, components, case_sensitive=case_sensitive):
            continue
        if predicate is not None and not predicate(name):
            continue
        seen.add(name)
        result.append(name)
    return result


class CompletionFilter:
    """Completion candidates drawn from a :class:`SymbolRegistry`."""

    def __init__(self, registry: SymbolRegistry, *, case_sensitive: bool = True) -> None:
        self._registry = registry
        self._case_sensitive = case_sensitive

    def filter(self, query: str | None, predicate: NamePredicate | None = None) -> list[str]:
        return filter_names(
            self._registry.names(),
            query,
            predicate,
            case_sensitive=self._case_sensitive,
        )

    def of_kind(self, query: str | None, kind: SymbolKind) -> list[str]:
        return self.filter(query, lambda name: self._registry.has_kind(name, kind))

    def functions(self, query: str | None = None) -> list[str]:
        return self.of_kind(query, SymbolKind.FUNCTION)

    def variables(self, query: str | None = None) -> list[str]:
        return self.of_kind(query, SymbolKind.VARIABLE)

    def faces(self, query: str | None = None) -> list[str]:
        return self.of_kind(query, SymbolKind.FACE)

    def symbols(self, query: str | None = None) -> list[str]:
        return self.filter(query)
