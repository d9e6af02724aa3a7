"""Symbol registry adapter over a host runtime."""

from __future__ import annotations

import logging
from typing import Callable, Iterator

from ..host.runtime import HostRuntime
from ..host.types import Symbol, SymbolKind

__all__ = ["SymbolRegistry", "KIND_ORDER"]

LOGGER = logging.getLogger(__name__)

# Precedence used when a symbol carries several kinds at once.
KIND_ORDER: tuple[SymbolKind, ...] = (
    SymbolKind.FUNCTION,
    SymbolKind.VARIABLE,
    SymbolKind.FACE,
)


class SymbolRegistry:
    """Existence and kind queries against the host's symbol table.

    Every query is side-effect free. Names the host cannot resolve yield
    ``False``/``None``, never an exception.
    """

    def __init__(self, host: HostRuntime) -> None:
        self._host = host
        self._probes: dict[SymbolKind, Callable[[str], bool]] = {
            SymbolKind.FUNCTION: host.is_function,
            SymbolKind.VARIABLE: host.is_variable,
            SymbolKind.FACE: host.is_face,
        }

    @property
    def host(self) -> HostRuntime:
        return self._host

    def has_kind(self, name: str, kind: SymbolKind) -> bool:
        probe = self._probes.get(kind)
        if probe is None:
            return kind is SymbolKind.UNKNOWN and self._is_interned(name) and not self.kinds(name)
        try:
            return bool(probe(name))
        except Exception:
            LOGGER.debug("Host probe for %s (%s) failed", name, kind.value, exc_info=True)
            return False

    def kinds(self, name: str) -> list[SymbolKind]:
        """Every concrete kind ``name`` currently has, in precedence order."""
        return [kind for kind in KIND_ORDER if self.has_kind(name, kind)]

    def exists(self, name: str) -> bool:
        if not name:
            return False
        return bool(self.kinds(name)) or self._is_interned(name)

    def kind(self, name: str) -> SymbolKind | None:
        """Primary kind of ``name``, or ``None`` if it does not exist."""
        kinds = self.kinds(name)
        if kinds:
            return kinds[0]
        if name and self._is_interned(name):
            return SymbolKind.UNKNOWN
        return None

    def symbol(self, name: str) -> Symbol:
        kind = self.kind(name)
        if kind is None:
            return Symbol(name=name, kind=SymbolKind.UNKNOWN, exists=False)
        return Symbol(name=name, kind=kind)

    def names(self, kind: SymbolKind | None = None) -> Iterator[str]:
        """Enumerate names in the host's native order, optionally by kind."""
        for name in self._iter_host_names():
            if kind is None or self.has_kind(name, kind):
                yield name

    def _iter_host_names(self) -> Iterator[str]:
        try:
            yield from self._host.symbol_names()
        except Exception:
            LOGGER.warning("Host symbol enumeration failed", exc_info=True)

    def _is_interned(self, name: str) -> bool:
        return any(candidate == name for candidate in self._iter_host_names())
