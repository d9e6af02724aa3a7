"""Definition lookup and source retrieval."""

from __future__ import annotations

import logging
from typing import Mapping

from ..host.runtime import HostRuntime
from ..host.types import DefinitionLocation, SymbolKind, language_for_unit
from .spans import SpanExtractor

__all__ = ["DefinitionLocator", "SourceInspector"]

LOGGER = logging.getLogger(__name__)


class DefinitionLocator:
    """Resolve a symbol and kind to a concrete source location.

    Resolution goes through the host's own definition finder. Any failure
    (an exception, no answer, an unreadable unit, an offset outside the
    unit) is reported as ``None``.
    """

    def __init__(
        self,
        host: HostRuntime,
        *,
        language_suffixes: Mapping[str, str] | None = None,
    ) -> None:
        self._host = host
        self._suffixes = language_suffixes

    def locate(self, symbol: str, kind: SymbolKind) -> DefinitionLocation | None:
        try:
            found = self._host.find_definition(symbol, kind)
        except Exception:
            LOGGER.debug("Host could not find %s %s", kind.value, symbol, exc_info=True)
            return None
        if found is None:
            return None

        unit, offset = found
        try:
            length = len(self._host.source_text(unit))
        except Exception:
            LOGGER.debug("Source unit %s for %s is unavailable", unit, symbol, exc_info=True)
            return None
        if not 0 <= offset < length:
            LOGGER.debug("Offset %s for %s lies outside %s", offset, symbol, unit)
            return None

        return DefinitionLocation(
            unit=unit,
            offset=offset,
            language=language_for_unit(unit, self._suffixes),
        )


class SourceInspector:
    """Locate a definition and extract its text in one step."""

    def __init__(self, locator: DefinitionLocator, extractor: SpanExtractor) -> None:
        self._locator = locator
        self._extractor = extractor

    def source(self, symbol: str, kind: SymbolKind) -> str | None:
        """Definition text, or ``None`` if the symbol cannot be located.

        Raises:
            UnsupportedLanguageError: If the definition lives in a source
                unit without a boundary rule.
        """

        location = self._locator.locate(symbol, kind)
        if location is None:
            return None
        return self._extractor.extract(location)
