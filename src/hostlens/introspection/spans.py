"""Language-aware source span extraction.

Two boundary rules exist, selected by :class:`~hostlens.host.types.LanguageTag`:

``bracket``
    Scan exactly one balanced top-level form starting at the offset.
``block``
    Skip the declaration and its brace-delimited body, then take a trailing
    ``;`` if it immediately follows.

Sources tagged ``unsupported`` are refused rather than guessed at.
"""

from __future__ import annotations

import logging
from typing import Callable, Mapping

from ..host.runtime import HostRuntime
from ..host.types import DefinitionLocation, LanguageTag
from ..syntax import (
    SpanError,
    UnbalancedFormError,
    block_span_end,
    bracket_span_end,
    skip_blank,
    skip_bracket_form,
)

__all__ = [
    "SpanError",
    "UnbalancedFormError",
    "UnsupportedLanguageError",
    "SpanExtractor",
    "bracket_span_end",
    "block_span_end",
    "extract_span",
    "skip_blank",
    "skip_bracket_form",
]

LOGGER = logging.getLogger(__name__)


class UnsupportedLanguageError(SpanError):
    """Raised for source units that have no boundary rule."""

    def __init__(self, unit: str) -> None:
        self.unit = unit
        super().__init__(f"No extraction rule for source unit '{unit}'")


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

SpanRule = Callable[[str, int], int]

_RULES: Mapping[LanguageTag, SpanRule] = {
    LanguageTag.BRACKET: bracket_span_end,
    LanguageTag.BLOCK: block_span_end,
}


def extract_span(text: str, offset: int, language: LanguageTag, *, unit: str = "<text>") -> str:
    """Return the definition text starting at ``offset``."""

    rule = _RULES.get(language)
    if rule is None:
        raise UnsupportedLanguageError(unit)
    if offset < 0 or offset > len(text):
        raise SpanError(f"Offset {offset} is outside '{unit}'")
    return text[offset : rule(text, offset)]


class SpanExtractor:
    """Turn a :class:`DefinitionLocation` into the exact definition text."""

    def __init__(self, host: HostRuntime) -> None:
        self._host = host

    def extract(self, location: DefinitionLocation) -> str:
        """Extract the span for ``location``.

        Raises:
            UnsupportedLanguageError: If the unit has no boundary rule.
            UnbalancedFormError: If the source is malformed at the offset.
            SourceUnavailableError: If the host cannot produce the unit.
        """

        if location.language not in _RULES:
            raise UnsupportedLanguageError(location.unit)
        text = self._host.source_text(location.unit)
        span = extract_span(text, location.offset, location.language, unit=location.unit)
        LOGGER.debug(
            "Extracted %d chars from %s@%d (%s)",
            len(span),
            location.unit,
            location.offset,
            location.language.value,
        )
        return span
