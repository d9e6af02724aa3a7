"""Value types shared by the host adapters and the introspection layer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import PurePath
from typing import Mapping

__all__ = [
    "SymbolKind",
    "Symbol",
    "LanguageTag",
    "DefinitionLocation",
    "DEFAULT_LANGUAGE_SUFFIXES",
    "language_for_unit",
]


class SymbolKind(str, Enum):
    """Classification of a symbol in the host's symbol table."""

    FUNCTION = "function"
    VARIABLE = "variable"
    FACE = "face"
    UNKNOWN = "unknown"


class LanguageTag(str, Enum):
    """Closed set of source-boundary rules.

    ``BRACKET`` covers parenthesised, Lisp-like sources; ``BLOCK`` covers
    brace-delimited, C-like sources. Everything else is ``UNSUPPORTED``.
    """

    BRACKET = "bracket"
    BLOCK = "block"
    UNSUPPORTED = "unsupported"


@dataclass(slots=True, frozen=True)
class Symbol:
    """A named, classified entity in the host runtime."""

    name: str
    kind: SymbolKind
    exists: bool = True


@dataclass(slots=True, frozen=True)
class DefinitionLocation:
    """Where a symbol's definition starts.

    Attributes:
        unit: Identifier of the source unit (usually a file path).
        offset: 0-based character offset of the definition form.
        language: Boundary rule to use when extracting the span.
    """

    unit: str
    offset: int
    language: LanguageTag


DEFAULT_LANGUAGE_SUFFIXES: Mapping[str, str] = {
    ".el": LanguageTag.BRACKET.value,
    ".lisp": LanguageTag.BRACKET.value,
    ".cl": LanguageTag.BRACKET.value,
    ".scm": LanguageTag.BRACKET.value,
    ".clj": LanguageTag.BRACKET.value,
    ".c": LanguageTag.BLOCK.value,
    ".h": LanguageTag.BLOCK.value,
}


def language_for_unit(unit: str, suffixes: Mapping[str, str] | None = None) -> LanguageTag:
    """Classify a source unit by its file suffix."""

    table = DEFAULT_LANGUAGE_SUFFIXES if suffixes is None else suffixes
    suffix = PurePath(unit).suffix.lower()
    raw = table.get(suffix)
    if raw is None:
        return LanguageTag.UNSUPPORTED
    try:
        return LanguageTag(raw)
    except ValueError:
        return LanguageTag.UNSUPPORTED
