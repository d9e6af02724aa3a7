"""In-memory symbol image host.

``ImageHost`` keeps a snapshot of a host's symbol table and source units in
insertion-ordered dictionaries. It is deterministic, which makes it the host
of choice for tests, and it can index a tree of Lisp or C sources so the CLI
can answer questions about code that is not loaded in this process.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Iterable, Iterator, Mapping, Sequence

from ..syntax import skip_blank, skip_bracket_form
from .runtime import EvaluationUnavailableError, SourceUnavailableError
from .types import LanguageTag, SymbolKind, language_for_unit

__all__ = ["Definition", "ImageHost", "index_bracket_source", "index_block_source"]

LOGGER = logging.getLogger(__name__)

Evaluator = Callable[[str], Any]

_BRACKET_DEFINERS: Mapping[str, SymbolKind] = {
    "defun": SymbolKind.FUNCTION,
    "defmacro": SymbolKind.FUNCTION,
    "defsubst": SymbolKind.FUNCTION,
    "cl-defun": SymbolKind.FUNCTION,
    "cl-defmacro": SymbolKind.FUNCTION,
    "cl-defgeneric": SymbolKind.FUNCTION,
    "define-derived-mode": SymbolKind.FUNCTION,
    "define-minor-mode": SymbolKind.FUNCTION,
    "defvar": SymbolKind.VARIABLE,
    "defvar-local": SymbolKind.VARIABLE,
    "defcustom": SymbolKind.VARIABLE,
    "defconst": SymbolKind.VARIABLE,
    "defface": SymbolKind.FACE,
}
# Number of forms between the name and the docstring.
_DOC_OFFSETS: Mapping[str, int] = {
    "define-minor-mode": 0,
    "define-derived-mode": 2,
}
_BRACKET_DEF_PATTERN = re.compile(
    r"^\((?P<definer>" + "|".join(re.escape(d) for d in sorted(_BRACKET_DEFINERS, key=len, reverse=True))
    + r")\s+(?P<name>[^\s()\"';]+)",
    re.MULTILINE,
)
_BLOCK_DEF_PATTERN = re.compile(
    r"^[ \t]*(?P<macro>DEFUN|DEFVAR_LISP|DEFVAR_LISP_NOPRO|DEFVAR_INT|DEFVAR_BOOL|DEFVAR_PER_BUFFER)"
    r"\s*\(\s*\"(?P<name>[^\"]+)\"",
    re.MULTILINE,
)
_BLOCK_DOC_PATTERN = re.compile(r"doc:\s*/\*(?P<doc>.*?)\*/", re.DOTALL)


@dataclass(slots=True)
class Definition:
    """One kind of definition recorded for a symbol."""

    name: str
    kind: SymbolKind
    unit: str | None = None
    offset: int | None = None
    documentation: str | None = None


class ImageHost:
    """Deterministic host backed by an in-memory symbol image.

    Example:
        host = ImageHost()
        host.add_source("subr.el", "(defun add-one (x) (1+ x))")
        host.define("add-one", SymbolKind.FUNCTION, unit="subr.el", offset=0)
    """

    def __init__(self, *, evaluator: Evaluator | None = None) -> None:
        self._symbols: dict[str, dict[SymbolKind, Definition]] = {}
        self._values: dict[str, Any] = {}
        self._sources: dict[str, str] = {}
        self._evaluator = evaluator

    # ------------------------------------------------------------------
    # Building the image
    # ------------------------------------------------------------------

    def intern(self, name: str) -> None:
        """Add ``name`` to the symbol table without any definition."""
        self._symbols.setdefault(name, {})

    def define(
        self,
        name: str,
        kind: SymbolKind,
        *,
        unit: str | None = None,
        offset: int | None = None,
        documentation: str | None = None,
    ) -> Definition:
        if kind is SymbolKind.UNKNOWN:
            raise ValueError("Definitions need a concrete kind")
        definition = Definition(
            name=name,
            kind=kind,
            unit=unit,
            offset=offset,
            documentation=documentation,
        )
        self._symbols.setdefault(name, {})[kind] = definition
        return definition

    def undefine(self, name: str, kind: SymbolKind | None = None) -> None:
        """Drop one kind of definition, or the whole symbol."""
        if kind is None:
            self._symbols.pop(name, None)
            self._values.pop(name, None)
            return
        self._symbols.get(name, {}).pop(kind, None)

    def set_value(self, name: str, value: Any) -> None:
        if SymbolKind.VARIABLE not in self._symbols.get(name, {}):
            self.define(name, SymbolKind.VARIABLE)
        self._values[name] = value

    def add_source(self, unit: str, text: str) -> None:
        self._sources[unit] = text

    def set_evaluator(self, evaluator: Evaluator | None) -> None:
        self._evaluator = evaluator

    @classmethod
    def from_source_tree(
        cls,
        roots: Sequence[str | Path],
        *,
        suffixes: Mapping[str, str] | None = None,
        evaluator: Evaluator | None = None,
        encoding: str = "utf-8",
    ) -> "ImageHost":
        """Index every supported source file below ``roots``.

        Files are visited in sorted order so the resulting symbol order is
        stable across runs.
        """

        host = cls(evaluator=evaluator)
        for path in _iter_source_files(roots):
            language = language_for_unit(str(path), suffixes)
            if language is LanguageTag.UNSUPPORTED:
                continue
            try:
                text = path.read_text(encoding=encoding, errors="replace")
            except OSError as exc:
                LOGGER.warning("Skipping unreadable source %s: %s", path, exc)
                continue
            unit = str(path)
            host.add_source(unit, text)
            if language is LanguageTag.BRACKET:
                definitions = index_bracket_source(unit, text)
            else:
                definitions = index_block_source(unit, text)
            for definition in definitions:
                host.define(
                    definition.name,
                    definition.kind,
                    unit=definition.unit,
                    offset=definition.offset,
                    documentation=definition.documentation,
                )
        LOGGER.debug(
            "Indexed %d symbols from %d source units", len(host._symbols), len(host._sources)
        )
        return host

    # ------------------------------------------------------------------
    # HostRuntime
    # ------------------------------------------------------------------

    def symbol_names(self) -> Iterable[str]:
        return list(self._symbols)

    def is_function(self, name: str) -> bool:
        return SymbolKind.FUNCTION in self._symbols.get(name, {})

    def is_variable(self, name: str) -> bool:
        return SymbolKind.VARIABLE in self._symbols.get(name, {})

    def is_face(self, name: str) -> bool:
        return SymbolKind.FACE in self._symbols.get(name, {})

    def find_definition(self, name: str, kind: SymbolKind) -> tuple[str, int] | None:
        definition = self._symbols.get(name, {}).get(kind)
        if definition is None or definition.unit is None or definition.offset is None:
            return None
        return definition.unit, definition.offset

    def source_text(self, unit: str) -> str:
        try:
            return self._sources[unit]
        except KeyError:
            raise SourceUnavailableError(unit) from None

    def documentation(self, name: str, kind: SymbolKind) -> str | None:
        definition = self._symbols.get(name, {}).get(kind)
        return definition.documentation if definition else None

    def variable_value(self, name: str) -> Any:
        if name not in self._values:
            raise LookupError(f"Variable '{name}' is unbound")
        return self._values[name]

    def evaluate(self, expression: str) -> Any:
        if self._evaluator is None:
            raise EvaluationUnavailableError()
        return self._evaluator(expression)


# ---------------------------------------------------------------------------
# Source indexing
# ---------------------------------------------------------------------------


def index_bracket_source(unit: str, text: str) -> list[Definition]:
    """Find top-level definition forms in a Lisp-like source."""

    definitions: list[Definition] = []
    for match in _BRACKET_DEF_PATTERN.finditer(text):
        definer = match.group("definer")
        definitions.append(
            Definition(
                name=match.group("name"),
                kind=_BRACKET_DEFINERS[definer],
                unit=unit,
                offset=match.start(),
                documentation=_bracket_docstring(text, match.end(), definer),
            )
        )
    return definitions


def index_block_source(unit: str, text: str) -> list[Definition]:
    """Find ``DEFUN``/``DEFVAR_*`` declarations in a C-like source."""

    definitions: list[Definition] = []
    for match in _BLOCK_DEF_PATTERN.finditer(text):
        kind = SymbolKind.FUNCTION if match.group("macro") == "DEFUN" else SymbolKind.VARIABLE
        definitions.append(
            Definition(
                name=match.group("name"),
                kind=kind,
                unit=unit,
                offset=match.start("macro"),
                documentation=_block_docstring(text, match.end()),
            )
        )
    return definitions


def _bracket_docstring(text: str, position: int, definer: str) -> str | None:
    # Skip the arglist (functions) or the initial value (variables, faces).
    try:
        position = skip_blank(text, position, comment_start=";")
        for _ in range(_DOC_OFFSETS.get(definer, 1)):
            if position >= len(text) or text[position] == ")":
                return None
            position = skip_bracket_form(text, position)
            position = skip_blank(text, position, comment_start=";")
        if position >= len(text) or text[position] != '"':
            return None
        end = skip_bracket_form(text, position)
    except ValueError:
        return None
    return _unescape_lisp_string(text[position + 1 : end - 1])


def _block_docstring(text: str, position: int) -> str | None:
    # The doc comment belongs to this declaration only if no statement or
    # body starts before it.
    match = _BLOCK_DOC_PATTERN.search(text, position)
    if match is None:
        return None
    between = text[position : match.start()]
    if ";" in between or "{" in between:
        return None
    return match.group("doc").strip() or None


def _unescape_lisp_string(raw: str) -> str:
    out: list[str] = []
    chars = iter(raw)
    for char in chars:
        if char == "\\":
            nxt = next(chars, "")
            if nxt == "n":
                out.append("\n")
            elif nxt == "\n":
                continue
            else:
                out.append(nxt)
        else:
            out.append(char)
    return "".join(out)


def _iter_source_files(roots: Sequence[str | Path]) -> Iterator[Path]:
    for root in roots:
        base = Path(root).expanduser()
        if base.is_file():
            yield base
            continue
        if not base.is_dir():
            LOGGER.warning("Source root %s does not exist", base)
            continue
        for path in sorted(base.rglob("*")):
            if path.is_file():
                yield path
