"""Tests for the symbol registry, completion and definition locator."""

from __future__ import annotations

from typing import Any, Iterable

import pytest

from hostlens.host import ImageHost, LanguageTag, Symbol, SymbolKind
from hostlens.introspection import (
    CompletionFilter,
    DefinitionLocator,
    SourceInspector,
    SpanExtractor,
    SymbolRegistry,
    UnsupportedLanguageError,
    filter_names,
    split_query,
)

ABSENT = "not-a-real-symbol-xyz"


class FlakyHost(ImageHost):
    """Host whose probes and definition finder raise."""

    def is_function(self, name: str) -> bool:
        raise RuntimeError("probe exploded")

    def find_definition(self, name: str, kind: SymbolKind) -> tuple[str, int] | None:
        raise RuntimeError("finder exploded")


# =============================================================================
# SymbolRegistry
# =============================================================================


class TestSymbolRegistry:
    def test_absent_symbol_is_not_found_for_every_kind(self, image_host: ImageHost) -> None:
        registry = SymbolRegistry(image_host)

        assert registry.exists(ABSENT) is False
        assert registry.kind(ABSENT) is None
        for kind in SymbolKind:
            assert registry.has_kind(ABSENT, kind) is False
        assert registry.symbol(ABSENT) == Symbol(ABSENT, SymbolKind.UNKNOWN, exists=False)

    def test_kind_precedence(self, image_host: ImageHost) -> None:
        image_host.define("sample-add", SymbolKind.VARIABLE)
        registry = SymbolRegistry(image_host)

        assert registry.kinds("sample-add") == [SymbolKind.FUNCTION, SymbolKind.VARIABLE]
        assert registry.kind("sample-add") is SymbolKind.FUNCTION
        assert registry.kind("sample-highlight") is SymbolKind.FACE

    def test_interned_symbol_without_definitions(self, image_host: ImageHost) -> None:
        registry = SymbolRegistry(image_host)

        assert registry.exists("sample-plain-symbol")
        assert registry.kind("sample-plain-symbol") is SymbolKind.UNKNOWN
        assert registry.has_kind("sample-plain-symbol", SymbolKind.UNKNOWN)
        assert not registry.has_kind("sample-add", SymbolKind.UNKNOWN)

    def test_empty_name(self, image_host: ImageHost) -> None:
        assert SymbolRegistry(image_host).exists("") is False

    def test_probe_failures_count_as_false(self) -> None:
        host = FlakyHost()
        host.define("broken", SymbolKind.VARIABLE)
        registry = SymbolRegistry(host)

        assert registry.has_kind("broken", SymbolKind.FUNCTION) is False
        assert registry.kind("broken") is SymbolKind.VARIABLE

    def test_names_by_kind(self, image_host: ImageHost) -> None:
        registry = SymbolRegistry(image_host)

        assert list(registry.names(SymbolKind.FACE)) == ["sample-highlight"]
        assert list(registry.names(SymbolKind.VARIABLE)) == [
            "sample-c-variable",
            "sample-counter",
            "sample-buffer-name",
        ]


# =============================================================================
# Completion
# =============================================================================


@pytest.mark.parametrize(
    ("query", "expected"),
    [
        (None, []),
        ("", []),
        ("  ", []),
        ("buf name", ["buf", "name"]),
        ("name-buf", ["name", "buf"]),
        ("a--b  c", ["a", "b", "c"]),
    ],
)
def test_split_query(query: str | None, expected: list[str]) -> None:
    assert split_query(query) == expected


def test_filter_names_any_order_and_dedup() -> None:
    names = ["buffer-file-name", "file-name-buffer", "buffer-size", "buffer-file-name"]

    assert filter_names(names, "name-buf") == ["buffer-file-name", "file-name-buffer"]
    assert filter_names(names, "") == ["buffer-file-name", "file-name-buffer", "buffer-size"]


def test_filter_names_case_sensitivity() -> None:
    names = ["Buffer-Size", "buffer-size"]

    assert filter_names(names, "buffer") == ["buffer-size"]
    assert filter_names(names, "BUFFER", case_sensitive=False) == names


class TestCompletionFilter:
    def test_empty_query_returns_every_name_of_kind(self, image_host: ImageHost) -> None:
        completion = CompletionFilter(SymbolRegistry(image_host))

        assert completion.functions() == [
            "sample-car",
            "sample-add",
            "sample-close-paren",
        ]
        assert completion.faces("") == ["sample-highlight"]

    def test_component_query(self, image_host: ImageHost) -> None:
        completion = CompletionFilter(SymbolRegistry(image_host))

        assert completion.variables("name sample") == ["sample-buffer-name"]
        assert completion.functions("paren close") == ["sample-close-paren"]
        assert completion.functions("counter") == []

    def test_symbols_include_interned(self, image_host: ImageHost) -> None:
        completion = CompletionFilter(SymbolRegistry(image_host))

        assert completion.symbols("plain") == ["sample-plain-symbol"]

    def test_result_is_subset_of_kind(self, image_host: ImageHost) -> None:
        registry = SymbolRegistry(image_host)
        completion = CompletionFilter(registry)

        for name in completion.variables("sample"):
            assert registry.has_kind(name, SymbolKind.VARIABLE)


# =============================================================================
# DefinitionLocator / SourceInspector
# =============================================================================


class TestDefinitionLocator:
    def test_locates_with_language_tag(
        self, image_host: ImageHost, unit_paths: dict[str, str]
    ) -> None:
        locator = DefinitionLocator(image_host)

        lisp = locator.locate("sample-add", SymbolKind.FUNCTION)
        c = locator.locate("sample-car", SymbolKind.FUNCTION)

        assert lisp.unit == unit_paths["lisp"]
        assert lisp.language is LanguageTag.BRACKET
        assert c.unit == unit_paths["c"]
        assert c.language is LanguageTag.BLOCK

    def test_not_found_cases(self, image_host: ImageHost) -> None:
        image_host.define("ghost", SymbolKind.FUNCTION, unit="missing.el", offset=0)
        image_host.define("overshoot", SymbolKind.FUNCTION, unit="tiny.el", offset=99)
        image_host.add_source("tiny.el", "(a)")
        locator = DefinitionLocator(image_host)

        assert locator.locate(ABSENT, SymbolKind.FUNCTION) is None
        assert locator.locate("sample-counter", SymbolKind.FUNCTION) is None
        assert locator.locate("ghost", SymbolKind.FUNCTION) is None
        assert locator.locate("overshoot", SymbolKind.FUNCTION) is None

    def test_host_failure_is_not_found(self) -> None:
        assert DefinitionLocator(FlakyHost()).locate("x", SymbolKind.FUNCTION) is None

    def test_custom_suffix_table(self, image_host: ImageHost) -> None:
        locator = DefinitionLocator(image_host, language_suffixes={".c": "unsupported"})

        location = locator.locate("sample-car", SymbolKind.FUNCTION)

        assert location.language is LanguageTag.UNSUPPORTED


class TestSourceInspector:
    def _inspector(self, host: ImageHost, suffixes: Any = None) -> SourceInspector:
        return SourceInspector(
            DefinitionLocator(host, language_suffixes=suffixes),
            SpanExtractor(host),
        )

    def test_source_of_variable(self, image_host: ImageHost) -> None:
        text = self._inspector(image_host).source("sample-counter", SymbolKind.VARIABLE)

        assert text == '(defvar sample-counter 0\n  "Number of times `sample-add\' ran.")'

    def test_absent_symbol(self, image_host: ImageHost) -> None:
        assert self._inspector(image_host).source(ABSENT, SymbolKind.FUNCTION) is None

    def test_unsupported_language_propagates(self, image_host: ImageHost) -> None:
        inspector = self._inspector(image_host, {".c": "unsupported"})

        with pytest.raises(UnsupportedLanguageError):
            inspector.source("sample-car", SymbolKind.FUNCTION)
