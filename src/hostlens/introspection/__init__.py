"""Symbol, completion and source introspection over a host runtime."""

from .spans import (
    SpanError,
    SpanExtractor,
    UnbalancedFormError,
    UnsupportedLanguageError,
    block_span_end,
    bracket_span_end,
    extract_span,
)
from .registry import KIND_ORDER, SymbolRegistry
from .completion import CompletionFilter, filter_names, split_query
from .locator import DefinitionLocator, SourceInspector

__all__ = [
    "SpanError",
    "SpanExtractor",
    "UnbalancedFormError",
    "UnsupportedLanguageError",
    "block_span_end",
    "bracket_span_end",
    "extract_span",
    "KIND_ORDER",
    "SymbolRegistry",
    "CompletionFilter",
    "filter_names",
    "split_query",
    "DefinitionLocator",
    "SourceInspector",
]
