"""Host runtime adapters.

Example:
    from hostlens.host import ImageHost, SymbolKind

    host = ImageHost.from_source_tree(["lisp/"])
    host.is_function("add-one")
"""

from .types import (
    DEFAULT_LANGUAGE_SUFFIXES,
    DefinitionLocation,
    LanguageTag,
    Symbol,
    SymbolKind,
    language_for_unit,
)
from .runtime import (
    EvaluationUnavailableError,
    HostError,
    HostRuntime,
    SourceUnavailableError,
)
from .image import Definition, ImageHost
from .python_host import PythonHost

__all__ = [
    # types.py
    "DEFAULT_LANGUAGE_SUFFIXES",
    "DefinitionLocation",
    "LanguageTag",
    "Symbol",
    "SymbolKind",
    "language_for_unit",
    # runtime.py
    "EvaluationUnavailableError",
    "HostError",
    "HostRuntime",
    "SourceUnavailableError",
    # image.py
    "Definition",
    "ImageHost",
    # python_host.py
    "PythonHost",
]
