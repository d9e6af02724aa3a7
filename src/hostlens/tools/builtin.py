"""Builtin tool set.

Binds the introspection and documentation components to named tools that an
agent can call. Absent symbols, manuals and nodes are answered with empty or
descriptive text; only genuine failures surface as errors.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Iterable, Mapping

from ..docs import DocumentationNavigator, DocumentStore
from ..host import HostRuntime, SymbolKind
from ..introspection import (
    CompletionFilter,
    DefinitionLocator,
    SourceInspector,
    SpanExtractor,
    SymbolRegistry,
)
from .registry import ToolRegistry
from .types import ToolCategory, ToolSpec

if TYPE_CHECKING:  # pragma: no cover
    from ..services.settings import Settings

__all__ = ["BUILTIN_TOOL_NAMES", "BuiltinTools", "builtin_specs", "register_builtin_tools"]

LOGGER = logging.getLogger(__name__)

_KIND_VALUES = [SymbolKind.FUNCTION.value, SymbolKind.VARIABLE.value, SymbolKind.FACE.value]

_KIND_NOUNS = {
    SymbolKind.FUNCTION: "function definition",
    SymbolKind.VARIABLE: "variable definition",
    SymbolKind.FACE: "face definition",
}


def _symbol_param(description: str = "Exact symbol name.") -> dict[str, Any]:
    return {"type": "string", "description": description}


def _object_params(properties: Mapping[str, Any], required: Iterable[str] = ()) -> dict[str, Any]:
    # Handlers take keyword arguments, so unknown keys are rejected up front.
    schema: dict[str, Any] = {
        "type": "object",
        "properties": dict(properties),
        "additionalProperties": False,
    }
    required = list(required)
    if required:
        schema["required"] = required
    return schema


def _query_params() -> dict[str, Any]:
    return _object_params(
        {
            "query": {
                "type": "string",
                "description": (
                    "Words separated by spaces or hyphens; every word must occur in the name. "
                    "Empty matches everything."
                ),
            },
        }
    )


def _symbol_params(*, with_kind: bool = False) -> dict[str, Any]:
    properties: dict[str, Any] = {"symbol": _symbol_param()}
    required = ["symbol"]
    if with_kind:
        properties["kind"] = {
            "type": "enum",
            "enum": list(_KIND_VALUES),
            "description": "Which definition of the symbol to use.",
        }
        required.append("kind")
    return _object_params(properties, required)


def builtin_specs() -> list[ToolSpec]:
    """Declarations for every builtin tool, in registration order."""

    intro = ToolCategory.INTROSPECTION
    docs = ToolCategory.DOCUMENTATION
    return [
        ToolSpec(
            name="symbol_exists",
            description="Whether a symbol is known to the host.",
            parameters=_symbol_params(),
            category=intro,
        ),
        ToolSpec(
            name="symbol_kind",
            description="The primary kind of a symbol: function, variable, face or unknown. Empty if absent.",
            parameters=_symbol_params(),
            category=intro,
        ),
        ToolSpec(
            name="list_functions",
            description="Names of functions matching a completion query.",
            parameters=_query_params(),
            category=intro,
        ),
        ToolSpec(
            name="list_variables",
            description="Names of variables matching a completion query.",
            parameters=_query_params(),
            category=intro,
        ),
        ToolSpec(
            name="list_faces",
            description="Names of faces matching a completion query.",
            parameters=_query_params(),
            category=intro,
        ),
        ToolSpec(
            name="symbol_source",
            description="Source text of the definition of a symbol.",
            parameters=_symbol_params(with_kind=True),
            category=intro,
        ),
        ToolSpec(
            name="symbol_documentation",
            description="Documentation string of a symbol.",
            parameters=_symbol_params(with_kind=True),
            category=intro,
        ),
        ToolSpec(
            name="variable_value",
            description="Current value of a variable.",
            parameters=_symbol_params(),
            category=intro,
        ),
        ToolSpec(
            name="list_manuals",
            description="Identifiers of the available manuals.",
            parameters=_object_params({}),
            category=docs,
        ),
        ToolSpec(
            name="list_manual_nodes",
            description="Node names of a manual. Empty if the manual is absent.",
            parameters=_object_params({"manual": {"type": "string"}}, ["manual"]),
            category=docs,
        ),
        ToolSpec(
            name="read_manual_node",
            description="Text of one manual node, with its outgoing links.",
            parameters=_object_params(
                {"manual": {"type": "string"}, "node": {"type": "string"}},
                ["manual", "node"],
            ),
            is_async=True,
            category=docs,
        ),
        ToolSpec(
            name="evaluate_expression",
            description="Evaluate an expression in the host. May change host state.",
            parameters=_object_params({"expression": {"type": "string"}}, ["expression"]),
            confirm=True,
            category=ToolCategory.EVALUATION,
        ),
    ]


BUILTIN_TOOL_NAMES = tuple(spec.name for spec in builtin_specs())


class BuiltinTools:
    """Handlers for the builtin tools, bound to one host and one store."""

    def __init__(
        self,
        host: HostRuntime,
        store: DocumentStore,
        *,
        language_suffixes: Mapping[str, str] | None = None,
        case_sensitive: bool = True,
    ) -> None:
        self._host = host
        self._symbols = SymbolRegistry(host)
        self._completion = CompletionFilter(self._symbols, case_sensitive=case_sensitive)
        self._inspector = SourceInspector(
            DefinitionLocator(host, language_suffixes=language_suffixes),
            SpanExtractor(host),
        )
        self._navigator = DocumentationNavigator(store)

    @property
    def navigator(self) -> DocumentationNavigator:
        return self._navigator

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def symbol_exists(self, symbol: str) -> bool:
        return self._symbols.exists(symbol)

    def symbol_kind(self, symbol: str) -> str | None:
        kind = self._symbols.kind(symbol)
        return kind.value if kind is not None else None

    def list_functions(self, query: str = "") -> list[str]:
        return self._completion.functions(query)

    def list_variables(self, query: str = "") -> list[str]:
        return self._completion.variables(query)

    def list_faces(self, query: str = "") -> list[str]:
        return self._completion.faces(query)

    def symbol_source(self, symbol: str, kind: str) -> str:
        symbol_kind = SymbolKind(kind)
        text = self._inspector.source(symbol, symbol_kind)
        if text is None:
            return f"Symbol '{symbol}' has no {_KIND_NOUNS[symbol_kind]}."
        return text

    def symbol_documentation(self, symbol: str, kind: str) -> str:
        symbol_kind = SymbolKind(kind)
        if not self._symbols.has_kind(symbol, symbol_kind):
            return f"Symbol '{symbol}' has no {_KIND_NOUNS[symbol_kind]}."
        doc = self._host.documentation(symbol, symbol_kind)
        if not doc:
            return f"Symbol '{symbol}' is not documented."
        return doc

    def variable_value(self, symbol: str) -> Any:
        if not self._symbols.has_kind(symbol, SymbolKind.VARIABLE):
            return f"Symbol '{symbol}' is not a variable."
        try:
            value = self._host.variable_value(symbol)
        except LookupError:
            LOGGER.debug("Variable %s is unbound", symbol)
            return f"Variable '{symbol}' is void."
        return repr(value) if not isinstance(value, (str, int, float, bool)) else value

    # ------------------------------------------------------------------
    # Documentation
    # ------------------------------------------------------------------

    def list_manuals(self) -> list[str]:
        return self._navigator.list_manuals()

    def list_manual_nodes(self, manual: str) -> list[str]:
        return self._navigator.list_nodes(manual)

    def read_manual_node(self, manual: str, node: str) -> str:
        # Blocking store I/O; the dispatcher runs async tools off the loop.
        content, links = self._navigator.read_node(manual, node)
        if not links:
            return content
        return content.rstrip("\n") + "\n\nLinks:\n" + "\n".join(f"- {link}" for link in links)

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def evaluate_expression(self, expression: str) -> Any:
        LOGGER.info("Evaluating expression (%d chars)", len(expression))
        value = self._host.evaluate(expression)
        if value is None or isinstance(value, (str, int, float, bool)):
            return value
        return repr(value)

    def handler_for(self, name: str):
        return getattr(self, name)


def register_builtin_tools(
    registry: ToolRegistry,
    *,
    host: HostRuntime,
    store: DocumentStore,
    settings: "Settings | None" = None,
    language_suffixes: Mapping[str, str] | None = None,
    disabled: Iterable[str] = (),
    case_sensitive: bool | None = None,
) -> BuiltinTools:
    """Register every builtin tool on ``registry``.

    Args:
        registry: Target registry.
        host: Runtime whose symbols are inspected.
        store: Manual storage for the documentation tools.
        settings: When given, supplies language suffixes, disabled tools and
            completion case sensitivity.
        language_suffixes: Suffix to language tag overrides.
        disabled: Tool names to register in the disabled state.
        case_sensitive: Whether completion queries match case. Defaults to
            the settings value, else ``True``.

    Returns:
        The handler object the tools are bound to.
    """

    disabled_names = set(disabled)
    if settings is not None:
        disabled_names.update(settings.disabled_tools)
        if language_suffixes is None:
            language_suffixes = settings.language_tags()
        if case_sensitive is None:
            case_sensitive = settings.case_sensitive_completion

    unknown = disabled_names.difference(BUILTIN_TOOL_NAMES)
    if unknown:
        LOGGER.warning("Ignoring unknown tools in disabled list: %s", ", ".join(sorted(unknown)))

    tools = BuiltinTools(
        host,
        store,
        language_suffixes=language_suffixes,
        case_sensitive=True if case_sensitive is None else case_sensitive,
    )
    for spec in builtin_specs():
        registry.register(
            spec,
            tools.handler_for(spec.name),
            enabled=spec.name not in disabled_names,
            metadata={"builtin": True},
        )
    LOGGER.debug(
        "Registered %d builtin tools (%d disabled)",
        len(BUILTIN_TOOL_NAMES),
        len(disabled_names & set(BUILTIN_TOOL_NAMES)),
    )
    return tools
