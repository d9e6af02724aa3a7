"""Documentation stores and the navigator that reads them."""

from .store import (
    TOP_NODE,
    DocumentationError,
    DocumentStore,
    InMemoryDocumentStore,
    ManualNode,
    ManualNotFoundError,
    NodeNotFoundError,
)
from .markdown_store import MarkdownDocumentStore, parse_node_file
from .navigator import DocumentationNavigator

__all__ = [
    "TOP_NODE",
    "DocumentationError",
    "DocumentStore",
    "InMemoryDocumentStore",
    "ManualNode",
    "ManualNotFoundError",
    "NodeNotFoundError",
    "MarkdownDocumentStore",
    "parse_node_file",
    "DocumentationNavigator",
]
