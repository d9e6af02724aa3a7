"""Documentation store protocol, errors and an in-memory implementation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Protocol, Sequence, runtime_checkable

__all__ = [
    "ManualNode",
    "DocumentStore",
    "DocumentationError",
    "ManualNotFoundError",
    "NodeNotFoundError",
    "InMemoryDocumentStore",
    "TOP_NODE",
]

TOP_NODE = "Top"


class DocumentationError(Exception):
    """Base class for recoverable documentation lookups that failed."""


class ManualNotFoundError(DocumentationError, LookupError):
    """Raised when a manual is absent from the store."""

    def __init__(self, manual: str) -> None:
        self.manual = manual
        super().__init__(f"No manual named '{manual}'")


class NodeNotFoundError(DocumentationError, LookupError):
    """Raised when a node is absent from a manual.

    The message is written for the reader of the documentation and is safe
    to show as ordinary text.
    """

    def __init__(self, manual: str, node: str) -> None:
        self.manual = manual
        self.node = node
        super().__init__(f"No such node or anchor in manual '{manual}': {node}")


@dataclass(slots=True, frozen=True)
class ManualNode:
    """An addressable section of a manual."""

    manual: str
    name: str
    content: str
    links: tuple[str, ...] = field(default_factory=tuple)


@runtime_checkable
class DocumentStore(Protocol):
    """Read access to a hierarchical documentation corpus."""

    def manual_ids(self) -> Iterable[str]:
        ...

    def is_available(self, manual: str) -> bool:
        ...

    def node_names(self, manual: str) -> Sequence[str]:
        """Raises :class:`ManualNotFoundError` for unknown manuals."""
        ...

    def node(self, manual: str, name: str) -> ManualNode:
        """Raises :class:`ManualNotFoundError` or :class:`NodeNotFoundError`."""
        ...


class InMemoryDocumentStore:
    """Dictionary-backed store, used for embedding and tests."""

    def __init__(self) -> None:
        self._manuals: dict[str, dict[str, ManualNode]] = {}

    def add_manual(self, manual: str) -> None:
        self._manuals.setdefault(manual, {})

    def add_node(
        self,
        manual: str,
        name: str,
        content: str,
        links: Sequence[str] = (),
    ) -> ManualNode:
        node = ManualNode(manual=manual, name=name, content=content, links=tuple(links))
        self._manuals.setdefault(manual, {})[name] = node
        return node

    def remove_manual(self, manual: str) -> None:
        self._manuals.pop(manual, None)

    def manual_ids(self) -> Iterable[str]:
        return list(self._manuals)

    def is_available(self, manual: str) -> bool:
        return bool(self._manuals.get(manual))

    def node_names(self, manual: str) -> Sequence[str]:
        try:
            return list(self._manuals[manual])
        except KeyError:
            raise ManualNotFoundError(manual) from None

    def node(self, manual: str, name: str) -> ManualNode:
        try:
            nodes = self._manuals[manual]
        except KeyError:
            raise ManualNotFoundError(manual) from None
        try:
            return nodes[name]
        except KeyError:
            raise NodeNotFoundError(manual, name) from None
