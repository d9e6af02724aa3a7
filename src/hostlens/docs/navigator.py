"""Documentation graph navigation for a non-interactive caller."""

from __future__ import annotations

import logging

from .store import DocumentationError, DocumentStore, ManualNotFoundError, NodeNotFoundError

__all__ = ["DocumentationNavigator"]

LOGGER = logging.getLogger(__name__)


class DocumentationNavigator:
    """Enumerate manuals and nodes and fetch node text.

    Missing manuals and nodes are not faults here: the caller can only
    reason over text, so a missing node comes back as its descriptive
    message and a missing manual as an empty listing.
    """

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    def list_manuals(self) -> list[str]:
        manuals: list[str] = []
        for manual in self._store.manual_ids():
            try:
                available = self._store.is_available(manual)
            except DocumentationError:
                available = False
            if available and manual not in manuals:
                manuals.append(manual)
        return manuals

    def list_nodes(self, manual: str) -> list[str]:
        try:
            return list(self._store.node_names(manual))
        except ManualNotFoundError:
            LOGGER.debug("Manual %s is not in the store", manual)
            return []

    def get_node_content(self, manual: str, node: str) -> str:
        try:
            return self._store.node(manual, node).content
        except (NodeNotFoundError, ManualNotFoundError) as exc:
            return str(exc)

    def read_node(self, manual: str, node: str) -> tuple[str, list[str]]:
        """Content and links of one node from a single store read."""

        try:
            found = self._store.node(manual, node)
        except (NodeNotFoundError, ManualNotFoundError) as exc:
            return str(exc), []
        return found.content, list(found.links)

    def list_links(self, manual: str, node: str) -> list[str]:
        try:
            return list(self._store.node(manual, node).links)
        except DocumentationError:
            return []
