"""Documentation store backed by directories of Markdown files.

Layout::

    <root>/<manual>/<node>.md

Each file is one node. A node's name comes from its front matter
(``node: Name``), else its first heading, else the file stem. Cross
references are ordinary Markdown links whose target is either
``node:Other Node`` or a sibling ``other.md`` file.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Sequence
from urllib.parse import unquote

from markdown_it import MarkdownIt
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .store import TOP_NODE, ManualNode, ManualNotFoundError, NodeNotFoundError

__all__ = ["MarkdownDocumentStore", "parse_node_file"]

LOGGER = logging.getLogger(__name__)

_NODE_SCHEME = "node:"
_SUFFIX = ".md"


@dataclass(slots=True)
class _ParsedNode:
    name: str
    path: Path
    body: str
    hrefs: list[str]


class MarkdownDocumentStore:
    """Read manuals from one or more root directories.

    Files are read on every call; edits on disk show up immediately. When
    two roots provide a manual with the same name the first root wins.
    """

    def __init__(self, roots: Sequence[str | Path], *, encoding: str = "utf-8") -> None:
        self._roots = [Path(root).expanduser() for root in roots]
        self._encoding = encoding
        self._markdown = MarkdownIt("commonmark")

    def manual_ids(self) -> Iterable[str]:
        seen: list[str] = []
        for root in self._roots:
            if not root.is_dir():
                continue
            for child in sorted(root.iterdir()):
                if child.is_dir() and child.name not in seen:
                    seen.append(child.name)
        return seen

    def is_available(self, manual: str) -> bool:
        directory = self._manual_dir(manual)
        return directory is not None and any(directory.glob(f"*{_SUFFIX}"))

    def node_names(self, manual: str) -> Sequence[str]:
        return [parsed.name for parsed in self._load_manual(manual)]

    def node(self, manual: str, name: str) -> ManualNode:
        parsed_nodes = self._load_manual(manual)
        by_file = {parsed.path.name: parsed.name for parsed in parsed_nodes}
        for parsed in parsed_nodes:
            if parsed.name != name:
                continue
            links = _resolve_links(parsed.hrefs, by_file)
            return ManualNode(manual=manual, name=parsed.name, content=parsed.body, links=links)
        raise NodeNotFoundError(manual, name)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def _manual_dir(self, manual: str) -> Path | None:
        if not manual or "/" in manual or "\\" in manual or manual in {".", ".."}:
            return None
        for root in self._roots:
            candidate = root / manual
            if candidate.is_dir():
                return candidate
        return None

    def _load_manual(self, manual: str) -> list[_ParsedNode]:
        directory = self._manual_dir(manual)
        if directory is None:
            raise ManualNotFoundError(manual)
        nodes: list[_ParsedNode] = []
        for path in sorted(directory.glob(f"*{_SUFFIX}")):
            try:
                text = path.read_text(encoding=self._encoding)
            except OSError as exc:
                LOGGER.warning("Skipping unreadable node %s: %s", path, exc)
                continue
            name, body, hrefs = parse_node_file(text, fallback_name=path.stem, markdown=self._markdown)
            nodes.append(_ParsedNode(name=name, path=path, body=body, hrefs=hrefs))
        # The entry node leads, as in a printed manual.
        nodes.sort(key=lambda parsed: parsed.name != TOP_NODE)
        return nodes


def parse_node_file(
    text: str,
    *,
    fallback_name: str,
    markdown: MarkdownIt | None = None,
) -> tuple[str, str, list[str]]:
    """Return ``(node name, body, link targets)`` for a node file."""

    front_matter, body = _split_frontmatter(text)
    metadata = _parse_frontmatter(front_matter)
    renderer = markdown or MarkdownIt("commonmark")
    tokens = renderer.parse(body)

    name = str(metadata.get("node") or "").strip()
    hrefs: list[str] = []
    for index, token in enumerate(tokens):
        if not name and token.type == "heading_open" and index + 1 < len(tokens):
            name = tokens[index + 1].content.strip()
        for child in token.children or ():
            if child.type == "link_open":
                href = child.attrGet("href")
                if href:
                    hrefs.append(str(href))
    return name or fallback_name, body, hrefs


def _resolve_links(hrefs: Iterable[str], by_file: dict[str, str]) -> tuple[str, ...]:
    links: list[str] = []
    for href in hrefs:
        if href.startswith(_NODE_SCHEME):
            target = unquote(href[len(_NODE_SCHEME) :]).strip()
        else:
            target = by_file.get(unquote(href).split("#", 1)[0], "")
        if target and target not in links:
            links.append(target)
    return tuple(links)


def _split_frontmatter(text: str) -> tuple[str | None, str]:
    working = (text or "").lstrip("\ufeff")
    if not working.startswith("---"):
        return None, working
    lines = working.splitlines()
    if not lines or lines[0].strip() != "---":
        return None, working
    for index, line in enumerate(lines[1:], start=1):
        if line.strip() == "---":
            block = "\n".join(lines[1:index])
            remainder = "\n".join(lines[index + 1 :]).lstrip("\r\n")
            return block, remainder
    return None, working


def _parse_frontmatter(block: str | None) -> dict[str, Any]:
    if not block:
        return {}
    parser = YAML(typ="safe")
    parser.allow_duplicate_keys = False
    try:
        loaded = parser.load(block) or {}
    except YAMLError as exc:
        LOGGER.debug("Ignoring malformed front matter: %s", exc)
        return {}
    return dict(loaded) if isinstance(loaded, dict) else {}
