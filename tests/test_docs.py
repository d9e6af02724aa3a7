"""Tests for documentation stores and the navigator."""

from __future__ import annotations

from pathlib import Path

import pytest

from hostlens.docs import (
    DocumentationNavigator,
    DocumentStore,
    InMemoryDocumentStore,
    ManualNotFoundError,
    MarkdownDocumentStore,
    NodeNotFoundError,
    parse_node_file,
)


# =============================================================================
# Navigator over the in-memory store
# =============================================================================


class TestDocumentationNavigator:
    def test_list_manuals_filters_unavailable(self, doc_store: InMemoryDocumentStore) -> None:
        navigator = DocumentationNavigator(doc_store)

        assert navigator.list_manuals() == ["sample"]

    def test_list_nodes(self, doc_store: InMemoryDocumentStore) -> None:
        navigator = DocumentationNavigator(doc_store)

        assert navigator.list_nodes("sample") == ["Top", "Overview", "Index"]
        assert navigator.list_nodes("empty") == []

    def test_absent_manual_yields_empty_node_list(self, doc_store: InMemoryDocumentStore) -> None:
        assert DocumentationNavigator(doc_store).list_nodes("foo") == []

    def test_get_node_content(self, doc_store: InMemoryDocumentStore) -> None:
        navigator = DocumentationNavigator(doc_store)

        assert navigator.get_node_content("sample", "Overview") == "An overview of samples.\n"

    def test_missing_node_returns_message(self, doc_store: InMemoryDocumentStore) -> None:
        content = DocumentationNavigator(doc_store).get_node_content("sample", "Nowhere")

        assert content == "No such node or anchor in manual 'sample': Nowhere"

    def test_missing_manual_content_is_text(self, doc_store: InMemoryDocumentStore) -> None:
        content = DocumentationNavigator(doc_store).get_node_content("foo", "Top")

        assert isinstance(content, str) and content

    def test_list_links(self, doc_store: InMemoryDocumentStore) -> None:
        navigator = DocumentationNavigator(doc_store)

        assert navigator.list_links("sample", "Top") == ["Overview", "Index"]
        assert navigator.list_links("sample", "Nowhere") == []
        assert navigator.list_links("foo", "Top") == []

    def test_read_node_returns_content_and_links(self, doc_store: InMemoryDocumentStore) -> None:
        navigator = DocumentationNavigator(doc_store)

        assert navigator.read_node("sample", "Top") == ("The sample manual.\n", ["Overview", "Index"])
        content, links = navigator.read_node("sample", "Nowhere")
        assert content == navigator.get_node_content("sample", "Nowhere")
        assert links == []
        assert navigator.read_node("foo", "Top")[1] == []


def test_in_memory_store_errors(doc_store: InMemoryDocumentStore) -> None:
    assert isinstance(doc_store, DocumentStore)
    with pytest.raises(ManualNotFoundError):
        doc_store.node_names("foo")
    with pytest.raises(NodeNotFoundError):
        doc_store.node("sample", "Nowhere")

    doc_store.remove_manual("sample")
    assert doc_store.is_available("sample") is False


# =============================================================================
# Markdown store
# =============================================================================


def _write(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


@pytest.fixture
def manual_root(tmp_path: Path) -> Path:
    root = tmp_path / "manuals"
    _write(
        root / "elisp" / "index.md",
        "---\nnode: Top\n---\n# Emacs Lisp\n\nSee [Lists](lists.md) and [Strings](<node:Strings and Characters>).\n",
    )
    _write(
        root / "elisp" / "lists.md",
        "# Lists\n\nBack to [the top](node:Top). A [site](https://example.com).\n",
    )
    _write(root / "elisp" / "strings.md", "# Strings and Characters\n\nText.\n")
    _write(root / "elisp" / "notes.md", "No heading here.\n")
    _write(root / "elisp" / "image.png", "not markdown")
    (root / "drafts").mkdir()
    return root


class TestMarkdownDocumentStore:
    def test_manuals_need_node_files(self, manual_root: Path) -> None:
        store = MarkdownDocumentStore([manual_root])
        navigator = DocumentationNavigator(store)

        assert list(store.manual_ids()) == ["drafts", "elisp"]
        assert navigator.list_manuals() == ["elisp"]

    def test_node_names_top_first(self, manual_root: Path) -> None:
        store = MarkdownDocumentStore([manual_root])

        assert store.node_names("elisp") == [
            "Top",
            "Lists",
            "notes",
            "Strings and Characters",
        ]

    def test_node_links(self, manual_root: Path) -> None:
        store = MarkdownDocumentStore([manual_root])

        top = store.node("elisp", "Top")
        lists = store.node("elisp", "Lists")

        assert top.links == ("Lists", "Strings and Characters")
        assert lists.links == ("Top",)
        assert top.content.startswith("# Emacs Lisp")

    def test_missing_manual_and_node(self, manual_root: Path) -> None:
        store = MarkdownDocumentStore([manual_root])
        navigator = DocumentationNavigator(store)

        assert navigator.list_nodes("foo") == []
        assert navigator.list_nodes("../manuals") == []
        assert "Nowhere" in navigator.get_node_content("elisp", "Nowhere")

    def test_first_root_wins(self, manual_root: Path, tmp_path: Path) -> None:
        other = tmp_path / "other"
        _write(other / "elisp" / "top.md", "# Shadowed\n")
        _write(other / "extra" / "top.md", "# Top\n")
        store = MarkdownDocumentStore([manual_root, other])

        assert "Shadowed" not in store.node_names("elisp")
        assert store.node_names("extra") == ["Top"]

    def test_edits_show_up_immediately(self, manual_root: Path) -> None:
        store = MarkdownDocumentStore([manual_root])
        _write(manual_root / "elisp" / "new.md", "# Fresh\n")

        assert "Fresh" in store.node_names("elisp")


def test_parse_node_file_with_bad_front_matter() -> None:
    name, body, hrefs = parse_node_file(
        "---\nnode: [unclosed\n---\n# Heading\n[x](y.md)\n",
        fallback_name="stem",
    )

    assert name == "Heading"
    assert body.startswith("# Heading")
    assert hrefs == ["y.md"]


def test_parse_node_file_fallback_name() -> None:
    name, _, hrefs = parse_node_file("\ufeffplain text\n", fallback_name="stem")

    assert name == "stem"
    assert hrefs == []
