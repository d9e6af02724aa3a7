"""Shared pytest fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from hostlens.docs import InMemoryDocumentStore
from hostlens.host import ImageHost
from hostlens.tools import ToolDispatcher, ToolRegistry, register_builtin_tools
from tests.helpers import C_SOURCE, LISP_SOURCE


@pytest.fixture
def source_tree(tmp_path: Path) -> Path:
    root = tmp_path / "src"
    root.mkdir()
    (root / "sample.el").write_text(LISP_SOURCE, encoding="utf-8")
    (root / "data.c").write_text(C_SOURCE, encoding="utf-8")
    (root / "notes.txt").write_text("(defun not-indexed () nil)\n", encoding="utf-8")
    return root


@pytest.fixture
def image_host(source_tree: Path) -> ImageHost:
    host = ImageHost.from_source_tree([source_tree], evaluator=lambda expression: f"=> {expression}")
    host.set_value("sample-counter", 3)
    host.intern("sample-plain-symbol")
    return host


@pytest.fixture
def unit_paths(source_tree: Path) -> dict[str, str]:
    return {
        "lisp": str(source_tree / "sample.el"),
        "c": str(source_tree / "data.c"),
    }


@pytest.fixture
def doc_store() -> InMemoryDocumentStore:
    store = InMemoryDocumentStore()
    store.add_node("sample", "Top", "The sample manual.\n", links=["Overview", "Index"])
    store.add_node("sample", "Overview", "An overview of samples.\n", links=["Top"])
    store.add_node("sample", "Index", "Index of concepts.\n")
    store.add_manual("empty")
    return store


@pytest.fixture
def registry() -> ToolRegistry:
    """Create a fresh tool registry."""
    return ToolRegistry()


@pytest.fixture
def builtin_registry(image_host: ImageHost, doc_store: InMemoryDocumentStore) -> ToolRegistry:
    registry = ToolRegistry()
    register_builtin_tools(registry, host=image_host, store=doc_store)
    return registry


@pytest.fixture
def delivered() -> list:
    return []


@pytest.fixture
def builtin_dispatcher(builtin_registry: ToolRegistry, delivered: list) -> ToolDispatcher:
    return ToolDispatcher(
        builtin_registry,
        confirmation_gate=lambda spec, invocation: True,
        on_async_result=delivered.append,
    )
