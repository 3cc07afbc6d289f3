"""Tests for the in-memory namespace provider."""

import pytest
from conftest import p
from require_resolution import InMemoryNamespace
from require_resolution import NamespaceProvider


def test_from_paths_implies_parents():
    namespace = InMemoryNamespace.from_paths(["a/b/c.a", "empty/"])
    assert isinstance(namespace, NamespaceProvider)
    assert namespace.is_directory(p("a"))
    assert namespace.is_directory(p("a/b"))
    assert namespace.exists(p("a/b/c.a"))
    assert not namespace.is_directory(p("a/b/c.a"))
    assert namespace.list_entries(p("")) == {"a", "empty"}
    assert namespace.list_entries(p("empty")) == set()


def test_from_tree_matches_from_paths():
    tree = InMemoryNamespace.from_tree({"folder": {"index.a": "", "child.b": "", "sub": {}}, "main.a": ""})
    assert tree.list_entries(p("folder")) == {"index.a", "child.b", "sub"}
    assert tree.is_directory(p("folder/sub"))
    assert tree.exists(p("main.a"))


def test_listing_unknown_or_file_is_empty():
    namespace = InMemoryNamespace.from_paths(["main.a"])
    assert namespace.list_entries(p("main.a")) == set()
    assert namespace.list_entries(p("missing")) == set()


def test_file_and_directory_conflict():
    namespace = InMemoryNamespace.from_paths(["x.a"])
    with pytest.raises(ValueError):
        namespace.add_directory(p("x.a"))
    with pytest.raises(ValueError):
        namespace.add_file(p("x.a/y.a"))


def test_in_memory_paths_are_already_canonical():
    namespace = InMemoryNamespace.from_paths(["a/b.a"])
    assert namespace.canonical(p("a/b.a")) == p("a/b.a")
    assert namespace.canonical(p("missing")) == p("missing")
