"""Tests for resolution data models."""

import pytest
from require_resolution import CanonicalPath
from require_resolution import ModuleKind
from require_resolution import OutOfRootError
from require_resolution import RequestContext
from require_resolution import ResolverSettings


class TestCanonicalPath:
    def test_parse_and_str(self):
        path = CanonicalPath.parse("/folder/index.a")
        assert path.segments == ("folder", "index.a")
        assert str(path) == "/folder/index.a"

    def test_leading_slash_optional(self):
        assert CanonicalPath.parse("a/b") == CanonicalPath.parse("/a/b")

    def test_root(self):
        root = CanonicalPath.parse("/")
        assert root.is_root
        assert root == CanonicalPath.root()
        assert str(root) == "/"
        assert root.name == ""

    @pytest.mark.parametrize("text", ["a//b", "a/./b", "a/../b"])
    def test_parse_rejects_non_canonical(self, text):
        with pytest.raises(ValueError):
            CanonicalPath.parse(text)

    def test_parent_and_child(self):
        path = CanonicalPath.parse("a/b")
        assert path.parent == CanonicalPath.parse("a")
        assert path.parent / "c" == CanonicalPath.parse("a/c")
        assert path.name == "b"

    def test_root_has_no_parent(self):
        with pytest.raises(OutOfRootError):
            CanonicalPath.root().parent

    def test_up(self):
        path = CanonicalPath.parse("a/b/c")
        assert path.up(0) == path
        assert path.up(2) == CanonicalPath.parse("a")
        assert path.up(3).is_root

    def test_up_past_root(self):
        with pytest.raises(OutOfRootError):
            CanonicalPath.parse("a/b").up(3)

    def test_hashable_and_ordered(self):
        paths = {CanonicalPath.parse("b"), CanonicalPath.parse("a"), CanonicalPath.parse("b")}
        assert sorted(paths) == [CanonicalPath.parse("a"), CanonicalPath.parse("b")]


class TestRequestContext:
    def test_anchor_is_requester_directory(self):
        ctx = RequestContext(CanonicalPath.parse("folder/x.a"))
        assert ctx.anchor == CanonicalPath.parse("folder")
        assert ctx.requester_kind is ModuleKind.LEAF

    def test_for_module_infers_index(self):
        settings = ResolverSettings()
        assert RequestContext.for_module(CanonicalPath.parse("f/index.b"), settings).requester_kind is ModuleKind.INDEX
        assert RequestContext.for_module(CanonicalPath.parse("f/index.c"), settings).requester_kind is ModuleKind.LEAF
        assert RequestContext.for_module(CanonicalPath.parse("f/main.a"), settings).requester_kind is ModuleKind.LEAF

    def test_context_is_immutable(self):
        ctx = RequestContext(CanonicalPath.parse("x.a"))
        with pytest.raises(AttributeError):
            ctx.requester_kind = ModuleKind.INDEX
