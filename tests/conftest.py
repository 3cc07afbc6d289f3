"""Pytest configuration for require resolution tests."""

import logging

import pytest
from require_resolution import CanonicalPath
from require_resolution import InMemoryNamespace
from require_resolution import ModuleKind
from require_resolution import ModuleResolver
from require_resolution import RequestContext

# Shared module tree used across resolver tests:
#
#   /index.a
#   /main.a
#   /util.b
#   /sibling.a
#   /folder/index.a
#   /folder/child.a
#   /folder/other.b
#   /folder/noindex/x.a
#   /folder/subfolder/index.b
#   /folder/subfolder/deep.a
TREE = [
    "index.a",
    "main.a",
    "util.b",
    "sibling.a",
    "folder/index.a",
    "folder/child.a",
    "folder/other.b",
    "folder/noindex/x.a",
    "folder/subfolder/index.b",
    "folder/subfolder/deep.a",
]


def p(text: str) -> CanonicalPath:
    """Shorthand for CanonicalPath.parse."""
    return CanonicalPath.parse(text)


def leaf(text: str) -> RequestContext:
    return RequestContext(requester_path=p(text), requester_kind=ModuleKind.LEAF)


def index(text: str) -> RequestContext:
    return RequestContext(requester_path=p(text), requester_kind=ModuleKind.INDEX)


@pytest.fixture
def namespace() -> InMemoryNamespace:
    return InMemoryNamespace.from_paths(TREE)


@pytest.fixture
def resolver(namespace) -> ModuleResolver:
    return ModuleResolver(namespace)


@pytest.fixture
def restore_root_logger():
    """Drop handlers and level changes a test made to the root logger."""
    root = logging.getLogger()
    level = root.level
    handlers = list(root.handlers)
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
    root.setLevel(level)
