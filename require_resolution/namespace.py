"""Namespace provider protocol and an in-memory implementation.

The engine never touches storage directly. Hosts hand it a
NamespaceProvider answering existence, directory, listing and
canonicalization queries against a stable snapshot of their module tree.
"""

from collections.abc import Iterable
from collections.abc import Mapping
from typing import Any
from typing import Protocol
from typing import runtime_checkable

from .models import CanonicalPath


@runtime_checkable
class NamespaceProvider(Protocol):
    """Hierarchical store queried during resolution."""

    def exists(self, path: CanonicalPath) -> bool:
        """True if any entry (file or directory) exists at path."""
        ...

    def is_directory(self, path: CanonicalPath) -> bool:
        """True if path exists and is a directory."""
        ...

    def list_entries(self, directory: CanonicalPath) -> Iterable[str]:
        """Entry names directly under directory, in no particular order.

        Empty for a missing path or a non-directory.
        """
        ...

    def canonical(self, path: CanonicalPath) -> CanonicalPath:
        """Unique path of the entry at path, with aliases (symlinks) followed.

        Returns path unchanged if nothing exists there.
        """
        ...


class InMemoryNamespace:
    """Namespace held in memory.

    Build it from slash-separated entry paths (a trailing "/" marks an empty
    directory; parent directories are implied) or from a nested mapping
    where a mapping value is a directory and anything else is a file.

    Example:
        InMemoryNamespace.from_paths(["folder/index.a", "folder/child.b", "empty/"])
        InMemoryNamespace.from_tree({"folder": {"index.a": "", "child.b": ""}})
    """

    def __init__(self) -> None:
        self._directories: dict[CanonicalPath, set[str]] = {CanonicalPath.root(): set()}
        self._files: set[CanonicalPath] = set()

    @classmethod
    def from_paths(cls, paths: Iterable[str]) -> "InMemoryNamespace":
        namespace = cls()
        for raw in paths:
            if raw.endswith("/"):
                namespace.add_directory(CanonicalPath.parse(raw))
            else:
                namespace.add_file(CanonicalPath.parse(raw))
        return namespace

    @classmethod
    def from_tree(cls, tree: Mapping[str, Any]) -> "InMemoryNamespace":
        namespace = cls()
        namespace._add_tree(CanonicalPath.root(), tree)
        return namespace

    def _add_tree(self, directory: CanonicalPath, tree: Mapping[str, Any]) -> None:
        self.add_directory(directory)
        for name, value in tree.items():
            if isinstance(value, Mapping):
                self._add_tree(directory / name, value)
            else:
                self.add_file(directory / name)

    def add_directory(self, path: CanonicalPath) -> None:
        if path in self._files:
            raise ValueError(f"{path} is already a file")
        if path in self._directories:
            return
        if not path.is_root:
            self.add_directory(path.parent)
            self._directories[path.parent].add(path.name)
        self._directories[path] = set()

    def add_file(self, path: CanonicalPath) -> None:
        if path.is_root or path in self._directories:
            raise ValueError(f"{path} is already a directory")
        self.add_directory(path.parent)
        self._directories[path.parent].add(path.name)
        self._files.add(path)

    def exists(self, path: CanonicalPath) -> bool:
        return path in self._files or path in self._directories

    def is_directory(self, path: CanonicalPath) -> bool:
        return path in self._directories

    def list_entries(self, directory: CanonicalPath) -> set[str]:
        return set(self._directories.get(directory, ()))

    def canonical(self, path: CanonicalPath) -> CanonicalPath:
        return path

    def __repr__(self) -> str:
        return f"InMemoryNamespace({len(self._files)} files, {len(self._directories)} directories)"
