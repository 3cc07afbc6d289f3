"""Data model for require resolution.

- CanonicalPath: normalized absolute location of one namespace entry
- ModuleKind: LEAF or INDEX
- RequestContext: who is requiring (path + kind)
- Specifier: parsed form of a raw specifier string
- ResolvedEntry: a disambiguated module (path + kind)
- LoadState: registry state of a canonical path
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from .errors import OutOfRootError

if TYPE_CHECKING:
    from .settings import ResolverSettings


@dataclass(frozen=True, order=True)
class CanonicalPath:
    """Absolute, normalized sequence of namespace segments.

    The namespace root is the empty sequence. A module's canonical path ends
    with its on-disk entry name, extension included (e.g. /folder/index.a).
    Instances are only ever built from already-normalized segments, so two
    paths are equal iff they denote the same entry.
    """

    segments: tuple[str, ...] = ()

    @classmethod
    def root(cls) -> CanonicalPath:
        return cls(())

    @classmethod
    def parse(cls, text: str) -> CanonicalPath:
        """Build a path from slash-separated text ("/a/b" or "a/b").

        Raises:
            ValueError: Empty, "." or ".." segments
        """
        stripped = text.strip("/")
        if not stripped:
            return cls.root()
        parts = tuple(stripped.split("/"))
        for part in parts:
            if part in ("", ".", ".."):
                raise ValueError(f"Not a canonical path: {text!r}")
        return cls(parts)

    @property
    def is_root(self) -> bool:
        return not self.segments

    @property
    def name(self) -> str:
        """Final segment ("" for the root)."""
        return self.segments[-1] if self.segments else ""

    @property
    def parent(self) -> CanonicalPath:
        if not self.segments:
            raise OutOfRootError("The namespace root has no parent")
        return CanonicalPath(self.segments[:-1])

    def up(self, levels: int) -> CanonicalPath:
        """Walk `levels` directories up, failing with OutOfRootError past the root."""
        if levels > len(self.segments):
            raise OutOfRootError(f"Cannot walk {levels} level(s) up from {self}: escapes the namespace root")
        return CanonicalPath(self.segments[: len(self.segments) - levels])

    def child(self, name: str) -> CanonicalPath:
        return CanonicalPath((*self.segments, name))

    def __truediv__(self, name: str) -> CanonicalPath:
        return self.child(name)

    def __str__(self) -> str:
        return "/" + "/".join(self.segments)


class ModuleKind(str, Enum):
    """Whether a module is an ordinary unit or its directory's index."""

    LEAF = "leaf"
    INDEX = "index"


@dataclass(frozen=True)
class RequestContext:
    """The requesting module, supplied by the loader for every call."""

    requester_path: CanonicalPath
    requester_kind: ModuleKind = ModuleKind.LEAF

    @property
    def anchor(self) -> CanonicalPath:
        """The requester's own directory."""
        return self.requester_path.parent

    @classmethod
    def for_module(cls, path: CanonicalPath, settings: ResolverSettings) -> RequestContext:
        """Infer the requester kind from its entry name."""
        kind = ModuleKind.INDEX if settings.is_index_entry(path.name) else ModuleKind.LEAF
        return cls(requester_path=path, requester_kind=kind)


class PrefixKind(str, Enum):
    SIBLING = "sibling"
    PARENT_CHAIN = "parent_chain"
    CHILD_OF_INDEX = "child_of_index"
    SELF_INDEX = "self_index"


class GlobSuffix(str, Enum):
    CHILDREN = "children"
    DESCENDANTS = "descendants"


@dataclass(frozen=True)
class Specifier:
    """Parsed specifier.

    Attributes:
        raw: Original text
        prefix: How the specifier anchors itself
        parent_levels: Number of leading "../" (PARENT_CHAIN only)
        segments: Path names after the prefix, glob suffix excluded
        glob: Trailing "/*" or "/**", if any
    """

    raw: str
    prefix: PrefixKind
    segments: tuple[str, ...] = ()
    parent_levels: int = 0
    glob: GlobSuffix | None = None

    @property
    def is_glob(self) -> bool:
        return self.glob is not None


@dataclass(frozen=True)
class ResolvedEntry:
    """A concrete module produced by the disambiguator."""

    path: CanonicalPath
    kind: ModuleKind


class LoadState(str, Enum):
    UNRESOLVED = "unresolved"
    RESOLVING = "resolving"
    RESOLVED = "resolved"
    FAILED = "failed"
