"""Filesystem-backed namespace provider (app layer).

Maps canonical paths onto a directory on disk. Symbolic links are followed
at query time and collapse onto the real location of their target, so an
entry reachable through several links still has one canonical path.
Entries whose real location falls outside the root are reported as absent
so resolution can never leave the namespace.
"""

import logging
from pathlib import Path

from .models import CanonicalPath

logger = logging.getLogger(__name__)


class FileSystemNamespace:
    """NamespaceProvider over a real directory tree."""

    def __init__(self, root: str | Path):
        self.root = Path(root).resolve()
        if not self.root.is_dir():
            raise NotADirectoryError(f"Namespace root is not a directory: {self.root}")

    def to_path(self, path: CanonicalPath) -> Path:
        """Filesystem location of a canonical path (not checked for existence)."""
        return self.root.joinpath(*path.segments)

    def to_canonical(self, path: str | Path) -> CanonicalPath:
        """Canonical path of a filesystem location inside the root.

        Raises:
            ValueError: Location is outside the root
        """
        location = Path(path)
        if not location.is_absolute():
            location = self.root / location
        relative = location.resolve().relative_to(self.root)
        return CanonicalPath(relative.parts)

    def exists(self, path: CanonicalPath) -> bool:
        return self._real(path) is not None

    def is_directory(self, path: CanonicalPath) -> bool:
        real = self._real(path)
        return real is not None and real.is_dir()

    def list_entries(self, directory: CanonicalPath) -> set[str]:
        real = self._real(directory)
        if real is None or not real.is_dir():
            return set()
        try:
            names = {child.name for child in real.iterdir()}
        except OSError as e:
            logger.warning(f"Cannot list {real}: {e}")
            return set()
        return {name for name in names if self.exists(directory / name)}

    def canonical(self, path: CanonicalPath) -> CanonicalPath:
        real = self._real(path)
        if real is None:
            return path
        return CanonicalPath(real.relative_to(self.root).parts)

    def _real(self, path: CanonicalPath) -> Path | None:
        location = self.to_path(path)
        if not location.exists():
            return None
        real = location.resolve()
        if not real.is_relative_to(self.root):
            logger.debug(f"[require:fs] {location} points outside the namespace root, ignoring")
            return None
        return real

    def __repr__(self) -> str:
        return f"FileSystemNamespace({self.root})"
