"""Deterministic expansion of "/*" and "/**" specifiers."""

import logging

from .disambiguator import Disambiguator
from .errors import NotFoundError
from .models import CanonicalPath
from .models import GlobSuffix

logger = logging.getLogger(__name__)


class GlobExpander:
    """Enumerates and resolves every module under a directory.

    Ordering is by case-sensitive code point order of module names, never
    the provider's listing order. CHILDREN yields the direct modules of the
    base directory; DESCENDANTS yields those, then walks each subdirectory
    in the same order. A directory without an index is skipped as a child
    but still walked for DESCENDANTS. Ambiguity anywhere fails the whole
    expansion.
    """

    def __init__(self, disambiguator: Disambiguator):
        self.disambiguator = disambiguator
        self.provider = disambiguator.provider
        self.settings = disambiguator.settings
    def expand(self, base_dir: CanonicalPath, kind: GlobSuffix) -> list[CanonicalPath]:
        """Resolve every module matched by `kind` under `base_dir`.

        Raises:
            NotFoundError: base_dir is not a directory
            AmbiguousExtensionError: Any matched entry has both extensions
        """
        if not self.provider.is_directory(base_dir):
            raise NotFoundError(f"Glob base {base_dir} is not a directory")

        base_dir = self.provider.canonical(base_dir)
        # The base directory's own index stands for the directory, even when reached through an alias
        index_entries = self.settings.entry_names(self.settings.index_name)
        seen = {self.provider.canonical(base_dir / entry) for entry in index_entries}
        results: list[CanonicalPath] = []
        self._walk(base_dir, kind, results, seen=seen, visited=set())
        logger.debug(f"[require:glob] {base_dir} ({kind.value}) -> {len(results)} module(s)")
        return results

    def _walk(
        self,
        directory: CanonicalPath,
        kind: GlobSuffix,
        results: list[CanonicalPath],
        seen: set[CanonicalPath],
        visited: set[CanonicalPath],
    ) -> None:
        visited.add(directory)
        subdirectories = []

        for name in self._module_names(directory):
            candidate = directory / name
            is_directory = self.provider.is_directory(candidate)
            if is_directory:
                subdirectories.append(self.provider.canonical(candidate))

            try:
                if name == self.settings.index_name:
                    # Only a subdirectory gets here; the index files are excluded by _module_names
                    entry = self.disambiguator.index_of(candidate)
                else:
                    entry = self.disambiguator.disambiguate(directory, name)
            except NotFoundError:
                if is_directory:
                    logger.debug(f"[require:glob] skipping {candidate}: no index member")
                    continue
                raise

            if entry.path not in seen:
                seen.add(entry.path)
                results.append(entry.path)

        if kind is GlobSuffix.DESCENDANTS:
            for subdirectory in subdirectories:
                if subdirectory not in visited:
                    self._walk(subdirectory, kind, results, seen, visited)
                else:
                    logger.debug(f"[require:glob] {subdirectory} already walked, skipping alias")

    def _module_names(self, directory: CanonicalPath) -> list[str]:
        """Sorted, de-duplicated module names under directory.

        The directory's own index files are excluded; a subdirectory named
        like the index stem is a module like any other.
        """
        names = set()
        for entry_name in self.provider.list_entries(directory):
            name = self.disambiguator.classify(entry_name, directory)
            if name is None:
                continue
            if name == self.settings.index_name and not self.provider.is_directory(directory / entry_name):
                continue
            names.add(name)
        return sorted(names)
