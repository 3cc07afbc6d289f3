"""Extension and index disambiguation.

Turns a candidate base (directory + extensionless name) into exactly one
concrete module entry:

1. name + one recognized extension exists     -> LEAF
2. name + both recognized extensions exist    -> AmbiguousExtensionError
3. neither, and name is a directory           -> that directory's INDEX
4. otherwise                                  -> NotFoundError

Naming the index member itself ("folder/index") fails with
DirectIndexForbiddenError: an index is reached only through its directory.
"""

import logging

from .errors import AmbiguousExtensionError
from .errors import DirectIndexForbiddenError
from .errors import NotFoundError
from .models import CanonicalPath
from .models import ModuleKind
from .models import ResolvedEntry
from .namespace import NamespaceProvider
from .settings import ResolverSettings

logger = logging.getLogger(__name__)


class Disambiguator:
    """Applies the two-extension and index-substitution rules."""

    def __init__(self, provider: NamespaceProvider, settings: ResolverSettings | None = None):
        self.provider = provider
        self.settings = settings or ResolverSettings()

    def disambiguate(self, directory: CanonicalPath, name: str) -> ResolvedEntry:
        """Resolve `directory/name` (no extension) to a module entry.

        Raises:
            AmbiguousExtensionError: Both extensions exist (at the leaf or index position)
            DirectIndexForbiddenError: `name` is the index member's own name
            NotFoundError: No file form and no directory with an index
        """
        found = self._file_forms(directory, name)

        if len(found) > 1:
            raise AmbiguousExtensionError(
                f"Both {found[0]} and {found[1]} exist; cannot choose between them",
                candidates=tuple(found),
            )

        if found:
            if name == self.settings.index_name:
                raise DirectIndexForbiddenError(
                    f"{found[0]} is the index of {directory}; require the directory instead"
                )
            entry = self._entry(found[0], ModuleKind.LEAF)
            logger.debug(f"[require:disambiguate] {directory / name} -> leaf {entry.path}")
            return entry

        candidate = directory / name
        if self.provider.is_directory(candidate):
            return self.index_of(candidate)

        extensions = "|".join(self.settings.extensions)
        raise NotFoundError(f"No module at {candidate}({extensions}) and no directory {candidate}")

    def index_of(self, directory: CanonicalPath) -> ResolvedEntry:
        """Return the index member of `directory`.

        This is the only direct route to an index module.

        Raises:
            AmbiguousExtensionError: Both index forms exist
            NotFoundError: Directory has no index member
        """
        found = self._file_forms(directory, self.settings.index_name)

        if len(found) > 1:
            raise AmbiguousExtensionError(
                f"Directory {directory} has two index members: {found[0]} and {found[1]}",
                candidates=tuple(found),
            )
        if not found:
            raise NotFoundError(f"Directory {directory} has no index member")

        entry = self._entry(found[0], ModuleKind.INDEX)
        logger.debug(f"[require:disambiguate] {directory} -> index {entry.path}")
        return entry

    def classify(self, entry_name: str, directory: CanonicalPath) -> str | None:
        """Map a listed entry to the module name it contributes, if any.

        A file with a recognized extension contributes its stem; a directory
        contributes its own name; anything else (stray files) contributes
        nothing.
        """
        if self.provider.is_directory(directory / entry_name):
            return entry_name
        return self.settings.module_name(entry_name)

    def _entry(self, path: CanonicalPath, kind: ModuleKind) -> ResolvedEntry:
        # Symlinked entries are reported under their real location
        canonical = self.provider.canonical(path)
        if canonical != path:
            logger.debug(f"[require:disambiguate] {path} is an alias of {canonical}")
            kind = ModuleKind.INDEX if self.settings.is_index_entry(canonical.name) else ModuleKind.LEAF
        return ResolvedEntry(path=canonical, kind=kind)

    def _file_forms(self, directory: CanonicalPath, stem: str) -> list[CanonicalPath]:
        found = []
        for entry_name in self.settings.entry_names(stem):
            candidate = directory / entry_name
            if self.provider.exists(candidate) and not self.provider.is_directory(candidate):
                found.append(candidate)
        return found
