"""Require resolution algorithm and public entry point.

Relative meaning depends on who is requiring. With `anchor` the requester's
own directory:

    requester   "x" / "./x"        "../x"               ".."              ":x"          "."
    LEAF        anchor/x           anchor.up(1)/x       anchor.up(1)      anchor/x      invalid
    INDEX       anchor.parent/x    anchor.parent.up(1)  anchor.up(1)      anchor/x      itself

An index module stands for its directory, so its plain relative requires
start one level higher; ":" reaches the index's own children. A bare parent
chain always names the directory n levels above the anchor and resolves to
its index.
"""

import logging

from .disambiguator import Disambiguator
from .errors import InvalidSpecifierError
from .errors import NotFoundError
from .errors import ResolutionError
from .glob_expander import GlobExpander
from .models import CanonicalPath
from .models import ModuleKind
from .models import PrefixKind
from .models import RequestContext
from .models import Specifier
from .namespace import NamespaceProvider
from .registry import ModuleRegistry
from .settings import ResolverSettings
from .specifier import parse_specifier

logger = logging.getLogger(__name__)


class ModuleResolver:
    """Resolves specifiers against a namespace on behalf of a loader.

    Example:
        resolver = ModuleResolver(InMemoryNamespace.from_paths(["lib/index.a", "main.a"]))
        ctx = RequestContext(CanonicalPath.parse("main.a"), ModuleKind.LEAF)
        resolver.resolve("./lib", ctx)  # -> /lib/index.a
    """

    def __init__(
        self,
        provider: NamespaceProvider,
        settings: ResolverSettings | None = None,
        registry: ModuleRegistry | None = None,
    ):
        self.provider = provider
        self.settings = settings or ResolverSettings()
        self.registry = registry or ModuleRegistry()
        self.disambiguator = Disambiguator(provider, self.settings)
        self.glob_expander = GlobExpander(self.disambiguator)

    def new_session(self) -> None:
        """Start a new top-level load: clear registry state."""
        self.registry.reset()

    def context_for(self, path: CanonicalPath) -> RequestContext:
        """Build a RequestContext, inferring the kind from the entry name."""
        return RequestContext.for_module(path, self.settings)

    def resolve(self, raw: str, requester: RequestContext) -> CanonicalPath | list[CanonicalPath]:
        """Resolve a raw specifier written in `requester`.

        Returns:
            The canonical path of the target module, or for a glob specifier
            the ordered list of matched modules.

        Raises:
            ResolutionError: Any failure, carrying specifier and requester
        """
        try:
            spec = parse_specifier(raw)
        except ResolutionError as e:
            raise e.with_context(raw, requester.requester_path)
        return self.resolve_specifier(spec, requester)

    def resolve_specifier(
        self, spec: Specifier, requester: RequestContext
    ) -> CanonicalPath | list[CanonicalPath]:
        """Resolve an already-parsed specifier (see resolve)."""
        try:
            if spec.is_glob:
                targets = self._resolve_glob(spec, requester)
                return [self._checked(target) for target in targets]
            return self._checked(self._resolve_single(spec, requester))
        except ResolutionError as e:
            e.with_context(spec.raw, requester.requester_path)
            logger.debug(
                f"[require:resolve] '{spec.raw}' from {requester.requester_path} failed: {e.detail}",
                extra=e.log_fields(),
            )
            raise

    def _checked(self, target: CanonicalPath) -> CanonicalPath:
        """Pass a target through the registry: cycle check and cached result."""
        cached = self.registry.check(target)
        return cached if cached is not None else target

    def _resolve_single(self, spec: Specifier, requester: RequestContext) -> CanonicalPath:
        anchor = requester.anchor

        if spec.prefix is PrefixKind.SELF_INDEX:
            if requester.requester_kind is not ModuleKind.INDEX:
                raise InvalidSpecifierError("'.' is only meaningful from an index module")
            entry = self.disambiguator.index_of(anchor)
        elif spec.prefix is PrefixKind.PARENT_CHAIN and not spec.segments:
            entry = self.disambiguator.index_of(anchor.up(spec.parent_levels))
        else:
            directory = self._walk_directories(self._base_directory(spec, requester), spec.segments[:-1])
            entry = self.disambiguator.disambiguate(directory, spec.segments[-1])

        logger.debug(
            f"[require:resolve] '{spec.raw}' from {requester.requester_path} -> {entry.path}",
            extra={
                "event": "require.resolved",
                "specifier": spec.raw,
                "requester": str(requester.requester_path),
                "target": str(entry.path),
            },
        )
        return entry.path

    def _resolve_glob(self, spec: Specifier, requester: RequestContext) -> list[CanonicalPath]:
        assert spec.glob is not None
        directory = self._walk_directories(self._base_directory(spec, requester), spec.segments)
        return self.glob_expander.expand(directory, spec.glob)

    def _base_directory(self, spec: Specifier, requester: RequestContext) -> CanonicalPath:
        """Directory the specifier's segments are appended to."""
        anchor = requester.anchor

        if spec.prefix is PrefixKind.CHILD_OF_INDEX:
            return anchor

        # SIBLING and PARENT_CHAIN with segments: an index speaks for its directory
        base = anchor.parent if requester.requester_kind is ModuleKind.INDEX else anchor
        return base.up(spec.parent_levels)

    def _walk_directories(self, base: CanonicalPath, names: tuple[str, ...]) -> CanonicalPath:
        """Append intermediate segments, each of which must be an existing directory."""
        directory = base
        if not self.provider.is_directory(directory):
            raise NotFoundError(f"Directory {directory} does not exist")
        for name in names:
            directory = directory / name
            if not self.provider.is_directory(directory):
                raise NotFoundError(f"Directory {directory} does not exist")
        return directory
