"""Require graph walker.

Follows requires from an entry module through the whole graph, using the
registry both to visit shared modules once and to fail on cycles. Module
content stays with the host: `requires_of` returns the raw specifiers a
module contains.
"""

import logging
from collections.abc import Callable
from collections.abc import Iterable

from .errors import NotFoundError
from .models import CanonicalPath
from .resolver import ModuleResolver

logger = logging.getLogger(__name__)

RequiresOf = Callable[[CanonicalPath], Iterable[str]]


class RequireWalker:
    """Depth-first walk of the require graph.

    Features:
    - Pre-order result (a module precedes the modules it requires)
    - Shared dependencies visited once per session
    - Cycle detection via the registry (CycleError carries the chain)
    - Glob requires fan out in their deterministic order
    """

    def __init__(self, resolver: ModuleResolver, requires_of: RequiresOf):
        self.resolver = resolver
        self.requires_of = requires_of

    def walk(self, entry: CanonicalPath) -> list[CanonicalPath]:
        """Visit `entry` and everything it transitively requires.

        Raises:
            NotFoundError: entry does not exist
            ResolutionError: Any require along the way fails (including cycles)
        """
        if not self.resolver.provider.exists(entry) or self.resolver.provider.is_directory(entry):
            raise NotFoundError(f"Entry module {entry} does not exist")

        entry = self.resolver.provider.canonical(entry)

        visited: list[CanonicalPath] = []
        self._visit(entry, visited)
        logger.debug(f"[require:walk] {entry} -> {len(visited)} module(s)")
        return visited

    def _visit(self, path: CanonicalPath, visited: list[CanonicalPath]) -> None:
        with self.resolver.registry.resolving(path) as owned:
            if not owned:
                return

            visited.append(path)
            context = self.resolver.context_for(path)
            for raw in self.requires_of(path):
                result = self.resolver.resolve(raw, context)
                targets = result if isinstance(result, list) else [result]
                for target in targets:
                    self._visit(target, visited)
