"""Module registry: load state per canonical path, doubling as cycle detector.

One state machine per path:

    UNRESOLVED --begin_resolve--> RESOLVING --complete_resolve--> RESOLVED | FAILED

The same records answer "is this path mid-resolution?" (cycle detection)
and "was it already resolved?" (memoization). Registry state lives for one
loading session; reset() starts a new one.

Concurrency: a single Condition guards every transition. The first caller
to observe UNRESOLVED wins RESOLVING; other threads asking about that path
wait for completion and read the settled record. A thread that would wait
on a path owned by a thread already (transitively) waiting on it gets a
CycleError instead of deadlocking.
"""

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from .errors import CycleError
from .errors import RegistryStateError
from .errors import ResolutionError
from .models import CanonicalPath
from .models import LoadState

logger = logging.getLogger(__name__)


@dataclass
class LoadRecord:
    """Registry entry for one canonical path."""

    state: LoadState = LoadState.UNRESOLVED
    result: CanonicalPath | None = None
    error: ResolutionError | None = None
    owner: int | None = None


class ModuleRegistry:
    """Session-scoped load state with cycle detection."""

    def __init__(self) -> None:
        self._records: dict[CanonicalPath, LoadRecord] = {}
        self._condition = threading.Condition()
        # Thread ident -> paths it holds in RESOLVING, in acquisition order
        self._chains: dict[int, list[CanonicalPath]] = {}
        # Thread ident -> path it is blocked on
        self._waiting: dict[int, CanonicalPath] = {}

    def state(self, path: CanonicalPath) -> LoadState:
        with self._condition:
            record = self._records.get(path)
            return record.state if record else LoadState.UNRESOLVED

    def snapshot(self) -> dict[CanonicalPath, LoadState]:
        """Copy of every tracked path's state."""
        with self._condition:
            return {path: record.state for path, record in self._records.items()}

    def reset(self) -> None:
        """Forget all state, starting a new loading session.

        Raises:
            RegistryStateError: A path is still mid-resolution
        """
        with self._condition:
            in_flight = [str(p) for p, r in self._records.items() if r.state is LoadState.RESOLVING]
            if in_flight:
                raise RegistryStateError(f"Cannot reset while resolving: {', '.join(in_flight)}")
            self._records.clear()
            self._chains.clear()
            logger.debug("[require:registry] reset")

    def begin_resolve(self, path: CanonicalPath) -> CanonicalPath | None:
        """Claim `path` for resolution.

        Returns:
            None if the caller now owns the path (UNRESOLVED -> RESOLVING),
            or the cached canonical path if it was already RESOLVED.

        Raises:
            CycleError: path is mid-resolution on the caller's own chain
            ResolutionError: path previously FAILED (a copy of the recorded error,
                without the original specifier and requester)
        """
        with self._condition:
            record = self._settled(path)
            if record.state is LoadState.RESOLVED:
                return record.result
            if record.state is LoadState.FAILED:
                assert record.error is not None
                raise record.error.detached()

            me = threading.get_ident()
            record.state = LoadState.RESOLVING
            record.owner = me
            self._records[path] = record
            self._chains.setdefault(me, []).append(path)
            logger.debug(f"[require:registry] {path} -> resolving")
            return None

    def check(self, path: CanonicalPath) -> CanonicalPath | None:
        """Cycle check without claiming.

        Returns:
            The cached canonical path if RESOLVED, None if UNRESOLVED.

        Raises:
            CycleError: path is mid-resolution on the caller's own chain
            ResolutionError: path previously FAILED (a copy of the recorded error,
                without the original specifier and requester)
        """
        with self._condition:
            record = self._settled(path)
            if record.state is LoadState.FAILED:
                assert record.error is not None
                raise record.error.detached()
            return record.result

    def complete_resolve(self, path: CanonicalPath, outcome: CanonicalPath | ResolutionError) -> None:
        """Settle a path the caller owns: RESOLVING -> RESOLVED | FAILED.

        Raises:
            RegistryStateError: path is not RESOLVING or owned by another thread
        """
        with self._condition:
            record = self._owned_record(path)
            if isinstance(outcome, ResolutionError):
                record.state = LoadState.FAILED
                record.error = outcome
            else:
                record.state = LoadState.RESOLVED
                record.result = outcome
            self._release(path, record)
            logger.debug(f"[require:registry] {path} -> {record.state.value}")

    def abandon(self, path: CanonicalPath) -> None:
        """Return an owned path to UNRESOLVED (the loader gave up for non-resolution reasons)."""
        with self._condition:
            record = self._owned_record(path)
            record.state = LoadState.UNRESOLVED
            self._release(path, record)
            logger.debug(f"[require:registry] {path} -> abandoned")

    @contextmanager
    def resolving(self, path: CanonicalPath) -> Iterator[bool]:
        """Bracket begin_resolve/complete_resolve around a block.

        Yields True if the block owns the work, False if path was already
        resolved. Any exception escaping the block abandons the path: the
        block works on path's dependencies, and their failures belong to the
        specifiers that named them. Record a failure of path itself with
        complete_resolve(path, error).
        """
        if self.begin_resolve(path) is not None:
            yield False
            return

        try:
            yield True
        except BaseException:
            self.abandon(path)
            raise
        self.complete_resolve(path, path)

    def _settled(self, path: CanonicalPath) -> LoadRecord:
        """Wait until path is not RESOLVING by another thread. Caller holds the lock."""
        me = threading.get_ident()
        while True:
            record = self._records.get(path)
            if record is None:
                return LoadRecord()
            if record.state is not LoadState.RESOLVING:
                return record
            if record.owner == me or self._waits_on(record.owner, me):
                raise self._cycle(path, me)

            self._waiting[me] = path
            try:
                self._condition.wait()
            finally:
                del self._waiting[me]

    def _waits_on(self, owner: int | None, me: int) -> bool:
        """True if `owner` is (transitively) blocked on a path held by `me`."""
        seen = set()
        current = owner
        while current is not None and current not in seen:
            seen.add(current)
            blocked_on = self._waiting.get(current)
            if blocked_on is None:
                return False
            current = self._records[blocked_on].owner
            if current == me:
                return True
        return False

    def _cycle(self, path: CanonicalPath, me: int) -> CycleError:
        chain = self._chains.get(me, [])
        start = chain.index(path) if path in chain else 0
        cycle = (*chain[start:], path)
        rendered = " -> ".join(str(p) for p in cycle)
        logger.debug(
            f"[require:registry] cycle detected: {rendered}",
            extra={"event": "require.cycle", "chain": [str(p) for p in cycle]},
        )
        return CycleError(f"Require cycle: {rendered}", chain=cycle)

    def _owned_record(self, path: CanonicalPath) -> LoadRecord:
        record = self._records.get(path)
        if record is None or record.state is not LoadState.RESOLVING:
            raise RegistryStateError(f"{path} is not being resolved")
        if record.owner != threading.get_ident():
            raise RegistryStateError(f"{path} is being resolved by another thread")
        return record

    def _release(self, path: CanonicalPath, record: LoadRecord) -> None:
        owner = record.owner
        record.owner = None
        if owner is not None:
            chain = self._chains.get(owner, [])
            if path in chain:
                chain.remove(path)
            if not chain:
                self._chains.pop(owner, None)
        self._condition.notify_all()
