"""Error taxonomy for require resolution.

Every failure the engine can report is a ResolutionError subclass tagged
with an ErrorKind. Errors are raised where they are detected (parser,
disambiguator, registry) and the resolver attaches the offending specifier
and requester path as they propagate to the loader. Nothing is recovered
internally.
"""

from __future__ import annotations

import copy
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import CanonicalPath


class ErrorKind(str, Enum):
    """Discriminator carried by every ResolutionError."""

    INVALID_SPECIFIER = "invalid_specifier"
    NOT_FOUND = "not_found"
    AMBIGUOUS_EXTENSION = "ambiguous_extension"
    DIRECT_INDEX_FORBIDDEN = "direct_index_forbidden"
    OUT_OF_ROOT = "out_of_root"
    CYCLE = "cycle"


class ResolutionError(Exception):
    """Base class for all resolution failures.

    Attributes:
        kind: ErrorKind of this failure
        detail: Human-readable description of what went wrong
        specifier: Raw specifier being resolved (None until attached)
        requester: Canonical path of the requesting module (None until attached)
    """

    kind: ErrorKind

    def __init__(
        self,
        detail: str,
        *,
        specifier: str | None = None,
        requester: CanonicalPath | None = None,
    ):
        self.detail = detail
        self.specifier = specifier
        self.requester = requester
        super().__init__(self._format())

    def with_context(self, specifier: str, requester: CanonicalPath) -> ResolutionError:
        """Attach specifier/requester if not already set and return self."""
        if self.specifier is None:
            self.specifier = specifier
        if self.requester is None:
            self.requester = requester
        self.args = (self._format(),)
        return self

    def detached(self) -> ResolutionError:
        """Copy of this error with specifier and requester cleared.

        Used when a recorded failure is reported again to a different caller,
        who then attaches its own context.
        """
        clone = copy.copy(self)
        clone.specifier = None
        clone.requester = None
        clone.args = (clone._format(),)
        return clone

    def log_fields(self) -> dict[str, str | None]:
        """Structured fields for `logger.*(..., extra=...)`."""
        return {
            "event": "require.failed",
            "specifier": self.specifier,
            "requester": str(self.requester) if self.requester is not None else None,
            "error_kind": self.kind.value,
        }

    def _format(self) -> str:
        message = self.detail
        if self.specifier is not None:
            message += f" (specifier '{self.specifier}'"
            if self.requester is not None:
                message += f" required from {self.requester}"
            message += ")"
        return message


class InvalidSpecifierError(ResolutionError):
    """Malformed prefix or segments."""

    kind = ErrorKind.INVALID_SPECIFIER


class NotFoundError(ResolutionError):
    """No entry exists at a required step."""

    kind = ErrorKind.NOT_FOUND


class AmbiguousExtensionError(ResolutionError):
    """Both recognized extensions exist for the same base path."""

    kind = ErrorKind.AMBIGUOUS_EXTENSION

    def __init__(self, detail: str, *, candidates: tuple[CanonicalPath, ...] = (), **kwargs):
        self.candidates = candidates
        super().__init__(detail, **kwargs)


class DirectIndexForbiddenError(ResolutionError):
    """The specifier names an index module by its own leaf name."""

    kind = ErrorKind.DIRECT_INDEX_FORBIDDEN


class OutOfRootError(ResolutionError):
    """A parent walk escapes the namespace root."""

    kind = ErrorKind.OUT_OF_ROOT


class CycleError(ResolutionError):
    """A path currently mid-resolution was re-entered."""

    kind = ErrorKind.CYCLE

    def __init__(self, detail: str, *, chain: tuple[CanonicalPath, ...] = (), **kwargs):
        self.chain = chain
        super().__init__(detail, **kwargs)


class RegistryStateError(RuntimeError):
    """Raised when a loader drives the registry through an illegal transition."""


__all__ = [
    "AmbiguousExtensionError",
    "CycleError",
    "DirectIndexForbiddenError",
    "ErrorKind",
    "InvalidSpecifierError",
    "NotFoundError",
    "OutOfRootError",
    "RegistryStateError",
    "ResolutionError",
]
