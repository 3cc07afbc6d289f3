"""Require resolution engine.

Maps a specifier written inside a module, plus that module's place in a
hierarchical namespace, to the canonical module it names. The core is
I/O-free: hosts supply a NamespaceProvider. FileSystemNamespace, the
settings loader, JSONL logging and the CLI are the app layer.
"""

from .disambiguator import Disambiguator
from .errors import AmbiguousExtensionError
from .errors import CycleError
from .errors import DirectIndexForbiddenError
from .errors import ErrorKind
from .errors import InvalidSpecifierError
from .errors import NotFoundError
from .errors import OutOfRootError
from .errors import RegistryStateError
from .errors import ResolutionError
from .filesystem import FileSystemNamespace
from .glob_expander import GlobExpander
from .models import CanonicalPath
from .models import GlobSuffix
from .models import LoadState
from .models import ModuleKind
from .models import PrefixKind
from .models import RequestContext
from .models import ResolvedEntry
from .models import Specifier
from .namespace import InMemoryNamespace
from .namespace import NamespaceProvider
from .registry import ModuleRegistry
from .resolver import ModuleResolver
from .settings import ResolverSettings
from .settings import SettingsLoader
from .specifier import parse_specifier
from .walker import RequireWalker

__all__ = [
    "AmbiguousExtensionError",
    "CanonicalPath",
    "CycleError",
    "DirectIndexForbiddenError",
    "Disambiguator",
    "ErrorKind",
    "FileSystemNamespace",
    "GlobExpander",
    "GlobSuffix",
    "InMemoryNamespace",
    "InvalidSpecifierError",
    "LoadState",
    "ModuleKind",
    "ModuleRegistry",
    "ModuleResolver",
    "NamespaceProvider",
    "NotFoundError",
    "OutOfRootError",
    "PrefixKind",
    "RegistryStateError",
    "RequestContext",
    "RequireWalker",
    "ResolutionError",
    "ResolvedEntry",
    "ResolverSettings",
    "SettingsLoader",
    "Specifier",
    "parse_specifier",
]
