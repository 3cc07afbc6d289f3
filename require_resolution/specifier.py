"""Specifier parsing.

Grammar (informal):

    specifier  := "." | ":" path | ["./"] ("../")* path | ["./"] ".." ("/..")*
    path       := names ["/" glob] | glob
    glob       := "*" | "**"

Parsing is pure: no namespace access, no knowledge of extensions.
"""

from .errors import InvalidSpecifierError
from .models import GlobSuffix
from .models import PrefixKind
from .models import Specifier

_GLOBS = {"*": GlobSuffix.CHILDREN, "**": GlobSuffix.DESCENDANTS}


def parse_specifier(raw: str) -> Specifier:
    """Tokenize a raw specifier into prefix kind, segments and glob suffix.

    Args:
        raw: Specifier text as written in the requiring module

    Returns:
        Parsed Specifier

    Raises:
        InvalidSpecifierError: Malformed prefix, empty segments, misplaced glob
    """
    if not raw:
        raise InvalidSpecifierError("Specifier is empty", specifier=raw)

    if raw == ".":
        return Specifier(raw=raw, prefix=PrefixKind.SELF_INDEX)

    if raw.startswith(":"):
        if len(raw) == 1:
            raise InvalidSpecifierError("':' must be followed by a path", specifier=raw)
        tokens = _split(raw, raw[1:])
        prefix = PrefixKind.CHILD_OF_INDEX
        levels = 0
    else:
        tokens = _split(raw, raw)
        if tokens[0] == ".":
            tokens = tokens[1:]
        levels = 0
        while levels < len(tokens) and tokens[levels] == "..":
            levels += 1
        tokens = tokens[levels:]
        prefix = PrefixKind.PARENT_CHAIN if levels else PrefixKind.SIBLING

    glob = None
    if tokens and tokens[-1] in _GLOBS:
        glob = _GLOBS[tokens[-1]]
        tokens = tokens[:-1]

    for token in tokens:
        _check_name(raw, token)

    if not tokens and glob is None and prefix is not PrefixKind.PARENT_CHAIN:
        raise InvalidSpecifierError("Specifier names no module", specifier=raw)

    return Specifier(raw=raw, prefix=prefix, segments=tuple(tokens), parent_levels=levels, glob=glob)


def _split(raw: str, body: str) -> list[str]:
    tokens = body.split("/")
    if "" in tokens:
        raise InvalidSpecifierError("Empty path segment", specifier=raw)
    return tokens


def _check_name(raw: str, token: str) -> None:
    if token in (".", ".."):
        raise InvalidSpecifierError(f"'{token}' is only allowed as a leading prefix", specifier=raw)
    if "*" in token:
        raise InvalidSpecifierError("Glob suffix must be the final segment and stand alone", specifier=raw)
    if ":" in token:
        raise InvalidSpecifierError("':' is only allowed as the first character", specifier=raw)
