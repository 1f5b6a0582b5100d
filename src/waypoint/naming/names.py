"""Route name validation and dotted-name composition."""

import re
from collections.abc import Iterable

_NAME_RE = re.compile(r"[-_.a-zA-Z0-9]+")


def is_valid_name(name: object) -> bool:
    """Check whether *name* may be used as a local route name.

    A valid name consists of ASCII letters, digits, dots, dashes, and
    underscores. The empty string is valid and means "no name segment".

    Examples::

        >>> is_valid_name("article.list")
        True
        >>> is_valid_name("")
        True
        >>> is_valid_name("has space")
        False
        >>> is_valid_name(None)
        False
    """
    if not isinstance(name, str):
        return False
    if name == "":
        return True
    return _NAME_RE.fullmatch(name) is not None


def build_name(segments: Iterable[str]) -> str:
    """Join a name hierarchy (root first) into one dotted name.

    Empty segments are skipped, so nodes that only group routes do not
    contribute a name level.

    Examples::

        build_name([""])                          -> ""
        build_name(["", "dog", "cat"])            -> "dog.cat"
        build_name(["cat", "", "", "the", "ring"]) -> "cat.the.ring"
    """
    return ".".join(segment for segment in segments if segment != "")
