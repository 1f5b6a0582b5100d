"""Placeholder compilation for URL generation.

Route patterns use express-style placeholders::

    /articles/:slug                 named placeholder
    /flights/:from-:to              several placeholders in one segment
    /flights/num-:number(\\d+)       inline regex constraint
    /archive/:year/:month?          optional (``?``), also ``*`` and ``+``
    /files/*                        wildcard, positional key ``0``

Patterns are compiled once into a tuple of literal strings and
:class:`Placeholder` parts; expansion is a single left-to-right walk.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote

from waypoint.errors import ConfigurationError, MissingParameterError, ParameterFormatError

_PATTERN_RE = re.compile(
    # An escaped character, e.g. "\(" or "\:"
    r"(\\.)"
    # [prefix] (":name" ["(regex)"] | "(regex)") [modifier]  |  "*"
    r"|([/.])?(?:(?::(\w+)(?:\(((?:\\.|[^\\()])+)\))?|\(((?:\\.|[^\\()])+)\))([+*?])?|(\*))"
)
_GROUP_ESCAPE_RE = re.compile(r"([=!:$/()])")

# encodeURIComponent for ordinary placeholders. Wildcards are encoded like
# encodeURI, which also keeps reserved characters and "/" but not "?" or "#".
_SEGMENT_SAFE = "!~*'()"
_WILDCARD_SAFE = ";,/:@&=+$!~*'()"


@dataclass(frozen=True, slots=True)
class Placeholder:
    """A parameter slot in a compiled pattern.

    ``key`` is the parameter name, or a positional index for unnamed
    groups and ``*`` wildcards.
    """

    key: str | int
    prefix: str
    delimiter: str
    optional: bool
    repeat: bool
    partial: bool
    wildcard: bool
    constraint: str
    regex: re.Pattern[str] = field(compare=False, repr=False)


def _escape_group(group: str) -> str:
    return _GROUP_ESCAPE_RE.sub(r"\\\1", group)


def parse_pattern(pattern: str) -> tuple[str | Placeholder, ...]:
    """Split *pattern* into literal strings and :class:`Placeholder` parts.

    Raises ``ConfigurationError`` when an inline constraint is not a
    valid regular expression.

    Examples::

        "/foo"            -> ("/foo",)
        "/foo/:input"     -> ("/foo", Placeholder("input", prefix="/", ...))
        "/flights/:a-:b"  -> ("/flights", Placeholder("a"), "-", Placeholder("b"))
    """
    parts: list[str | Placeholder] = []
    literal = ""
    index = 0
    positional = 0

    for match in _PATTERN_RE.finditer(pattern):
        escaped, prefix, name, capture, group, modifier, asterisk = match.groups()
        literal += pattern[index : match.start()]
        index = match.end()

        if escaped:
            literal += escaped[1]
            continue

        following = pattern[index : index + 1]
        partial = prefix is not None and following != "" and following != prefix

        if literal:
            parts.append(literal)
            literal = ""

        delimiter = prefix or "/"
        if name:
            key: str | int = name
        else:
            key = positional
            positional += 1

        constraint = capture or group
        if constraint:
            constraint = _escape_group(constraint)
        elif asterisk:
            constraint = ".*"
        else:
            constraint = f"[^{re.escape(delimiter)}]+?"

        try:
            regex = re.compile(f"(?:{constraint})")
        except re.error as exc:
            msg = f"Invalid constraint {constraint!r} in route pattern {pattern!r}: {exc}"
            raise ConfigurationError(msg) from exc

        parts.append(
            Placeholder(
                key=key,
                prefix=prefix or "",
                delimiter=delimiter,
                optional=modifier in ("?", "*"),
                repeat=modifier in ("+", "*"),
                partial=partial,
                wildcard=bool(asterisk),
                constraint=constraint,
                regex=regex,
            )
        )

    literal += pattern[index:]
    if literal:
        parts.append(literal)
    return tuple(parts)


def render_value(value: Any) -> str:
    """Render a parameter value as URL text (``True`` -> ``"true"``)."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _is_blank(value: Any) -> bool:
    return value is None or value == ""


class CompiledPattern:
    """A route pattern ready for repeated expansion.

    Usage::

        compiled = CompiledPattern("/foo/category/:category")
        compiled.expand({"category": "ogre"})  # "/foo/category/ogre"
    """

    __slots__ = ("parts", "pattern")

    def __init__(self, pattern: str) -> None:
        self.pattern = pattern
        self.parts = parse_pattern(pattern)

    @property
    def keys(self) -> tuple[str | int, ...]:
        """Placeholder keys in order of first appearance."""
        seen: dict[str | int, None] = {}
        for part in self.parts:
            if isinstance(part, Placeholder):
                seen.setdefault(part.key, None)
        return tuple(seen)

    def expand(self, params: Mapping[Any, Any], *, route: str = "") -> str:
        """Substitute *params* into the pattern.

        Raises ``MissingParameterError`` for absent, ``None`` or empty
        values of required placeholders and ``ParameterFormatError`` for
        values that violate a constraint.
        """
        path = ""
        for part in self.parts:
            if isinstance(part, str):
                path += part
                continue

            value = params.get(part.key)

            if _is_blank(value):
                if part.optional:
                    if part.partial:
                        path += part.prefix
                    continue
                raise MissingParameterError(route or self.pattern, part.key)

            if isinstance(value, (list, tuple)):
                if not part.repeat:
                    raise ParameterFormatError(
                        route or self.pattern, part.key, value, "expected a single value"
                    )
                if not value:
                    if part.optional:
                        continue
                    raise MissingParameterError(route or self.pattern, part.key)
                for position, item in enumerate(value):
                    segment = self._encode(part, item, route)
                    path += (part.prefix if position == 0 else part.delimiter) + segment
                continue

            path += part.prefix + self._encode(part, value, route)

        return path

    def _encode(self, part: Placeholder, value: Any, route: str) -> str:
        safe = _WILDCARD_SAFE if part.wildcard else _SEGMENT_SAFE
        segment = quote(render_value(value), safe=safe)
        if part.regex.fullmatch(segment) is None:
            raise ParameterFormatError(
                route or self.pattern, part.key, value, f"must match {part.constraint!r}"
            )
        return segment

    def __repr__(self) -> str:
        return f"CompiledPattern({self.pattern!r})"
