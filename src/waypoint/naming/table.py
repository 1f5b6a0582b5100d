"""Route table construction from a traversal log.

The registry records a flat enter/exit log while routes are declared.
``build_route_table`` replays that log once with an explicit stack and
produces an immutable name -> pattern table.
"""

import logging
import threading
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from waypoint.errors import ConfigurationError, NameConflictError, StructuralError
from waypoint.naming.events import Frame, Operation, TraversalEvent
from waypoint.naming.names import build_name
from waypoint.naming.paths import build_path
from waypoint.naming.tokens import Token, tokenize, tokens_to_string

logger = logging.getLogger("waypoint.table")


@dataclass(frozen=True, slots=True)
class RouteTableEntry:
    """A terminal route: its composed pattern and the pattern's tokens.

    Example::

        RouteTableEntry(
            pattern="/artikel/kategori/:category",
            tokens=(Token(""), Token("artikel"), Token("kategori"),
                    Token("category", input=True)),
        )
    """

    pattern: str
    tokens: tuple[Token, ...]

    @classmethod
    def from_pattern(cls, pattern: str) -> "RouteTableEntry":
        return cls(pattern=pattern, tokens=tokenize(pattern))


class RouteTable(Mapping[str, RouteTableEntry]):
    """Immutable mapping of dotted route name to :class:`RouteTableEntry`."""

    __slots__ = ("_entries",)

    _entries: Mapping[str, RouteTableEntry]

    def __init__(self, entries: Mapping[str, RouteTableEntry] | None = None) -> None:
        self._entries = MappingProxyType(dict(entries or {}))

    def __getitem__(self, name: str) -> RouteTableEntry:
        return self._entries[name]

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        items = ", ".join(f"{name!r}: {entry.pattern!r}" for name, entry in self.items())
        return f"RouteTable({{{items}}})"

    def patterns(self) -> dict[str, str]:
        """Return a fresh name -> pattern dict, safe to serialize."""
        return {name: entry.pattern for name, entry in self._entries.items()}


def is_terminal(previous: TraversalEvent | None, event: TraversalEvent) -> bool:
    """Check whether *event* closes a node that registered no named children.

    True only when *event* is an EXIT directly preceded by the ENTER of
    the same name.
    """
    if previous is None:
        return False
    return (
        previous.operation is Operation.ENTER
        and event.operation is Operation.EXIT
        and previous.name == event.name
    )


def _register(entries: dict[str, RouteTableEntry], stack: list[Frame]) -> None:
    name = build_name(frame.name for frame in stack)
    pattern = build_path(frame.path for frame in stack)

    existing = entries.get(name)
    if existing is not None:
        if existing.pattern != pattern:
            raise NameConflictError(name, existing.pattern, pattern)
        logger.warning("Route %r registered again with identical pattern %r", name, pattern)
        return

    entry = RouteTableEntry.from_pattern(pattern)
    entries[name] = entry
    logger.debug("Registered route %r -> %s", name, tokens_to_string(entry.tokens))


def build_route_table(events: Iterable[TraversalEvent] | None) -> RouteTable:
    """Replay a traversal log and return the table of terminal routes.

    Raises ``NameConflictError`` when one dotted name resolves to two
    different patterns, and ``StructuralError`` when the log does not
    nest like balanced parentheses.
    """
    stack: list[Frame] = []
    entries: dict[str, RouteTableEntry] = {}

    previous: TraversalEvent | None = None
    for event in events or ():
        if event.operation is Operation.ENTER:
            stack.append(Frame(event.name, event.path))
        else:
            if is_terminal(previous, event):
                _register(entries, stack)

            if not stack:
                msg = (
                    f"Unbalanced traversal log: exit of {event.name!r} "
                    "has no matching enter."
                )
                raise StructuralError(msg)
            stack.pop()

        previous = event

    if stack:
        dangling = ", ".join(repr(frame.name) for frame in stack)
        msg = f"Unbalanced traversal log: no exit for {dangling}."
        raise StructuralError(msg)

    return RouteTable(entries)


class RouteTableBuilder:
    """One-shot route table construction.

    ``build()`` may succeed exactly once; the table is immutable afterwards.

    Thread safety:
        Uses a Lock + double-check so that, even if several threads race
        to build on first use, exactly one replays the log and the rest
        get a ``ConfigurationError``.
    """

    __slots__ = ("_lock", "_table")

    def __init__(self) -> None:
        self._table: RouteTable | None = None
        self._lock = threading.Lock()

    @property
    def built(self) -> bool:
        return self._table is not None

    @property
    def table(self) -> RouteTable | None:
        """The built table, or ``None`` before :meth:`build` runs."""
        return self._table

    def build(self, events: Iterable[TraversalEvent] | None) -> RouteTable:
        """Build the table from *events*. A second call raises."""
        if self._table is not None:
            raise ConfigurationError("Route table has already been built.")
        with self._lock:
            if self._table is not None:
                raise ConfigurationError("Route table has already been built.")
            table = build_route_table(events)
            self._table = table

        logger.info("Built route table with %d named routes", len(table))
        return table
