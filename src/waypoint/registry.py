"""Route registration with naming.

Wraps an external dispatcher (the thing that actually matches requests)
and records a traversal log of named routes alongside it. Sub-registries
mounted under a path contribute their own log, so modules can register
routes without knowing where they will eventually be mounted.

Usage::

    articles = RouteRegistry()
    articles.get("/", list_view, name="list")
    articles.get("/:slug", detail_view, name="detail")

    root = RouteRegistry(dispatcher)
    root.all("/admin*", require_login)            # unnamed: not in the table
    root.mount("/articles", articles, name="article")

    urls = root.url_builder()
    urls.url_for("article.detail", {"slug": "hello"})  # "/articles/hello"
"""

import logging
from collections.abc import Callable, Iterable
from typing import Any, Protocol, TypeAlias

from waypoint.config import UrlConfig
from waypoint.errors import ConfigurationError, InvalidNameError
from waypoint.naming.events import TraversalEvent
from waypoint.naming.names import is_valid_name
from waypoint.naming.table import RouteTable, RouteTableBuilder
from waypoint.urls.builder import UrlBuilder

logger = logging.getLogger("waypoint.registry")

# Route handler or middleware, opaque to the naming layer
Handler: TypeAlias = Callable[..., Any]


class Dispatcher(Protocol):
    """Protocol for the request router registrations are forwarded to.

    ``method`` is a lowercase HTTP method, ``"all"``, or ``"use"``
    (mount middleware or a sub-application under a path prefix).
    """

    def add(self, method: str, path: str, handlers: tuple[Any, ...]) -> None: ...


def flatten_handlers(handlers: Iterable[Any]) -> list[Any]:
    """Flatten arbitrarily nested lists and tuples of handlers."""
    flat: list[Any] = []
    for handler in handlers:
        if isinstance(handler, (list, tuple)):
            flat.extend(flatten_handlers(handler))
        else:
            flat.append(handler)
    return flat


class RouteRegistry:
    """Records named routes and forwards registrations to a dispatcher.

    Mutable during setup. Frozen once :meth:`build` produces the route
    table; registering afterwards raises ``ConfigurationError``.
    """

    __slots__ = ("_builder", "_events", "dispatcher")

    def __init__(self, dispatcher: Dispatcher | None = None) -> None:
        self.dispatcher = dispatcher
        self._events: list[TraversalEvent] = []
        self._builder = RouteTableBuilder()

    # -- Registration --

    def add(
        self,
        method: str | None,
        path: str,
        *handlers: Any,
        name: str | None = None,
    ) -> None:
        """Register *handlers* for *method* at *path*.

        Args:
            method: Dispatcher method (``"get"``, ``"use"``, ...). ``None``
                records the name without dispatching anything.
            path: Path segment relative to the enclosing mount, e.g.
                ``"/"``, ``"/:slug"``. ``"/"`` contributes no path.
            handlers: Middleware followed by the effective controller.
                Nested lists are flattened. If the controller is a
                ``RouteRegistry`` its named routes nest under this one.
            name: Local route name. ``None`` leaves the route (and anything
                under it) out of the table; ``""`` nests children without
                adding a name level.
        """
        self._check_not_built()
        if name is not None and not is_valid_name(name):
            raise InvalidNameError(name)

        flat = flatten_handlers(handlers)

        if name is not None:
            self._events.append(TraversalEvent.enter(name, path))

        if method is not None:
            if self.dispatcher is not None:
                self.dispatcher.add(method, path, tuple(flat))

            controller = flat[-1] if flat else None
            if isinstance(controller, RouteRegistry):
                self._events.extend(controller._events)
                logger.debug(
                    "Mounted %d traversal events at %r", len(controller._events), path
                )

        if name is not None:
            self._events.append(TraversalEvent.exit(name, path))

    def get(self, path: str, *handlers: Any, name: str | None = None) -> None:
        self.add("get", path, *handlers, name=name)

    def post(self, path: str, *handlers: Any, name: str | None = None) -> None:
        self.add("post", path, *handlers, name=name)

    def put(self, path: str, *handlers: Any, name: str | None = None) -> None:
        self.add("put", path, *handlers, name=name)

    def patch(self, path: str, *handlers: Any, name: str | None = None) -> None:
        self.add("patch", path, *handlers, name=name)

    def delete(self, path: str, *handlers: Any, name: str | None = None) -> None:
        self.add("delete", path, *handlers, name=name)

    def head(self, path: str, *handlers: Any, name: str | None = None) -> None:
        self.add("head", path, *handlers, name=name)

    def options(self, path: str, *handlers: Any, name: str | None = None) -> None:
        self.add("options", path, *handlers, name=name)

    def all(self, path: str, *handlers: Any, name: str | None = None) -> None:
        self.add("all", path, *handlers, name=name)

    def use(self, path: str, *handlers: Any, name: str | None = None) -> None:
        self.add("use", path, *handlers, name=name)

    def mount(
        self,
        path: str,
        child: "RouteRegistry",
        *middleware: Handler,
        name: str | None = None,
    ) -> None:
        """Mount *child* under *path*, after optional *middleware*."""
        if not isinstance(child, RouteRegistry):
            msg = f"mount() expects a RouteRegistry, got {type(child).__name__}"
            raise TypeError(msg)
        self.add("use", path, *middleware, child, name=name)

    def add_mapping(self, name: str, path: str) -> None:
        """Record *name* -> *path* without registering a handler."""
        self.add(None, path, name=name)

    def route(
        self,
        path: str,
        *,
        methods: list[str] | None = None,
        name: str | None = None,
    ) -> Callable[[Handler], Handler]:
        """Register a route handler via decorator.

        Args:
            path: Path segment, e.g. ``"/:slug"``.
            methods: Dispatcher methods. Defaults to ``["get"]``. A name
                given here applies to the first method only, so the
                table gets a single entry.
            name: Optional local route name.
        """

        def decorator(func: Handler) -> Handler:
            for index, method in enumerate(methods or ["get"]):
                self.add(method.lower(), path, func, name=name if index == 0 else None)
            return func

        return decorator

    # -- Build --

    @property
    def events(self) -> tuple[TraversalEvent, ...]:
        """Snapshot of the traversal log recorded so far."""
        return tuple(self._events)

    @property
    def built(self) -> bool:
        return self._builder.built

    @property
    def table(self) -> RouteTable | None:
        return self._builder.table

    def build(self) -> RouteTable:
        """Build the route table from the recorded log. Callable once."""
        return self._builder.build(self._events)

    def url_builder(self, config: UrlConfig | None = None) -> UrlBuilder:
        """Return a :class:`UrlBuilder` over this registry's table.

        Builds the table first if that has not happened yet.
        """
        table = self._builder.table
        if table is None:
            table = self.build()
        return UrlBuilder(table, config)

    def _check_not_built(self) -> None:
        if self._builder.built:
            msg = (
                "Cannot register routes after the route table has been built. "
                "Register every route before calling build()."
            )
            raise ConfigurationError(msg)
