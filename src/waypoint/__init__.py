"""Waypoint — named routes and reverse URL generation for nested routers.

Register routes in a tree, name the nodes you care about, and build a
flat dotted-name table once at startup::

    from waypoint import RouteRegistry

    articles = RouteRegistry()
    articles.get("/", list_articles, name="list")
    articles.get("/:slug", show_article, name="detail")

    root = RouteRegistry()
    root.mount("/articles", articles, name="article")

    urls = root.url_builder()
    urls.url_for("article.detail", {"slug": "hello"})   # "/articles/hello"
    urls.url_for("article.list", {}, {"page": 2})       # "/articles?page=2"
"""

__version__ = "0.1.0"
__all__ = [
    "ConfigurationError",
    "InvalidNameError",
    "MissingParameterError",
    "NameConflictError",
    "ParameterError",
    "ParameterFormatError",
    "RouteNotFoundError",
    "RouteRegistry",
    "RouteTable",
    "RouteTableBuilder",
    "StructuralError",
    "TraversalEvent",
    "UrlBuilder",
    "UrlConfig",
    "WaypointError",
    "build_route_table",
]

_ERRORS = frozenset(
    {
        "ConfigurationError",
        "InvalidNameError",
        "MissingParameterError",
        "NameConflictError",
        "ParameterError",
        "ParameterFormatError",
        "RouteNotFoundError",
        "StructuralError",
        "WaypointError",
    }
)


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import waypoint`` fast while providing a clean top-level API.
    """
    if name == "RouteRegistry":
        from waypoint.registry import RouteRegistry

        return RouteRegistry

    if name in ("RouteTable", "RouteTableBuilder", "build_route_table"):
        from waypoint.naming import table

        return getattr(table, name)

    if name == "TraversalEvent":
        from waypoint.naming.events import TraversalEvent

        return TraversalEvent

    if name == "UrlBuilder":
        from waypoint.urls.builder import UrlBuilder

        return UrlBuilder

    if name == "UrlConfig":
        from waypoint.config import UrlConfig

        return UrlConfig

    if name in _ERRORS:
        from waypoint import errors

        return getattr(errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
