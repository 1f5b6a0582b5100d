"""Reverse URL generation from a built route table.

Usage::

    urls = UrlBuilder(table)
    urls.url_for("article.detail", {"slug": "hello"})       # "/articles/hello"
    urls.url_for("article.list", {}, {"page": 2})           # "/articles?page=2"

    urls.set_base_url("https://example.com")
    urls.absolute_url_for("article.list")                   # "https://example.com/articles"
"""

import dataclasses
import logging
import threading
from collections.abc import Callable, Mapping
from typing import Any

from waypoint.config import UrlConfig
from waypoint.errors import ConfigurationError, RouteNotFoundError
from waypoint.naming.table import RouteTable
from waypoint.urls.pattern import CompiledPattern
from waypoint.urls.query import encode_query

logger = logging.getLogger("waypoint.urls")


class UrlBuilder:
    """Generates URLs for named routes.

    The table is compiled once at construction, so a malformed inline
    constraint raises ``ConfigurationError`` here rather than on first
    use. Reads are lock-free; only :meth:`set_base_url` takes a lock,
    since it is the one piece of state that may change after startup.
    """

    __slots__ = ("_compiled", "_config", "_config_lock", "_table")

    def __init__(self, table: RouteTable, config: UrlConfig | None = None) -> None:
        self._table = table
        self._config: UrlConfig = config or UrlConfig()
        self._config_lock = threading.Lock()
        self._compiled: dict[str, CompiledPattern] = {
            name: CompiledPattern(entry.pattern) for name, entry in table.items()
        }

    @property
    def table(self) -> RouteTable:
        return self._table

    @property
    def config(self) -> UrlConfig:
        return self._config

    def set_base_url(self, url: str | None) -> None:
        """Set the prefix used by :meth:`absolute_url_for`. Later calls overwrite."""
        with self._config_lock:
            self._config = dataclasses.replace(self._config, base_url=url)
        logger.debug("Base URL set to %r", url)

    def url_for(
        self,
        name: str,
        params: Mapping[Any, Any] | None = None,
        queries: Mapping[str, Any] | None = None,
    ) -> str:
        """Return the path for route *name* with *params* substituted.

        When *queries* is given (even empty) a ``?`` and the serialized
        query string are appended.

        Raises:
            RouteNotFoundError: *name* is not in the table.
            MissingParameterError: a required parameter is absent, ``None`` or ``""``.
            ParameterFormatError: a value violates an inline constraint.
        """
        compiled = self._compiled.get(name)
        if compiled is None:
            raise RouteNotFoundError(name)

        url = compiled.expand(params or {}, route=name)
        if queries is not None:
            url = f"{url}?{encode_query(queries)}"
        return url

    def absolute_url_for(
        self,
        name: str,
        params: Mapping[Any, Any] | None = None,
        queries: Mapping[str, Any] | None = None,
    ) -> str:
        """Return ``base_url + url_for(...)``.

        Raises ``ConfigurationError`` if no base URL has been set.
        """
        base_url = self._config.base_url
        if not base_url:
            msg = "No base URL configured. Call set_base_url() before absolute_url_for()."
            raise ConfigurationError(msg)
        return base_url + self.url_for(name, params, queries)

    def route_table(self) -> dict[str, str]:
        """Snapshot of name -> pattern, suitable for JSON export."""
        return self._table.patterns()

    @property
    def template_globals(self) -> dict[str, Callable[..., str]]:
        """URL helpers to expose to templates and view helpers."""
        return {
            "url_for": self.url_for,
            "absolute_url_for": self.absolute_url_for,
        }
