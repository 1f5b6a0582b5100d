"""Locate the routes to inspect from a ``"module[:attr]"`` string."""

import importlib

from waypoint.naming.table import RouteTable
from waypoint.registry import RouteRegistry

_DEFAULT_ATTR = "registry"


def resolve_target(import_string: str) -> RouteRegistry | RouteTable:
    """Import *import_string* and return the registry or table it names.

    ``"blog.routes"`` means ``blog.routes:registry``. A zero-argument
    callable found there (an application factory, say) is called once and
    must return a ``RouteRegistry`` or a built ``RouteTable``; anything
    else is a ``TypeError``. Import and attribute errors propagate as is.
    """
    module_name, _, attr = import_string.partition(":")
    target = getattr(importlib.import_module(module_name), attr or _DEFAULT_ATTR)

    accepted = (RouteRegistry, RouteTable)
    if callable(target) and not isinstance(target, accepted):
        try:
            target = target()
        except Exception as exc:
            msg = f"Factory function {import_string!r} raised an error: {exc}"
            raise TypeError(msg) from exc

    if not isinstance(target, accepted):
        msg = (
            f"{import_string!r} resolved to {type(target).__name__}, "
            "not a waypoint RouteRegistry or RouteTable"
        )
        raise TypeError(msg)

    return target
