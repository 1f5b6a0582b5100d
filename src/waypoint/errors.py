"""Waypoint exception hierarchy.

Shared across the table builder, the registry, and the URL builder so
every module raises and catches the same types.
"""


class WaypointError(Exception):
    """Base for all waypoint-specific errors."""


class ConfigurationError(WaypointError):
    """Raised when the naming layer is used out of order.

    Building a route table twice, registering routes after the table was
    built, or asking for an absolute URL before a base URL is set.
    """


class StructuralError(WaypointError):
    """Raised when an enter/exit traversal log is not balanced.

    Signals a bug in the registration layer, never bad user input.
    """


class NameConflictError(WaypointError):
    """Raised when one dotted name is registered with two different patterns."""

    def __init__(self, name: str, existing: str, pattern: str) -> None:
        self.name = name
        self.existing = existing
        self.pattern = pattern
        super().__init__(
            f"Duplicate route name {name!r}: already bound to {existing!r}, "
            f"cannot rebind to {pattern!r}"
        )


class InvalidNameError(WaypointError, ValueError):
    """Raised when a route name contains characters outside ``[-_.a-zA-Z0-9]``."""

    def __init__(self, name: object) -> None:
        self.name = name
        super().__init__(f"Invalid route name: {name!r}")


class RouteNotFoundError(WaypointError, LookupError):
    """Raised when a URL is requested for a name missing from the table."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"No route named {name!r}")


class ParameterError(WaypointError, ValueError):
    """Base for errors raised while substituting path parameters."""


class MissingParameterError(ParameterError):
    """A required placeholder has no value, or its value is ``None`` or ``""``."""

    def __init__(self, route: str, param: str | int) -> None:
        self.route = route
        self.param = param
        super().__init__(f"Route {route!r} requires a value for parameter {param!r}")


class ParameterFormatError(ParameterError):
    """A supplied value does not satisfy the placeholder's constraint."""

    def __init__(self, route: str, param: str | int, value: object, detail: str = "") -> None:
        self.route = route
        self.param = param
        self.value = value
        msg = f"Route {route!r}: invalid value {value!r} for parameter {param!r}"
        if detail:
            msg = f"{msg} ({detail})"
        super().__init__(msg)
