"""URL generation configuration.

UrlConfig is a frozen dataclass — immutable after creation. The URL
builder swaps in a new instance rather than mutating the current one.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass

BASE_URL_ENV = "WAYPOINT_BASE_URL"


@dataclass(frozen=True, slots=True)
class UrlConfig:
    """Settings for URL generation. Immutable after creation.

    ``base_url`` is prepended verbatim by ``absolute_url_for``::

        config = UrlConfig(base_url="https://example.com")
    """

    base_url: str | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "UrlConfig":
        """Read settings from ``WAYPOINT_BASE_URL``; empty means unset."""
        env = os.environ if environ is None else environ
        return cls(base_url=env.get(BASE_URL_ENV) or None)
