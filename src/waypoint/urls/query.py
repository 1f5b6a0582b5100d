"""Query string serialization for generated URLs."""

from collections.abc import Mapping
from typing import Any
from urllib.parse import quote, urlencode

from waypoint.urls.pattern import render_value

# Characters encodeURIComponent leaves unescaped besides [A-Za-z0-9_.~-]
_QUERY_SAFE = "!'()*"


def _render(value: Any) -> str:
    if value is None:
        return ""
    return render_value(value)


def encode_query(queries: Mapping[str, Any]) -> str:
    """Serialize *queries* as ``key=value`` pairs joined by ``&``.

    Pairs keep the mapping's insertion order. List and tuple values
    expand into one pair per item; ``None`` yields an empty value.

    Examples::

        encode_query({})                  -> ""
        encode_query({"a": "b"})          -> "a=b"
        encode_query({"a": [1, 2, 3]})    -> "a=1&a=2&a=3"
        encode_query({"no-layout": True}) -> "no-layout=true"
    """
    pairs: list[tuple[str, str]] = []
    for key, value in queries.items():
        if isinstance(value, (list, tuple)):
            pairs.extend((str(key), _render(item)) for item in value)
        else:
            pairs.append((str(key), _render(value)))
    return urlencode(pairs, safe=_QUERY_SAFE, quote_via=quote)
