"""Path composition for nested route patterns."""

from collections.abc import Iterable


def build_path(segments: Iterable[str]) -> str:
    """Join a path hierarchy (root first) into one pattern.

    Segments equal to ``"/"`` occupy no path of their own and are dropped.
    The remaining segments are concatenated as-is (each is expected to
    start with ``/``). When nothing remains the result is ``"/"``.

    Examples::

        build_path(["/"])                         -> "/"
        build_path(["/foo", "/:slug"])            -> "/foo/:slug"
        build_path(["/foo", "/", "/deep-foo"])    -> "/foo/deep-foo"
    """
    kept = [segment for segment in segments if segment != "/"]
    if not kept:
        return "/"
    return "".join(kept)
