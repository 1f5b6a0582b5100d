"""``waypoint routes`` — list named routes.

Resolves an import string to a registry (building its table if needed)
or an already built table, and prints every dotted name with its pattern.
"""

import argparse
import json
import sys

from waypoint.cli._resolve import resolve_target
from waypoint.errors import WaypointError
from waypoint.naming.table import RouteTable


def run_routes(args: argparse.Namespace) -> None:
    """Print the route table for ``args.target``.

    With ``--json`` the name -> pattern mapping is printed as a JSON
    object; otherwise as a NAME / PATTERN table sorted by name.
    """
    try:
        target = resolve_target(args.target)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    if isinstance(target, RouteTable):
        table = target
    elif target.table is not None:
        table = target.table
    else:
        try:
            table = target.build()
        except WaypointError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            raise SystemExit(1) from exc

    patterns = table.patterns()

    if args.json:
        print(json.dumps(patterns, indent=2))
        return

    if not patterns:
        print("No named routes registered.")
        return

    rows = sorted(patterns.items())
    max_name = max(max(len(name) for name, _ in rows), 4)  # "NAME" header
    max_pattern = max(len(pattern) for _, pattern in rows)

    fmt = f"{{:<{max_name}}}  {{}}"
    print(fmt.format("NAME", "PATTERN"))
    print("-" * min(max_name + 2 + max(max_pattern, 7), 80))
    for name, pattern in rows:
        print(fmt.format(name, pattern))
