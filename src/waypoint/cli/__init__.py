"""Waypoint CLI — inspect the named route table of an application.

Entry point registered as ``waypoint`` in ``pyproject.toml``::

    [project.scripts]
    waypoint = "waypoint.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``waypoint`` command."""
    parser = argparse.ArgumentParser(
        prog="waypoint",
        description="Waypoint — named routes and reverse URL generation.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- waypoint routes --------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List named routes")
    routes_parser.add_argument(
        "target",
        help="Import string (e.g. myapp.routes:registry)",
    )
    routes_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the name -> pattern table as JSON",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "routes":
        from waypoint.cli._routes import run_routes

        run_routes(args)
