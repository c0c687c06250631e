"""Waypoint CLI — resolve paths and inspect route priority.

Entry point registered as ``waypoint`` in ``pyproject.toml``::

    [project.scripts]
    waypoint = "waypoint.cli:main"
"""

import argparse
import logging
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``waypoint`` command."""
    parser = argparse.ArgumentParser(
        prog="waypoint",
        description="Waypoint — deep-link resolution for nested navigators.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- waypoint resolve ---------------------------------------------------
    resolve_parser = subparsers.add_parser("resolve", help="Resolve a path to navigation state")
    resolve_parser.add_argument(
        "target",
        help="Linking options: JSON file, screens directory, or import string (e.g. myapp:linking)",
    )
    resolve_parser.add_argument("path", help="Path to resolve (e.g. /chat/jane/42?tab=info)")
    resolve_parser.add_argument("--base-url", default=None, help="Base URL prefix to strip")
    resolve_parser.add_argument(
        "--development",
        action="store_true",
        help="Development mode (base URL is not stripped)",
    )
    resolve_parser.add_argument(
        "--normalize-params",
        action="store_true",
        help="Let query params override path params of the same name",
    )
    resolve_parser.add_argument(
        "--previous",
        nargs="*",
        default=None,
        metavar="SEGMENT",
        help="Previously active segments, e.g. '(tabs)' home",
    )
    resolve_parser.add_argument("-v", "--verbose", action="store_true", help="Log diagnostics")

    # -- waypoint routes ----------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List routes in match priority order")
    routes_parser.add_argument(
        "target",
        help="Linking options: JSON file, screens directory, or import string (e.g. myapp:linking)",
    )
    routes_parser.add_argument(
        "--previous",
        nargs="*",
        default=None,
        metavar="SEGMENT",
        help="Previously active segments used for tie-breaking",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "resolve":
        from waypoint.cli._resolve import run_resolve

        logging.basicConfig(
            level=logging.DEBUG if args.verbose else logging.WARNING,
            format="%(levelname)s %(name)s: %(message)s",
        )
        run_resolve(args)
    elif args.command == "routes":
        from waypoint.cli._routes import run_routes

        run_routes(args)
