"""``waypoint routes`` — list flattened routes in match priority order.

Prints a table of PATTERN, ROUTE chain, and KIND, most specific first.
"""

import argparse
import sys

from waypoint.cli._target import load_options
from waypoint.errors import ConfigurationError
from waypoint.routing.resolver import rank_routes
from waypoint.routing.segments import SegmentKind
from waypoint.routing.types import FlattenedRoute


def route_kind(route: FlattenedRoute) -> str:
    """Classify a route as ``layout``, ``wildcard``, ``dynamic``, or ``static``."""
    if route.has_children:
        return "layout"
    kinds = {segment.kind for segment in route.compiled.segments} if route.compiled else set()
    if kinds & {SegmentKind.WILDCARD, SegmentKind.WILDCARD_OPTIONAL}:
        return "wildcard"
    if kinds & {SegmentKind.DYNAMIC, SegmentKind.DYNAMIC_OPTIONAL}:
        return "dynamic"
    return "static"


def run_routes(args: argparse.Namespace) -> None:
    """List the routes of ``args.target`` in the order they are matched."""
    try:
        options = load_options(args.target)
    except (ModuleNotFoundError, AttributeError, TypeError, ValueError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    try:
        routes, _ = rank_routes(options, args.previous or ())
    except ConfigurationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    if not routes:
        print("No routes declared.")
        return

    # Build rows: (pattern, route chain, kind)
    rows = [("/" + route.pattern, " > ".join(route.route_names), route_kind(route)) for route in routes]

    # Column widths
    max_pattern = max(max(len(r[0]) for r in rows), 7)  # "PATTERN" header
    max_chain = max(max(len(r[1]) for r in rows), 5)  # "ROUTE" header

    fmt = f"{{:<{max_pattern}}}  {{:<{max_chain}}}  {{}}"
    print(fmt.format("PATTERN", "ROUTE", "KIND"))
    print("-" * min(max_pattern + max_chain + 12, 80))
    for pattern, chain, kind in rows:
        print(fmt.format(pattern, chain, kind))
