"""``waypoint resolve`` — resolve one path against a linking target.

Prints the nested state as JSON, or exits with status 1 when no route
matches.
"""

import argparse
import json
import sys

from waypoint.cli._target import load_options
from waypoint.config import ResolverConfig
from waypoint.errors import ConfigurationError
from waypoint.routing.resolver import Resolver


def run_resolve(args: argparse.Namespace) -> None:
    """Resolve ``args.path`` against the options loaded from ``args.target``."""
    try:
        options = load_options(args.target)
    except (ModuleNotFoundError, AttributeError, TypeError, ValueError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    resolver = Resolver(
        ResolverConfig(
            base_url=args.base_url or "",
            development=args.development,
            allow_url_param_normalization=args.normalize_params,
        )
    )

    try:
        state = resolver.resolve(args.path, options, previous_segments=args.previous or ())
    except ConfigurationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    if state is None:
        print(f"No route matches {args.path!r}", file=sys.stderr)
        raise SystemExit(1)

    print(json.dumps(state.to_dict(), indent=2, default=str))
