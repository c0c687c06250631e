"""Matching the remaining path against sorted routes.

The first route whose compiled pattern consumes the whole remaining
path wins.  Captured segments are attributed to the screen in the
matched chain that declared them, coerced with that screen's ``parse``
functions, and then shared across the whole chain.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any
from urllib.parse import unquote

from waypoint.routing.flatten import join_paths
from waypoint.routing.segments import PatternMatch, is_dynamic, is_wildcard, param_name
from waypoint.routing.types import FlattenedRoute, ParsedRoute


def match_routes(remaining: str, routes: Sequence[FlattenedRoute]) -> list[ParsedRoute] | None:
    """Match *remaining* against *routes* in priority order.

    Args:
        remaining: Slash-terminated path without a leading slash,
            e.g. ``"chat/jane/42/"``.
        routes: Flattened routes, most specific first.

    Returns:
        One :class:`ParsedRoute` per screen in the matched chain (root
        first), or ``None`` if no route matches.
    """
    for route in routes:
        if route.compiled is None:
            continue
        match = route.compiled.match(remaining)
        if match is None:
            continue

        parsed = [
            _parse_route(name, _find_owner(route.route_names[: depth + 1], route, routes), match)
            for depth, name in enumerate(route.route_names)
        ]
        _cascade_params(parsed)
        return parsed
    return None


def match_root(routes: Sequence[FlattenedRoute]) -> list[ParsedRoute] | None:
    """Match the root path ``/``.

    Only a route with an empty path whose ancestors all have empty (or
    no) paths matches; an all-optional pattern deeper in the tree would
    otherwise claim the root.
    """
    for route in routes:
        if route.path != "":
            continue
        chain = route.route_names
        if all(not _declared_path(chain[: depth + 1], routes) for depth in range(len(chain) - 1)):
            return [ParsedRoute(name=name) for name in chain]
    return None


def _declared_path(chain: tuple[str, ...], routes: Sequence[FlattenedRoute]) -> str:
    """Path declared by the screen at the end of *chain*, ``""`` if it has none."""
    for route in routes:
        if route.route_names == chain:
            return route.path
    return ""


def _find_owner(
    chain: tuple[str, ...],
    matched: FlattenedRoute,
    routes: Sequence[FlattenedRoute],
) -> FlattenedRoute | None:
    """Find the record declaring the last screen of *chain* on the way to *matched*.

    Matching on the whole chain keeps a screen name reused at several
    depths attributed to the right level.  The pattern must also be a
    prefix of the matched one: an ``exact`` descendant does not carry
    its ancestors' segments.
    """
    matched_parts = matched.parts
    for route in routes:
        if route.route_names != chain:
            continue
        parts = route.parts
        if matched_parts[: len(parts)] == parts:
            return route
    return None


def _parse_route(
    name: str,
    owner: FlattenedRoute | None,
    match: PatternMatch,
) -> ParsedRoute:
    if owner is None:
        return ParsedRoute(name=name)

    own_parts = join_paths(owner.path).split("/") if join_paths(owner.path) else []
    # Index of the owner's first own segment within the matched pattern
    offset = len(owner.parts) - len(own_parts)
    parse = owner.parse or {}
    params: dict[str, Any] = {}

    for i, part in enumerate(own_parts):
        consumed = match.captures.get(i + offset)
        if not consumed:
            continue
        key = param_name(part)
        if is_dynamic(part):
            value = unquote(consumed[0])
            params[key] = parse[key](value) if key in parse else value
        elif is_wildcard(part) and key:
            values = [unquote(segment) for segment in consumed]
            params[key] = [parse[key](value) for value in values] if key in parse else values

    if params:
        return ParsedRoute(name=name, params=params)
    return ParsedRoute(name=name)


def _cascade_params(routes: list[ParsedRoute]) -> None:
    """Give every route in the chain the union of the chain's params.

    Inner declarations override outer ones, so a layout at
    ``/foo/:id/bar/:id`` sees the innermost ``id``.
    """
    merged: dict[str, Any] = {}
    for route in routes:
        if route.params:
            merged.update(route.params)
    if merged:
        for route in routes:
            route.params = dict(merged)
