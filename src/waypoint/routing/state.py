"""Nested state assembly.

Turns the matched route chain into a navigator state tree, one level
per screen, inserting declared initial routes as inactive siblings.
The focused leaf then receives the resolved path plus query and hash
params.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any
from urllib.parse import parse_qsl, urlsplit

from waypoint.routing.types import (
    FlattenedRoute,
    InitialRoute,
    ParseConfig,
    ParsedRoute,
    ResultState,
)

logger = logging.getLogger("waypoint.routing")

# Key the URL fragment is stored under in the focused route's params
HASH_PARAM = "#"


def find_initial_route(
    route_name: str,
    parent_screens: Sequence[str],
    initial_routes: Sequence[InitialRoute],
) -> str | None:
    """Return the initial route to insert before *route_name*, if any.

    The first declaration whose parent chain equals *parent_screens*
    decides.  Nothing is inserted when the route is itself the initial
    route.
    """
    parents = tuple(parent_screens)
    for initial in initial_routes:
        if initial.parent_screens == parents:
            if route_name != initial.initial_route_name:
                return initial.initial_route_name
            return None
    return None


def _create_state(initial_route: str | None, route: ParsedRoute, *, is_leaf: bool) -> ResultState:
    if not is_leaf:
        route.state = ResultState(routes=[])
    if initial_route is None:
        return ResultState(routes=[route])
    default = ParsedRoute(
        name=initial_route,
        params=dict(route.params) if route.params is not None else None,
    )
    return ResultState(routes=[default, route], index=1)


def find_focused_route(state: ResultState) -> ParsedRoute | None:
    """Descend through the active route at each level to the leaf."""
    current = state
    while current.routes:
        route = current.routes[current.focused_index()]
        if route.state is None or not route.state.routes:
            return route
        current = route.state
    return None


def find_parse_config(route_name: str, routes: Sequence[FlattenedRoute]) -> ParseConfig | None:
    """Parse functions of the first route whose chain ends in *route_name*."""
    for route in routes:
        if route.route_names[-1] == route_name:
            return route.parse
    return None


def parse_query_params(
    path: str,
    parse: ParseConfig | None = None,
    hash: str = "",
) -> dict[str, Any] | None:
    """Extract query-string and hash params from *path*.

    Repeated keys become a list in order of appearance; a single value
    stays scalar.  Returns ``None`` when there is nothing to add.

    Examples::

        parse_query_params("/a?tag=x&tag=y")     -> {"tag": ["x", "y"]}
        parse_query_params("/a?n=1", {"n": int}) -> {"n": 1}
        parse_query_params("/a", hash="top")     -> {"#": "top"}
    """
    params: dict[str, Any] = {}
    if hash:
        params[HASH_PARAM] = hash

    values: dict[str, list[Any]] = {}
    query = urlsplit(path).query
    for name, value in parse_qsl(query, keep_blank_values=True):
        if parse is not None and name in parse:
            value = parse[name](value)
        values.setdefault(name, []).append(value)

    for name, collected in values.items():
        params[name] = collected[0] if len(collected) == 1 else collected

    return params or None


def merge_query_params(
    route: ParsedRoute,
    params: Mapping[str, Any],
    *,
    allow_url_param_normalization: bool = False,
) -> None:
    """Merge query params into *route*, keeping path params on conflict.

    With *allow_url_param_normalization* the query value replaces the
    path value instead.
    """
    merged = dict(route.params or {})
    for name, value in params.items():
        if name not in merged:
            merged[name] = value
        elif allow_url_param_normalization:
            merged[name] = value
        else:
            logger.warning(
                "Route '/%s' with param '%s' was specified both in the path and as a param, "
                "removing from path",
                route.name,
                name,
            )
    route.params = merged or None


def create_nested_state(
    path: str,
    routes: Sequence[ParsedRoute],
    initial_routes: Sequence[InitialRoute],
    flat_routes: Sequence[FlattenedRoute] | None = None,
    hash: str = "",
    *,
    allow_url_param_normalization: bool = False,
) -> ResultState:
    """Assemble the nested state for a matched route chain.

    Args:
        path: Clean path reported on the focused route (query included).
        routes: Matched routes, root first.  Must not be empty.
        initial_routes: Declared initial routes.
        flat_routes: Sorted flattened routes, used to find the focused
            route's ``parse`` functions for query values.
        hash: URL fragment without ``#``.
        allow_url_param_normalization: Let query params override path params.
    """
    if not routes:
        msg = "Cannot build a navigation state from an empty route chain."
        raise ValueError(msg)

    root = routes[0]
    state = _create_state(
        find_initial_route(root.name, (), initial_routes), root, is_leaf=len(routes) == 1
    )
    for position in range(1, len(routes)):
        route = routes[position]
        parent_screens = [parent.name for parent in routes[:position]]
        initial_route = find_initial_route(route.name, parent_screens, initial_routes)
        # The parent is the focused route of the level above
        routes[position - 1].state = _create_state(
            initial_route, route, is_leaf=position == len(routes) - 1
        )

    focused = routes[-1]
    focused.path = path

    parse = find_parse_config(focused.name, flat_routes) if flat_routes else None
    params = parse_query_params(path, parse, hash)
    if params:
        merge_query_params(
            focused,
            params,
            allow_url_param_normalization=allow_url_param_normalization,
        )

    return state
