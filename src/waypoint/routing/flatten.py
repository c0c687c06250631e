"""Configuration flattening — nested screens to ranked route records.

Walks the caller's ``screens`` tree and emits one :class:`FlattenedRoute`
per node that declares a path, carrying the accumulated pattern and the
chain of screen names from the root.  ``initialRouteName`` declarations
are collected on the way down.

The chain is passed by value (a new tuple per level), so sibling
subtrees never observe each other's names.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from waypoint.errors import ConfigurationError
from waypoint.routing.segments import CompiledPattern
from waypoint.routing.types import FlattenedRoute, InitialRoute

_ROOT_KEYS = ("initialRouteName", "screens", "path")
_SCREEN_KEYS = ("initialRouteName", "screens", "path", "exact", "stringify", "parse")


def join_paths(*paths: str) -> str:
    """Join path fragments, dropping empty, leading, and trailing slashes.

    Examples::

        join_paths("users/", "/:id")  -> "users/:id"
        join_paths("", "settings")    -> "settings"
    """
    return "/".join(part for path in paths for part in path.split("/") if part)


def validate_config(config: Mapping[str, Any], *, root: bool = True) -> None:
    """Reject unknown keys anywhere in a linking configuration.

    Raises ``ConfigurationError`` naming the offending keys.  A common
    mistake is declaring screens next to ``screens`` instead of inside it.
    """
    if not isinstance(config, Mapping):
        msg = f"Expected a mapping for the screen configuration, got {type(config).__name__}."
        raise ConfigurationError(msg)

    valid_keys = _ROOT_KEYS if root else _SCREEN_KEYS
    invalid = [key for key in config if key not in valid_keys]
    if invalid:
        msg = (
            f"Found invalid properties in the configuration: {', '.join(map(repr, invalid))}. "
            "Did you forget to specify them under a 'screens' property? "
            f"You can only specify the following properties: {', '.join(valid_keys)}."
        )
        raise ConfigurationError(msg)

    screens = config.get("screens")
    if screens is None:
        return
    if not isinstance(screens, Mapping):
        msg = f"'screens' must be a mapping of screen names, got {type(screens).__name__}."
        raise ConfigurationError(msg)
    for name, value in screens.items():
        if isinstance(value, str):
            continue
        if not isinstance(value, Mapping):
            msg = f"Screen {name!r} must be a path string or a mapping, got {type(value).__name__}."
            raise ConfigurationError(msg)
        validate_config(value, root=False)


def flatten_config(
    screens: Mapping[str, Any],
    initial_routes: list[InitialRoute],
) -> list[FlattenedRoute]:
    """Flatten a ``screens`` mapping into route records.

    Args:
        screens: Top-level ``screens`` of the linking configuration.
        initial_routes: Accumulator; nested ``initialRouteName``
            declarations are appended in discovery order.

    Returns:
        Flattened routes in declaration order (unsorted).
    """
    routes: list[FlattenedRoute] = []
    for name in screens:
        routes.extend(
            _flatten_screen(
                name,
                screens,
                route_names=(),
                parent_pattern=None,
                initial_routes=initial_routes,
            )
        )
    return routes


def _flatten_screen(
    screen: str,
    screens: Mapping[str, Any],
    *,
    route_names: tuple[str, ...],
    parent_pattern: str | None,
    initial_routes: list[InitialRoute],
) -> list[FlattenedRoute]:
    """Flatten one screen and, recursively, its nested screens."""
    route_names = (*route_names, screen)
    config = screens[screen]

    if isinstance(config, str):
        # Foo: "path" is shorthand for a leaf with only a path
        pattern = join_paths(parent_pattern, config) if parent_pattern else config
        return [_create_route(screen, route_names, pattern, config)]

    routes: list[FlattenedRoute] = []
    path = config.get("path")
    exact = config.get("exact") is True
    nested = config.get("screens")
    pattern: str | None = None

    if exact and path is None:
        msg = (
            f"Screen {screen!r}: a 'path' needs to be specified when specifying 'exact: true'. "
            "If you don't want this screen in the URL, specify it as empty string, e.g. `path: ''`."
        )
        raise ConfigurationError(msg)

    if path is not None:
        if not isinstance(path, str):
            msg = f"Screen {screen!r}: 'path' must be a string, got {type(path).__name__}."
            raise ConfigurationError(msg)
        pattern = path if exact else join_paths(parent_pattern or "", path)
        routes.append(
            _create_route(
                screen,
                route_names,
                pattern,
                path,
                parse=config.get("parse"),
                has_children=bool(nested),
            )
        )

    if nested is not None:
        # initialRouteName without screens has no purpose
        initial = config.get("initialRouteName")
        if initial:
            initial_routes.append(InitialRoute(initial, route_names))

        for child in nested:
            routes.extend(
                _flatten_screen(
                    child,
                    nested,
                    route_names=route_names,
                    parent_pattern=pattern if pattern is not None else parent_pattern,
                    initial_routes=initial_routes,
                )
            )

    return routes


def _create_route(
    screen: str,
    route_names: tuple[str, ...],
    pattern: str,
    path: str,
    *,
    parse: Mapping[str, Any] | None = None,
    has_children: bool = False,
) -> FlattenedRoute:
    pattern = join_paths(pattern)
    return FlattenedRoute(
        screen=screen,
        route_names=route_names,
        pattern=pattern,
        path=path,
        parse=parse,
        has_children=has_children,
        expanded_route_names=tuple(part for name in route_names for part in name.split("/")),
        compiled=CompiledPattern(pattern) if pattern else None,
    )


def check_conflicts(routes: list[FlattenedRoute]) -> None:
    """Fail on two route chains that resolve the same pattern.

    Sharing a pattern is allowed only when one chain is a prefix of the
    other, e.g. ``A > B`` and ``A > B > C`` where ``C`` omits its path.
    """
    seen: dict[str, FlattenedRoute] = {}
    for route in routes:
        existing = seen.get(route.pattern)
        if existing is not None:
            a, b = existing.route_names, route.route_names
            shorter, longer = (b, a) if len(a) > len(b) else (a, b)
            if longer[: len(shorter)] != shorter:
                msg = (
                    "Found conflicting screens with the same pattern. "
                    f"The pattern {route.pattern!r} resolves to both {' > '.join(a)!r} "
                    f"and {' > '.join(b)!r}. Patterns must be unique and cannot resolve "
                    "to more than one screen."
                )
                raise ConfigurationError(msg)
        seen[route.pattern] = route
