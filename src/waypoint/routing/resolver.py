"""Path-to-state resolution.

Ties the pipeline together: normalize the URL, flatten and rank the
screen configuration, match the remaining path, and assemble the
nested state.  Resolution is a pure function of the path, the linking
options, and the previously active segments; the only state a
:class:`Resolver` keeps is its base-URL cache.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any
from urllib.parse import unquote

from waypoint.config import ResolverConfig
from waypoint.routing.flatten import check_conflicts, flatten_config, validate_config
from waypoint.routing.matcher import match_root, match_routes
from waypoint.routing.sorting import sort_routes
from waypoint.routing.state import create_nested_state
from waypoint.routing.types import FlattenedRoute, InitialRoute, ParsedRoute, ResultState
from waypoint.routing.url import BaseUrlCache, normalize_url, remaining_path

logger = logging.getLogger("waypoint.routing")


def rank_routes(
    options: Mapping[str, Any],
    previous_segments: Sequence[str] = (),
) -> tuple[list[FlattenedRoute], list[InitialRoute]]:
    """Validate, flatten, and sort a linking configuration.

    Returns the routes most specific first together with the declared
    initial routes (the root ``initialRouteName`` first).

    Raises ``ConfigurationError`` for an invalid configuration.
    """
    validate_config(options)

    initial_routes: list[InitialRoute] = []
    root_initial = options.get("initialRouteName")
    if root_initial:
        initial_routes.append(InitialRoute(root_initial))

    routes = flatten_config(options.get("screens") or {}, initial_routes)
    routes = sort_routes(routes, initial_routes, previous_segments)
    check_conflicts(routes)
    return routes, initial_routes


class Resolver:
    """Resolves URL paths to nested navigation state.

    Usage::

        resolver = Resolver(ResolverConfig(base_url="/my-app"))
        state = resolver.resolve(
            "/my-app/chat/jane/42",
            {"screens": {"Chat": {"path": "chat/:author/:id", "parse": {"id": int}}}},
        )

    A resolver is safe to share between threads.
    """

    __slots__ = ("_cache", "config")

    def __init__(
        self,
        config: ResolverConfig | None = None,
        *,
        cache: BaseUrlCache | None = None,
    ) -> None:
        self.config = config or ResolverConfig()
        self._cache = cache if cache is not None else BaseUrlCache()

    @property
    def cache(self) -> BaseUrlCache:
        return self._cache

    def resolve(
        self,
        path: str,
        options: Mapping[str, Any] | None = None,
        *,
        previous_segments: Sequence[str] = (),
    ) -> ResultState | None:
        """Resolve *path* against the linking *options*.

        Args:
            path: Incoming path, e.g. ``"/chat/jane/42?tab=info#top"``.
            options: Linking configuration: ``screens`` plus optional
                ``path`` prefix and root ``initialRouteName``.  Without
                ``screens`` every path segment becomes a nested route.
            previous_segments: Expanded route names of the previously
                active route; breaks ties in favour of the same group.

        Returns:
            The nested state, or ``None`` when nothing matches.

        Raises:
            ConfigurationError: If *options* is invalid.  Raised for any
                path, matching or not.
        """
        options = options or {}
        config = self.config

        routes: list[FlattenedRoute] | None = None
        initial_routes: list[InitialRoute] = []
        if options.get("screens") is not None:
            routes, initial_routes = rank_routes(options, previous_segments)
        else:
            validate_config(options)
            if options.get("initialRouteName"):
                initial_routes.append(InitialRoute(options["initialRouteName"]))

        url = normalize_url(
            path,
            config.base_url,
            self._cache,
            development=config.development,
        )
        if url is None:
            logger.debug("Not a URL: %r", path)
            return None

        remaining = remaining_path(url.pathname, options.get("path"))
        if remaining is None:
            logger.debug("Path %r is outside the prefix %r", path, options.get("path"))
            return None

        if routes is None:
            names = [unquote(segment) for segment in remaining.split("/") if segment]
            if not names:
                return None
            return create_nested_state(
                path,
                [ParsedRoute(name=name) for name in names],
                initial_routes,
                hash=url.hash,
                allow_url_param_normalization=config.allow_url_param_normalization,
            )

        if remaining == "/":
            matched = match_root(routes)
        else:
            matched = match_routes(remaining, routes)

        if matched is None:
            logger.debug("No route matches %r", path)
            return None

        return create_nested_state(
            url.clean_path,
            matched,
            initial_routes,
            routes,
            url.hash,
            allow_url_param_normalization=config.allow_url_param_normalization,
        )


def get_state_from_path(
    path: str,
    options: Mapping[str, Any] | None = None,
    *,
    previous_segments: Sequence[str] = (),
    config: ResolverConfig | None = None,
) -> ResultState | None:
    """Resolve *path* with a one-off :class:`Resolver`.

    Example::

        state = get_state_from_path(
            "/chat/jane/42",
            {"screens": {"Chat": {"path": "chat/:author/:id", "parse": {"id": int}}}},
        )
        # state.routes[0] == ParsedRoute(
        #     name="Chat", params={"author": "jane", "id": 42}, path="/chat/jane/42")
    """
    return Resolver(config).resolve(path, options, previous_segments=previous_segments)
