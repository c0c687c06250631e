"""Waypoint — deep-link resolution for nested navigators.

Turns an incoming URL path into the nested navigation state a router
needs to show the matching screens: the active route at every level,
the declared initial routes beside them, and typed params from the path
and query string.

Basic usage::

    from waypoint import get_state_from_path

    state = get_state_from_path(
        "/chat/jane/42?tab=info",
        {"screens": {"Chat": {"path": "chat/:author/:id", "parse": {"id": int}}}},
    )
    state.to_dict()
    # {"routes": [{"name": "Chat",
    #              "params": {"author": "jane", "id": 42, "tab": "info"},
    #              "path": "/chat/jane/42?tab=info"}]}

Screens laid out on disk::

    from waypoint import discover_screens
    options = discover_screens("app")
"""

__version__ = "0.1.0-dev"
__all__ = [
    "BaseUrlCache",
    "ConfigurationError",
    "ParsedRoute",
    "Resolver",
    "ResolverConfig",
    "ResultState",
    "WaypointError",
    "discover_screens",
    "get_state_from_path",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import waypoint`` fast while providing a clean top-level API.
    """
    if name in ("Resolver", "get_state_from_path"):
        from waypoint.routing import resolver as _resolver

        return getattr(_resolver, name)

    if name == "ResolverConfig":
        from waypoint.config import ResolverConfig

        return ResolverConfig

    if name in ("ParsedRoute", "ResultState"):
        from waypoint.routing import types as _types

        return getattr(_types, name)

    if name == "BaseUrlCache":
        from waypoint.routing.url import BaseUrlCache

        return BaseUrlCache

    if name == "discover_screens":
        from waypoint.pages.discovery import discover_screens

        return discover_screens

    if name in ("WaypointError", "ConfigurationError"):
        from waypoint import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
