"""Waypoint exception hierarchy.

Shared across the flattener, sorter, and resolver so every module
raises and catches the same types.

A path that matches nothing is not an error: resolution returns ``None``.
"""


class WaypointError(Exception):
    """Base for all waypoint-specific errors."""


class ConfigurationError(WaypointError):
    """Raised when the route configuration tree is invalid.

    Indicates a mistake in the static route tree (unknown keys,
    ``exact`` without ``path``, conflicting patterns), independent of
    the path being resolved.
    """
