"""Filesystem-based screen configuration.

The screens directory structure defines screen names, URL patterns,
and navigator nesting.

Usage::

    options = discover_screens("app")
    state = get_state_from_path("/settings/profile", options)

Conventions:

    app/
      _layout.py          # Root navigator ("# initial: index")
      index.py            # /
      (tabs)/
        _layout.py        # Nested navigator, group segment
        feed.py           # /feed
      users/
        [id].py           # /users/:id
      [...rest].py        # /* (catch-all)
"""

from waypoint.pages.discovery import discover_screens

__all__ = ["discover_screens"]
