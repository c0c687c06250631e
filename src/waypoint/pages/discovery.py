"""Filesystem screen discovery.

Walks a screens directory and builds the linking configuration the
resolver consumes:

- ``_layout.py`` makes its directory a nested navigator with its own
  ``screens``; an ``# initial: <screen>`` comment declares its
  ``initialRouteName``
- other files become screens, named by their path relative to the
  nearest layout (``settings/profile``)

File and directory names map to path segments::

    index          ""            (the directory itself)
    [id]           :id
    [...rest]      *rest
    +not-found     *not-found
    (auth)         (auth)        (group, never part of real URLs)
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

from waypoint.errors import ConfigurationError

# Regex to extract "# initial: screen" from layout files
_INITIAL_RE = re.compile(r"#\s*initial:\s*(\S+)")

# Regex matching [param] and [...param] names
_DYNAMIC_RE = re.compile(r"^\[(\.\.\.)?([^\[\]/]+)\]$")

_LAYOUT_STEM = "_layout"
_NOT_FOUND_STEM = "+not-found"


def discover_screens(
    screens_dir: str | Path,
    *,
    extensions: tuple[str, ...] = (".py",),
) -> dict[str, Any]:
    """Walk a screens directory and build a linking configuration.

    Args:
        screens_dir: Path to the screens directory (e.g. ``app/``).
        extensions: File suffixes that declare screens.

    Returns:
        ``{"screens": {...}}`` (plus ``initialRouteName`` when the root
        layout declares one), ready for :func:`waypoint.get_state_from_path`.
    """
    root = Path(screens_dir).resolve()
    if not root.is_dir():
        raise FileNotFoundError(f"Screens directory not found: {root}")

    return _build_navigator(root, extensions)


def _build_navigator(directory: Path, extensions: tuple[str, ...]) -> dict[str, Any]:
    """Build the config for a navigator rooted at *directory*."""
    navigator: dict[str, Any] = {}
    initial = _find_initial_route(directory, extensions)
    if initial is not None:
        navigator["initialRouteName"] = initial

    screens: dict[str, Any] = {}
    _walk_directory(directory, directory, extensions=extensions, screens=screens)
    navigator["screens"] = screens
    return navigator


def _walk_directory(
    directory: Path,
    navigator_root: Path,
    *,
    extensions: tuple[str, ...],
    screens: dict[str, Any],
) -> None:
    """Collect screens under *directory* into the navigator at *navigator_root*.

    Args:
        directory: Current directory being walked.
        navigator_root: Directory of the nearest layout (screen names
            and paths are relative to it).
        extensions: File suffixes that declare screens.
        screens: Accumulator for the navigator's screens.
    """
    relative = directory.relative_to(navigator_root).parts

    for item in sorted(directory.iterdir()):
        if not item.is_file() or item.suffix not in extensions:
            continue
        if item.name.startswith((".", "_")):
            continue
        name = "/".join((*relative, item.stem))
        path = "/".join(_segment(part) for part in (*relative, item.stem))
        _add_screen(screens, name, _trim_path(path), item)

    for item in sorted(directory.iterdir()):
        if not item.is_dir() or item.name.startswith((".", "_")):
            continue

        if _find_layout(item, extensions) is not None:
            name = "/".join((*relative, item.name))
            nested = _build_navigator(item, extensions)
            nested["path"] = _trim_path(
                "/".join(_segment(part) for part in (*relative, item.name))
            )
            _add_screen(screens, name, nested, item)
        else:
            _walk_directory(item, navigator_root, extensions=extensions, screens=screens)


def _add_screen(screens: dict[str, Any], name: str, config: Any, source: Path) -> None:
    if name in screens:
        msg = f"Screen {name!r} is declared twice (again by {source})."
        raise ConfigurationError(msg)
    screens[name] = config


def _segment(name: str) -> str:
    """Map a file or directory name to its pattern segment."""
    if name == "index":
        return ""
    if name == _NOT_FOUND_STEM:
        return "*not-found"
    match = _DYNAMIC_RE.match(name)
    if match is not None:
        marker = "*" if match.group(1) else ":"
        return marker + match.group(2)
    return name


def _trim_path(path: str) -> str:
    return "/".join(part for part in path.split("/") if part)


def _find_layout(directory: Path, extensions: tuple[str, ...]) -> Path | None:
    for suffix in extensions:
        layout = directory / f"{_LAYOUT_STEM}{suffix}"
        if layout.is_file():
            return layout
    return None


def _find_initial_route(directory: Path, extensions: tuple[str, ...]) -> str | None:
    """Read ``# initial: <screen>`` from the directory's layout, if any."""
    layout = _find_layout(directory, extensions)
    if layout is None:
        return None
    match = _INITIAL_RE.search(layout.read_text(encoding="utf-8"))
    if match:
        return match.group(1)
    return None
