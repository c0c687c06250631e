"""Linking target resolution — turns a CLI target into linking options.

Shared by ``waypoint resolve`` and ``waypoint routes``.  A target is one of:

- a ``.json`` file holding the options mapping
- a screens directory (discovered with :func:`discover_screens`)
- an import string ``"module:attribute"`` (attribute defaults to ``linking``)
"""

import importlib
import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from waypoint.pages.discovery import discover_screens


def load_options(target: str) -> Mapping[str, Any]:
    """Resolve *target* to a linking options mapping.

    Supports factory functions: a callable attribute is called and must
    return the mapping.

    Raises:
        ModuleNotFoundError: If the module cannot be imported.
        AttributeError: If the attribute does not exist on the module.
        TypeError: If the target does not produce a mapping.
        ValueError: If a JSON file cannot be decoded.
    """
    path = Path(target)
    if path.is_dir():
        return discover_screens(path)
    if path.suffix == ".json" and path.is_file():
        with path.open(encoding="utf-8") as fh:
            obj = json.load(fh)
    else:
        module_path, _, attr_name = target.partition(":")
        if not attr_name:
            attr_name = "linking"
        module = importlib.import_module(module_path)
        obj = getattr(module, attr_name)
        if callable(obj):
            try:
                obj = obj()
            except Exception as exc:
                msg = f"Factory function {target!r} raised an error: {exc}"
                raise TypeError(msg) from exc

    if not isinstance(obj, Mapping):
        msg = f"{target!r} resolved to {type(obj).__name__}, not a linking options mapping"
        raise TypeError(msg)
    return obj
