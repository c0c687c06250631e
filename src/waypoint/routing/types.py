"""Data models for path-to-state resolution.

Flattened route records and initial-route declarations are frozen:
they are built once per resolution from the caller's configuration
tree and never change afterwards.  The produced state is mutable
because assembly attaches the resolved path and query params to the
focused leaf after the tree is built.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from waypoint.routing.segments import CompiledPattern

ParseConfig = Mapping[str, Callable[[str], Any]]


@dataclass(frozen=True, slots=True)
class FlattenedRoute:
    """One route chain from the root of the configuration to a node.

    Attributes:
        screen: Name of the node this record was created for (the leaf).
        route_names: Screen names from the root to this node.
        pattern: Accumulated pattern, slash-joined, without empty segments.
        path: The node's own path fragment before joining to its parent.
        parse: Param coercers declared by the node.
        has_children: Whether the node declares nested ``screens``.
        expanded_route_names: ``route_names`` split on ``/``, so screens
            named ``(group)/page`` compare segment by segment.
        compiled: Matcher for ``pattern``; ``None`` for the empty pattern.
    """

    screen: str
    route_names: tuple[str, ...]
    pattern: str
    path: str
    parse: ParseConfig | None = None
    has_children: bool = False
    expanded_route_names: tuple[str, ...] = ()
    compiled: CompiledPattern | None = None

    @property
    def parts(self) -> list[str]:
        """Pattern split into segments (``[]`` for the empty pattern)."""
        return self.pattern.split("/") if self.pattern else []


@dataclass(frozen=True, slots=True)
class InitialRoute:
    """An ``initialRouteName`` declaration.

    At the nesting level reached through ``parent_screens``, the screen
    ``initial_route_name`` is inserted as the inactive default before the
    active route.
    """

    initial_route_name: str
    parent_screens: tuple[str, ...] = ()


@dataclass(slots=True)
class ParsedRoute:
    """One active (or default) route in the resolved state.

    ``path`` is only set on the focused leaf.  ``state`` holds the nested
    navigator state for every level but the deepest.
    """

    name: str
    params: dict[str, Any] | None = None
    path: str | None = None
    state: ResultState | None = None

    def to_dict(self) -> dict[str, Any]:
        """Plain mapping form; unset fields are omitted."""
        data: dict[str, Any] = {"name": self.name}
        if self.params is not None:
            data["params"] = dict(self.params)
        if self.path is not None:
            data["path"] = self.path
        if self.state is not None:
            data["state"] = self.state.to_dict()
        return data


@dataclass(slots=True)
class ResultState:
    """Nested navigator state: ``{index?, routes}`` at every level."""

    routes: list[ParsedRoute] = field(default_factory=list)
    index: int | None = None

    def focused_index(self) -> int:
        """Index of the active route: ``index`` when set, else the last route."""
        if self.index is not None:
            return self.index
        return len(self.routes) - 1

    def to_dict(self) -> dict[str, Any]:
        """Plain mapping form consumed by a navigation container."""
        data: dict[str, Any] = {}
        if self.index is not None:
            data["index"] = self.index
        data["routes"] = [route.to_dict() for route in self.routes]
        return data
