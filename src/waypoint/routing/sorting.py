"""Specificity ordering of flattened routes.

Matching tries routes in order and stops at the first hit, so the
order *is* the priority.  The comparator applies its rules in a fixed
sequence; later rules only break ties left by earlier ones:

1. identical patterns order by route chain (reverse lexicographic)
2. a pattern extending another sorts first, unless the shorter is ``index``
3. static routes before dynamic routes and layouts
4. more ``(group)`` names shared with the previously active segments first
5. segment by segment: literal before ``:param`` before ``*wildcard``,
   and ``*not-found`` after any other wildcard
6. declared initial routes before their siblings
7. more segments first
"""

from __future__ import annotations

import functools
import re
from collections.abc import Callable, Iterable, Sequence

from waypoint.routing.flatten import join_paths
from waypoint.routing.segments import NOT_FOUND_SEGMENT, is_dynamic, is_wildcard
from waypoint.routing.types import FlattenedRoute, InitialRoute
from waypoint.routing.url import match_group_name

_INDEX_SCREEN_RE = re.compile(r"(?:^|/)index$")


def _compare_text(a: str, b: str) -> int:
    return (a > b) - (a < b)


def _comparable_parts(route: FlattenedRoute) -> list[str]:
    """Pattern segments without groups; ``index`` screens gain an ``index`` segment.

    The synthetic segment makes ``foo`` (index of ``foo/``) as long as
    ``foo/*`` or ``foo/:id`` when they are compared.
    """
    parts = [part for part in route.parts if match_group_name(part) is None]
    if _INDEX_SCREEN_RE.search(route.screen):
        parts.append("index")
    return parts


def _is_static(route: FlattenedRoute, parts: Sequence[str]) -> bool:
    # Layouts have children and never count as static
    return not route.has_children and not any(
        is_dynamic(part) or is_wildcard(part) for part in parts
    )


def _shared_groups(previous_segments: Sequence[str], route: FlattenedRoute) -> int:
    expanded = route.expanded_route_names
    return sum(
        1
        for i, value in enumerate(previous_segments)
        if i < len(expanded)
        and value == expanded[i]
        and value.startswith("(")
        and value.endswith(")")
    )


def _compare_segments(a_parts: Sequence[str], b_parts: Sequence[str]) -> int:
    for i in range(max(len(a_parts), len(b_parts))):
        # The longer pattern wins
        if i >= len(a_parts):
            return 1
        if i >= len(b_parts):
            return -1

        a_part, b_part = a_parts[i], b_parts[i]

        a_wildcard, b_wildcard = is_wildcard(a_part), is_wildcard(b_part)
        if a_wildcard and b_wildcard:
            a_not_found = a_part == NOT_FOUND_SEGMENT
            b_not_found = b_part == NOT_FOUND_SEGMENT
            if a_not_found and not b_not_found:
                return 1
            if b_not_found and not a_not_found:
                return -1
            continue
        if a_wildcard:
            return 1
        if b_wildcard:
            return -1

        a_dynamic, b_dynamic = is_dynamic(a_part), is_dynamic(b_part)
        if a_dynamic and b_dynamic:
            continue
        if a_dynamic:
            return 1
        if b_dynamic:
            return -1
    return 0


def make_comparator(
    initial_routes: Iterable[InitialRoute],
    previous_segments: Sequence[str] = (),
) -> Callable[[FlattenedRoute, FlattenedRoute], int]:
    """Build the route comparator for one resolution.

    Args:
        initial_routes: Declared initial routes; they win otherwise
            indistinguishable ties.
        previous_segments: Expanded route names of the previously active
            route, used to stay within the same ``(group)``.
    """
    initial_patterns = frozenset(
        join_paths(*route.parent_screens, route.initial_route_name) for route in initial_routes
    )

    def compare(a: FlattenedRoute, b: FlattenedRoute) -> int:
        if a.pattern == b.pattern:
            return _compare_text(">".join(b.route_names), ">".join(a.route_names))

        if a.pattern.startswith(b.pattern) and b.screen != "index":
            return -1
        if b.pattern.startswith(a.pattern) and a.screen != "index":
            return 1

        a_parts = _comparable_parts(a)
        b_parts = _comparable_parts(b)

        a_static = _is_static(a, a_parts)
        b_static = _is_static(b, b_parts)
        if a_static and not b_static:
            return -1
        if b_static and not a_static:
            return 1

        a_similar = _shared_groups(previous_segments, a)
        b_similar = _shared_groups(previous_segments, b)
        if (a_similar or b_similar) and a_similar != b_similar:
            return b_similar - a_similar

        result = _compare_segments(a_parts, b_parts)
        if result:
            return result

        # TODO: group-scoped initial routes rank above siblings even when the
        # previous segments are in a different group.
        a_initial = join_paths(*a.route_names) in initial_patterns
        b_initial = join_paths(*b.route_names) in initial_patterns
        if a_initial and not b_initial:
            return -1
        if b_initial and not a_initial:
            return 1

        return len(b_parts) - len(a_parts)

    return compare


def sort_routes(
    routes: Iterable[FlattenedRoute],
    initial_routes: Iterable[InitialRoute],
    previous_segments: Sequence[str] = (),
) -> list[FlattenedRoute]:
    """Return *routes* ordered most specific first."""
    comparator = make_comparator(initial_routes, previous_segments)
    return sorted(routes, key=functools.cmp_to_key(comparator))
