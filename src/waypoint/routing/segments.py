"""Pattern compilation — route patterns as ordered segment matchers.

A pattern such as ``(tabs)/users/:id/*rest?`` is parsed into one
:class:`Segment` per slash-separated part.  Each segment kind knows
which path segments it may consume; :class:`CompiledPattern` walks them
left to right with backtracking, so the whole remaining path must be
consumed for a match.

Segment kinds::

    users      literal            exactly one segment with that text
    :id        dynamic            exactly one non-empty segment
    :id?       optional dynamic   zero or one segment (one preferred)
    *rest      wildcard           one or more segments (greedy)
    *rest?     optional wildcard  zero or more segments (greedy)
    (tabs)     group              the literal segment or nothing, never captured
"""

from __future__ import annotations

import enum
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from urllib.parse import unquote

from waypoint.routing.url import match_group_name

# Reserved catch-all that ranks below every other wildcard
NOT_FOUND_SEGMENT = "*not-found"


class SegmentKind(enum.Enum):
    LITERAL = "literal"
    DYNAMIC = "dynamic"
    DYNAMIC_OPTIONAL = "dynamic?"
    WILDCARD = "wildcard"
    WILDCARD_OPTIONAL = "wildcard?"
    GROUP = "group"


def is_dynamic(part: str) -> bool:
    return part.startswith(":")


def is_wildcard(part: str) -> bool:
    return part.startswith("*")


@dataclass(frozen=True, slots=True)
class Segment:
    """A parsed pattern segment.

    Literal:   ``users``   (kind=LITERAL, name=None)
    Dynamic:   ``:id``     (kind=DYNAMIC, name="id")
    Wildcard:  ``*rest?``  (kind=WILDCARD_OPTIONAL, name="rest")
    Group:     ``(tabs)``  (kind=GROUP, name=None)
    """

    value: str
    kind: SegmentKind
    name: str | None = None

    @property
    def captures(self) -> bool:
        """Whether the segment yields a param value."""
        return self.kind in _CAPTURING_KINDS

    def candidates(self, parts: Sequence[str], start: int) -> Iterator[int]:
        """Yield end positions this segment may reach from *start*.

        Positions come in preference order: consuming beats skipping and
        wildcards try the longest run first.
        """
        available = start < len(parts)
        kind = self.kind

        if kind is SegmentKind.LITERAL:
            if available and unquote(parts[start]) == unquote(self.value):
                yield start + 1
        elif kind is SegmentKind.GROUP:
            if available and unquote(parts[start]) == unquote(self.value):
                yield start + 1
            yield start
        elif kind is SegmentKind.DYNAMIC:
            if available and parts[start]:
                yield start + 1
        elif kind is SegmentKind.DYNAMIC_OPTIONAL:
            if available and parts[start]:
                yield start + 1
            yield start
        else:
            yield from range(len(parts), start, -1)
            if kind is SegmentKind.WILDCARD_OPTIONAL:
                yield start


_CAPTURING_KINDS = frozenset(
    {
        SegmentKind.DYNAMIC,
        SegmentKind.DYNAMIC_OPTIONAL,
        SegmentKind.WILDCARD,
        SegmentKind.WILDCARD_OPTIONAL,
    }
)


def parse_segment(part: str) -> Segment:
    """Classify a single pattern segment.

    Examples::

        "chat"   -> Segment("chat", LITERAL)
        ":id?"   -> Segment(":id?", DYNAMIC_OPTIONAL, name="id")
        "*"      -> Segment("*", WILDCARD, name=None)
        "(auth)" -> Segment("(auth)", GROUP)
    """
    optional = part.endswith("?")
    if is_dynamic(part):
        kind = SegmentKind.DYNAMIC_OPTIONAL if optional else SegmentKind.DYNAMIC
        return Segment(part, kind, param_name(part) or None)
    if is_wildcard(part):
        kind = SegmentKind.WILDCARD_OPTIONAL if optional else SegmentKind.WILDCARD
        return Segment(part, kind, param_name(part) or None)
    if match_group_name(part) is not None:
        return Segment(part, SegmentKind.GROUP)
    return Segment(part, SegmentKind.LITERAL)


def param_name(part: str) -> str:
    """Strip the ``:``/``*`` marker and the optional ``?`` from a segment."""
    return part[1:].removesuffix("?")


@dataclass(frozen=True, slots=True)
class PatternMatch:
    """Result of a successful pattern match.

    ``captures`` maps the index of each capturing pattern segment to the
    path segments it consumed, still percent-encoded.  Optional segments
    that consumed nothing map to ``()``.
    """

    captures: dict[int, tuple[str, ...]]


class CompiledPattern:
    """A pattern compiled to an ordered list of segment matchers.

    Usage::

        compiled = CompiledPattern("chat/:author/:id")
        match = compiled.match("chat/jane/42/")
        match.captures  # {1: ("jane",), 2: ("42",)}
    """

    __slots__ = ("pattern", "segments")

    def __init__(self, pattern: str) -> None:
        self.pattern = pattern
        self.segments = tuple(parse_segment(part) for part in pattern.split("/") if part)

    def __repr__(self) -> str:
        return f"CompiledPattern({self.pattern!r})"

    def match(self, remaining: str) -> PatternMatch | None:
        """Match the whole of *remaining* (slash-terminated) against the pattern."""
        parts = remaining.removesuffix("/").split("/")
        captures = self._match_from(parts, 0, 0)
        if captures is None:
            return None
        return PatternMatch(captures=captures)

    def _match_from(
        self,
        parts: list[str],
        segment_index: int,
        start: int,
    ) -> dict[int, tuple[str, ...]] | None:
        """Match segments from *segment_index* onward, backtracking on failure."""
        if segment_index == len(self.segments):
            return {} if start == len(parts) else None

        segment = self.segments[segment_index]
        for end in segment.candidates(parts, start):
            captures = self._match_from(parts, segment_index + 1, end)
            if captures is not None:
                if segment.captures:
                    captures[segment_index] = tuple(parts[start:end])
                return captures
        return None
