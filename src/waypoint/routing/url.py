"""URL normalization ahead of matching.

Parses an incoming path against a fixed dummy origin so absolute and
relative inputs behave alike, strips the configured base URL and route
group segments, and produces the slash-terminated pathname the matcher
walks.
"""

import re
import threading
from dataclasses import dataclass
from urllib.parse import quote, urljoin, urlsplit

# Only used to give relative paths something to resolve against
_DUMMY_ORIGIN = "https://phony.example/"

# Characters left as-is when percent-encoding a pathname
_PATH_SAFE = "/%!$&'()*+,;=:@[]\\^|"

# A ``(name)`` group segment, optionally preceded by non-paren characters
_GROUP_RE = re.compile(r"^(?:[^\\()])*?\(([^\\/]+)\)")

_LEADING_SLASHES_RE = re.compile(r"^/+")
_REPEATED_SLASHES_RE = re.compile(r"/+")


def match_group_name(segment: str) -> str | None:
    """Return the group name of a ``(name)`` segment, or ``None``.

    Examples::

        match_group_name("(tabs)")   -> "tabs"
        match_group_name("settings") -> None
    """
    match = _GROUP_RE.match(segment)
    if match is None:
        return None
    return match.group(1)


def strip_group_segments(path: str) -> str:
    """Remove every ``(group)`` segment from a slash-separated path."""
    return "/".join(part for part in path.split("/") if match_group_name(part) is None)


class BaseUrlCache:
    """Compiled base-URL stripping rules keyed by base URL.

    Entries are inserted once and never invalidated: the base URL is
    fixed for the lifetime of a resolver.  Safe to share across threads.
    """

    __slots__ = ("_lock", "_patterns")

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._patterns: dict[str, re.Pattern[str]] = {}

    def __len__(self) -> int:
        return len(self._patterns)

    def __contains__(self, base_url: object) -> bool:
        return base_url in self._patterns

    def get(self, base_url: str) -> re.Pattern[str]:
        """Return the stripping rule for *base_url*, compiling it on first use."""
        pattern = self._patterns.get(base_url)
        if pattern is not None:
            return pattern
        with self._lock:
            pattern = self._patterns.get(base_url)
            if pattern is None:
                pattern = re.compile(rf"^/?{re.escape(base_url)}")
                self._patterns[base_url] = pattern
        return pattern


def strip_base_url(
    path: str,
    base_url: str,
    cache: BaseUrlCache,
    *,
    development: bool = False,
) -> str:
    """Strip *base_url* from the start of *path*.

    A no-op when no base URL is configured or in development mode,
    where the app is always served from the root.
    """
    if development or not base_url:
        return path
    rule = cache.get(base_url)
    return rule.sub("", _LEADING_SLASHES_RE.sub("/", path), count=1)


@dataclass(frozen=True, slots=True)
class NormalizedUrl:
    """An incoming path split into the pieces resolution needs.

    Attributes:
        clean_path: Pathname without base URL or group segments, plus the
            query string.  Reported as the focused route's ``path``.
        hash: Fragment without the leading ``#`` (``""`` when absent).
        pathname: Percent-encoded pathname with the base URL stripped,
            no leading slash, and exactly one trailing slash.
    """

    clean_path: str
    hash: str
    pathname: str


def normalize_url(
    path: str,
    base_url: str,
    cache: BaseUrlCache,
    *,
    development: bool = False,
) -> NormalizedUrl | None:
    """Parse *path* into a :class:`NormalizedUrl`.

    Returns ``None`` when *path* cannot be parsed as a URL.
    """
    try:
        parts = urlsplit(urljoin(_DUMMY_ORIGIN, path))
    except ValueError:
        return None

    pathname = quote(parts.path or "/", safe=_PATH_SAFE)
    search = f"?{parts.query}" if parts.query else ""

    stripped = strip_base_url(pathname, base_url, cache, development=development)
    nonstandard = stripped.lstrip("/").rstrip("/") + "/"

    clean_path = (
        strip_base_url(strip_group_segments(pathname), base_url, cache, development=development)
        + search
    )
    if not path.startswith("/"):
        clean_path = clean_path[1:]

    return NormalizedUrl(clean_path=clean_path, hash=parts.fragment, pathname=nonstandard)


def remaining_path(pathname: str, prefix: str | None = None) -> str | None:
    """Canonicalize *pathname* for matching and strip an optional *prefix*.

    Collapses repeated slashes, drops the leading slash and any query
    string, and forces a single trailing slash, so the root becomes
    ``"/"`` and ``/a//b`` becomes ``"a/b/"``.

    Returns ``None`` when *prefix* is given but *pathname* is outside it.
    """
    remaining = _REPEATED_SLASHES_RE.sub("/", pathname)
    remaining = remaining.removeprefix("/").split("?", 1)[0]
    if not remaining.endswith("/"):
        remaining += "/"

    prefix = (prefix or "").removeprefix("/")
    if prefix:
        if not prefix.endswith("/"):
            prefix += "/"
        if not remaining.startswith(prefix):
            return None
        remaining = remaining[len(prefix) :]

    return remaining or "/"
