"""Property-based tests for path resolution."""

from hypothesis import given, settings
from hypothesis import strategies as st

from waypoint import get_state_from_path
from waypoint.routing.state import find_focused_route
from waypoint.routing.types import ResultState

OPTIONS = {
    "screens": {
        "Home": "",
        "Chat": {"path": "chat/:author/:id", "parse": {"id": int}},
        "Users": {
            "path": "users",
            "initialRouteName": "List",
            "screens": {
                "List": "",
                "Settings": "settings",
                "Profile": ":user",
                "Files": ":user/files/*path",
            },
        },
        "NotFound": "*not-found",
    }
}

slugs = st.from_regex(r"[a-z][a-z0-9-]{0,11}", fullmatch=True)
numbers = st.integers(min_value=0, max_value=10**6)


def _chain(state: ResultState | None) -> list[str]:
    assert state is not None
    names: list[str] = []
    current: ResultState | None = state
    while current is not None and current.routes:
        route = current.routes[current.focused_index()]
        names.append(route.name)
        current = route.state
    return names


@given(slugs, numbers)
@settings(deadline=None)
def test_chat_pattern_resolves_to_chat(author, message_id):
    """Substituting values into a declared pattern resolves to its chain."""
    state = get_state_from_path(f"/chat/{author}/{message_id}", OPTIONS)
    assert _chain(state) == ["Chat"]
    focused = find_focused_route(state)
    assert focused is not None
    assert focused.params == {"author": author, "id": message_id}


@given(slugs.filter(lambda s: s != "settings"))
@settings(deadline=None)
def test_profile_pattern_resolves_to_profile(user):
    state = get_state_from_path(f"/users/{user}", OPTIONS)
    assert _chain(state) == ["Users", "Profile"]


@given(slugs, st.lists(slugs, min_size=1, max_size=4))
@settings(deadline=None)
def test_wildcard_absorbs_nested_segments(user, path):
    state = get_state_from_path(f"/users/{user}/files/{'/'.join(path)}", OPTIONS)
    assert _chain(state) == ["Users", "Files"]
    focused = find_focused_route(state)
    assert focused is not None
    assert focused.params == {"user": user, "path": path}


@given(st.lists(slugs, min_size=1, max_size=4).filter(lambda p: p[0] not in ("chat", "users")))
@settings(deadline=None)
def test_unknown_paths_fall_to_not_found(path):
    state = get_state_from_path("/" + "/".join(path), OPTIONS)
    assert _chain(state) == ["NotFound"]


@given(slugs, numbers, st.dictionaries(slugs, slugs, max_size=3))
@settings(deadline=None)
def test_resolving_clean_path_is_idempotent(author, message_id, query):
    query = {k: v for k, v in query.items() if k not in ("author", "id")}
    search = "&".join(f"{k}={v}" for k, v in query.items())
    path = f"/chat/{author}/{message_id}" + (f"?{search}" if search else "")

    first = get_state_from_path(path, OPTIONS)
    focused = find_focused_route(first)
    assert focused is not None
    assert focused.path is not None

    second = get_state_from_path(focused.path, OPTIONS)
    assert second is not None
    assert second.to_dict() == first.to_dict()


@given(st.lists(slugs, min_size=1, max_size=5))
@settings(deadline=None)
def test_repeated_query_keys_keep_order(values):
    search = "&".join(f"tag={v}" for v in values)
    focused = find_focused_route(get_state_from_path(f"/users/settings?{search}", OPTIONS))
    assert focused is not None
    expected = values[0] if len(values) == 1 else values
    assert focused.params == {"tag": expected}
