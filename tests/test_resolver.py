"""Tests for waypoint.routing.resolver — end-to-end path resolution."""

import logging

import pytest

from waypoint import get_state_from_path
from waypoint.config import ResolverConfig
from waypoint.errors import ConfigurationError
from waypoint.routing.resolver import Resolver, rank_routes
from waypoint.routing.state import find_focused_route
from waypoint.routing.types import ResultState

CHAT = {"screens": {"Chat": {"path": "chat/:author/:id", "parse": {"id": int}}}}


def _chain(state: ResultState | None) -> list[str]:
    """Names of the active route at each level."""
    assert state is not None
    names: list[str] = []
    current: ResultState | None = state
    while current is not None and current.routes:
        route = current.routes[current.focused_index()]
        names.append(route.name)
        current = route.state
    return names


class TestResolveBasics:
    def test_chat_example(self) -> None:
        state = get_state_from_path("/chat/jane/42", CHAT)
        assert state is not None
        assert state.to_dict() == {
            "routes": [
                {"name": "Chat", "params": {"author": "jane", "id": 42}, "path": "/chat/jane/42"}
            ]
        }

    def test_query_and_hash(self) -> None:
        state = get_state_from_path("/chat/jane/42?tab=info#sec1", CHAT)
        focused = find_focused_route(state)
        assert focused is not None
        assert focused.params == {"author": "jane", "id": 42, "tab": "info", "#": "sec1"}
        assert focused.path == "/chat/jane/42?tab=info"

    def test_percent_encoded_pattern(self) -> None:
        state = get_state_from_path("/a%20b", {"screens": {"S": "a%20b"}})
        assert _chain(state) == ["S"]

    def test_no_match_returns_none(self) -> None:
        assert get_state_from_path("/unknown/path", CHAT) is None

    def test_trailing_and_repeated_slashes(self) -> None:
        state = get_state_from_path("/chat//jane/42/", CHAT)
        assert _chain(state) == ["Chat"]

    def test_relative_path(self) -> None:
        state = get_state_from_path("chat/jane/42", CHAT)
        focused = find_focused_route(state)
        assert focused is not None
        assert focused.path == "chat/jane/42"

    def test_invalid_url(self) -> None:
        assert get_state_from_path("http://[broken", CHAT) is None

    def test_coercer_error_propagates(self) -> None:
        with pytest.raises(ValueError):
            get_state_from_path("/chat/jane/not-a-number", CHAT)


class TestSpecificity:
    def test_static_over_dynamic(self) -> None:
        options = {"screens": {"User": "users/:id", "Settings": "users/settings"}}
        assert _chain(get_state_from_path("/users/settings/", options)) == ["Settings"]
        assert _chain(get_state_from_path("/users/42", options)) == ["User"]

    def test_longest_prefix_wins(self) -> None:
        options = {"screens": {"AB": "a/b", "ABC": "a/b/c"}}
        assert _chain(get_state_from_path("/a/b/c/", options)) == ["ABC"]
        assert _chain(get_state_from_path("/a/b/", options)) == ["AB"]

    def test_longest_prefix_nested(self) -> None:
        options = {"screens": {"A": {"path": "a/b", "screens": {"C": "c"}}}}
        assert _chain(get_state_from_path("/a/b/c", options)) == ["A", "C"]
        assert _chain(get_state_from_path("/a/b", options)) == ["A"]

    def test_wildcard_is_last_resort(self) -> None:
        options = {"screens": {"Catch": "*catchall", "Slug": ":slug"}}
        state = get_state_from_path("/hello", options)
        assert _chain(state) == ["Slug"]
        assert state is not None
        assert state.routes[0].params == {"slug": "hello"}

        state = get_state_from_path("/a/b", options)
        assert _chain(state) == ["Catch"]
        assert state is not None
        assert state.routes[0].params == {"catchall": ["a", "b"]}

    def test_not_found_never_outranks_other_wildcard(self) -> None:
        options = {"screens": {"NotFound": "*not-found", "Rest": "*rest"}}
        assert _chain(get_state_from_path("/x/y", options)) == ["Rest"]

    def test_not_found_catches_unmatched(self) -> None:
        options = {"screens": {"Home": "", "About": "about", "NotFound": "*not-found"}}
        state = get_state_from_path("/missing/page", options)
        assert _chain(state) == ["NotFound"]
        assert state is not None
        assert state.routes[0].params == {"not-found": ["missing", "page"]}

    def test_previous_segments_keep_group(self) -> None:
        options = {
            "screens": {
                "(a)": {"path": "(a)", "screens": {"home": "home"}},
                "(b)": {"path": "(b)", "screens": {"home": "home"}},
            }
        }
        assert _chain(get_state_from_path("/home", options)) == ["(a)", "home"]
        state = get_state_from_path("/home", options, previous_segments=("(b)", "home"))
        assert _chain(state) == ["(b)", "home"]

    def test_explicit_group_in_url(self) -> None:
        options = {
            "screens": {
                "(a)": {"path": "(a)", "screens": {"home": "home"}},
                "(b)": {"path": "(b)", "screens": {"home": "home"}},
            }
        }
        state = get_state_from_path("/(b)/home", options)
        assert _chain(state) == ["(b)", "home"]
        focused = find_focused_route(state)
        assert focused is not None
        assert focused.path == "/home"


class TestRootPath:
    def test_empty_path_screen(self) -> None:
        options = {"screens": {"Home": "", "Profile": "profile"}}
        state = get_state_from_path("/", options)
        assert state is not None
        assert state.to_dict() == {"routes": [{"name": "Home", "path": "/"}]}

    def test_ancestor_with_path(self) -> None:
        options = {"screens": {"Users": {"path": "users", "screens": {"List": ""}}}}
        assert get_state_from_path("/", options) is None

    def test_all_optional_pattern_ignored(self) -> None:
        options = {"screens": {"Post": ":id?"}}
        assert get_state_from_path("/", options) is None

    def test_screen_name_reused_at_root_level(self) -> None:
        options = {"screens": {"Home": "home", "Tabs": {"path": "", "screens": {"Home": ""}}}}
        state = get_state_from_path("/", options)
        assert state is not None
        assert state.to_dict() == {
            "routes": [{"name": "Tabs", "state": {"routes": [{"name": "Home", "path": "/"}]}}]
        }

    def test_root_query_params(self) -> None:
        options = {"screens": {"Home": ""}}
        state = get_state_from_path("/?ref=mail", options)
        assert state is not None
        assert state.routes[0].params == {"ref": "mail"}


class TestInitialRoutes:
    OPTIONS = {
        "initialRouteName": "Root",
        "screens": {
            "Root": {
                "path": "",
                "initialRouteName": "Home",
                "screens": {"Home": "home", "Details": "details/:id"},
            },
            "Modal": "modal",
        },
    }

    def test_nested_initial_route(self) -> None:
        state = get_state_from_path("/details/7", self.OPTIONS)
        assert state is not None
        assert state.to_dict() == {
            "routes": [
                {
                    "name": "Root",
                    "params": {"id": "7"},
                    "state": {
                        "index": 1,
                        "routes": [
                            {"name": "Home", "params": {"id": "7"}},
                            {"name": "Details", "params": {"id": "7"}, "path": "/details/7"},
                        ],
                    },
                }
            ]
        }

    def test_initial_route_itself(self) -> None:
        state = get_state_from_path("/home", self.OPTIONS)
        assert state is not None
        root = state.routes[0]
        assert state.index is None
        assert root.state is not None
        assert [r.name for r in root.state.routes] == ["Home"]

    def test_root_initial_route(self) -> None:
        state = get_state_from_path("/modal", self.OPTIONS)
        assert state is not None
        assert state.to_dict() == {
            "index": 1,
            "routes": [{"name": "Root"}, {"name": "Modal", "path": "/modal"}],
        }


class TestParamConflicts:
    def test_path_param_wins(self, caplog: pytest.LogCaptureFixture) -> None:
        options = {"screens": {"Chat": "chat/:author/:id"}}
        with caplog.at_level(logging.WARNING, logger="waypoint.routing"):
            state = get_state_from_path("/chat/jane/42?id=99", options)
        focused = find_focused_route(state)
        assert focused is not None
        assert focused.params == {"author": "jane", "id": "42"}
        assert "'id'" in caplog.text

    def test_normalization_lets_query_win(self) -> None:
        options = {"screens": {"Chat": "chat/:author/:id"}}
        config = ResolverConfig(allow_url_param_normalization=True)
        state = get_state_from_path("/chat/jane/42?id=99", options, config=config)
        focused = find_focused_route(state)
        assert focused is not None
        assert focused.params == {"author": "jane", "id": "99"}

    def test_query_values(self) -> None:
        options = {"screens": {"Search": "search"}}
        many = find_focused_route(get_state_from_path("/search?tag=a&tag=b", options))
        one = find_focused_route(get_state_from_path("/search?tag=a", options))
        assert many is not None
        assert one is not None
        assert many.params == {"tag": ["a", "b"]}
        assert one.params == {"tag": "a"}


class TestPrefixes:
    def test_options_path_prefix(self) -> None:
        options = {"path": "app", "screens": {"Chat": "chat/:id"}}
        assert _chain(get_state_from_path("/app/chat/3", options)) == ["Chat"]
        assert get_state_from_path("/other/chat/3", options) is None

    def test_base_url_stripped(self) -> None:
        resolver = Resolver(ResolverConfig(base_url="/my-app"))
        state = resolver.resolve("/my-app/chat/jane/1", CHAT)
        focused = find_focused_route(state)
        assert focused is not None
        assert focused.path == "/chat/jane/1"
        assert "/my-app" in resolver.cache

    def test_base_url_not_stripped_in_development(self) -> None:
        resolver = Resolver(ResolverConfig(base_url="/my-app", development=True))
        assert resolver.resolve("/my-app/chat/jane/1", CHAT) is None
        assert len(resolver.cache) == 0

    def test_injected_cache_shared(self) -> None:
        from waypoint.routing.url import BaseUrlCache

        cache = BaseUrlCache()
        config = ResolverConfig(base_url="/base")
        Resolver(config, cache=cache).resolve("/base/chat/a/1", CHAT)
        other = Resolver(config, cache=cache)
        assert other.cache is cache
        assert len(cache) == 1


class TestWithoutScreens:
    def test_segments_become_routes(self) -> None:
        state = get_state_from_path("/a/b%20c", {})
        assert state is not None
        assert state.to_dict() == {
            "routes": [{"name": "a", "state": {"routes": [{"name": "b c", "path": "/a/b%20c"}]}}]
        }

    def test_root_has_no_routes(self) -> None:
        assert get_state_from_path("/") is None

    def test_initial_route_applies(self) -> None:
        state = get_state_from_path("/profile", {"initialRouteName": "home"})
        assert state is not None
        assert [r.name for r in state.routes] == ["home", "profile"]


class TestConfigurationErrors:
    def test_conflict_raised_for_any_path(self) -> None:
        options = {"screens": {"A": "same", "B": "same"}}
        for path in ("/same", "/", "/nothing"):
            with pytest.raises(ConfigurationError, match="conflicting screens"):
                get_state_from_path(path, options)

    def test_exact_without_path(self) -> None:
        options = {"screens": {"A": {"exact": True, "screens": {"B": "b"}}}}
        with pytest.raises(ConfigurationError):
            get_state_from_path("/b", options)

    def test_invalid_keys(self) -> None:
        with pytest.raises(ConfigurationError):
            get_state_from_path("/chat", {"screens": {}, "Chat": "chat"})


class TestRankRoutes:
    def test_returns_sorted_routes_and_initials(self) -> None:
        routes, initial_routes = rank_routes(
            {"initialRouteName": "Home", "screens": {"Home": "", "User": "users/:id"}}
        )
        assert [r.screen for r in routes] == ["User", "Home"]
        assert [i.initial_route_name for i in initial_routes] == ["Home"]
