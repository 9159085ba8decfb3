"""Tests for waymark.routing — ordered matching and reverse lookup."""

import pytest

from waymark.callbacks import Direct
from waymark.config import Config
from waymark.exceptions import MethodNotAllowed, MissingRouteParameter, NotFound
from waymark.routing import Route, RouteCollection, RouteMatch, normalize_path


def _handler(*args):
    return args


def _route(method: str, pattern: str, name: str | None = None) -> Route:
    return Route(method=method, pattern=pattern, callback=Direct(_handler), name=name)


class TestNormalizePath:
    @pytest.mark.parametrize(
        ("raw", "normalized"),
        [("", "/"), ("/", "/"), ("foo", "/foo"), ("/foo/", "/foo"), ("//foo/bar//", "/foo/bar")],
    )
    def test_normalize(self, raw: str, normalized: str) -> None:
        assert normalize_path(raw) == normalized


class TestFindMatch:
    def test_static_match(self) -> None:
        routes = RouteCollection()
        route = routes.add(_route("GET", "/hello"))
        match = routes.find_match("GET", "/hello")
        assert match == RouteMatch(route, ())

    def test_path_is_normalized(self) -> None:
        routes = RouteCollection()
        routes.add(_route("GET", "/hello"))
        routes.add(_route("GET", "/"))
        assert routes.find_match("GET", "hello/").route.pattern == "/hello"
        assert routes.find_match("GET", "").route.pattern == "/"

    def test_method_is_case_insensitive(self) -> None:
        routes = RouteCollection()
        routes.add(_route("GET", "/hello"))
        assert routes.find_match("get", "/hello").route.method == "GET"

    def test_arguments_are_trimmed(self) -> None:
        routes = RouteCollection()
        routes.add(_route("GET", "/foo/(:alpha)/(:int)"))
        assert routes.find_match("GET", "/foo/bar/42").arguments == ("bar", "42")

    def test_missing_trailing_optional_is_dropped(self) -> None:
        routes = RouteCollection()
        routes.add(_route("GET", "/test/(:any)?/(:any)?"))
        assert routes.find_match("GET", "/test").arguments == ()
        assert routes.find_match("GET", "/test/first").arguments == ("first",)
        assert routes.find_match("GET", "/test/first/second").arguments == ("first", "second")

    def test_first_registered_wins(self) -> None:
        routes = RouteCollection()
        first = routes.add(_route("GET", "/users/(:any)"))
        routes.add(_route("GET", "/users/(:int)"))
        assert routes.find_match("GET", "/users/42").route is first

    def test_placeholder_type_selects_route(self) -> None:
        routes = RouteCollection()
        routes.add(_route("GET", "/foo/(:alpha)"))
        int_route = routes.add(_route("GET", "/foo/(:int)"))
        match = routes.find_match("GET", "/foo/1337")
        assert match.route is int_route
        assert match.arguments == ("1337",)

    def test_not_found(self) -> None:
        routes = RouteCollection()
        routes.add(_route("GET", "/foo/(:alpha)"))
        with pytest.raises(NotFound):
            routes.find_match("GET", "/foo/1337")

    def test_method_not_allowed(self) -> None:
        routes = RouteCollection()
        routes.add(_route("GET", "/data"))
        with pytest.raises(MethodNotAllowed):
            routes.find_match("DELETE", "/data")

    def test_later_pattern_with_method_beats_405(self) -> None:
        routes = RouteCollection()
        routes.add(_route("POST", "/test"))
        get_route = routes.add(_route("GET", "/test/(:alpha)?"))
        assert routes.find_match("GET", "/test").route is get_route
        assert routes.find_match("POST", "/test").route.method == "POST"

    def test_any_method(self) -> None:
        routes = RouteCollection()
        fallback = routes.add(_route("ANY", "/hook"))
        exact = routes.add(_route("POST", "/hook"))
        assert routes.find_match("PATCH", "/hook").route is fallback
        assert routes.find_match("POST", "/hook").route is exact

    def test_same_pattern_and_method_last_wins(self) -> None:
        routes = RouteCollection()
        routes.add(_route("GET", "/dup"))
        second = routes.add(_route("GET", "/dup"))
        assert routes.find_match("GET", "/dup").route is second
        assert routes.routes == [second]

    def test_matching_does_not_mutate_route(self) -> None:
        routes = RouteCollection()
        route = routes.add(_route("GET", "/u/(:int)"))
        first = routes.find_match("GET", "/u/1")
        second = routes.find_match("GET", "/u/2")
        assert first.arguments == ("1",)
        assert second.arguments == ("2",)
        assert first.route is second.route is route

    def test_repeated_calls_are_equal(self) -> None:
        routes = RouteCollection()
        routes.add(_route("GET", "/a/(:any)"))
        assert routes.find_match("GET", "/a/x") == routes.find_match("GET", "/a/x")

    def test_routes_in_registration_order(self) -> None:
        routes = RouteCollection()
        a = routes.add(_route("GET", "/a"))
        b = routes.add(_route("GET", "/b"))
        c = routes.add(_route("POST", "/a"))
        assert routes.routes == [a, c, b]


class TestGetRoute:
    def test_unknown_name(self) -> None:
        assert RouteCollection().get_route("nope") is None

    def test_without_parameters(self) -> None:
        routes = RouteCollection()
        routes.add(_route("GET", "/", name="home"))
        routes.add(_route("GET", "/foo/bar", name="foobar"))
        assert routes.get_route("home") == "/"
        assert routes.get_route("foobar") == "/foo/bar"

    def test_required_parameters(self) -> None:
        routes = RouteCollection()
        routes.add(_route("GET", "/foo/(:any)", name="r1"))
        routes.add(_route("GET", "/foo/(:any)/(:any)", name="r2"))
        assert routes.get_route("r1", ["bar"]) == "/foo/bar"
        assert routes.get_route("r2", ["bar", "lipsum"]) == "/foo/bar/lipsum"

    def test_arguments_are_stringified(self) -> None:
        routes = RouteCollection()
        routes.add(_route("GET", "/users/(:int)", name="user"))
        assert routes.get_route("user", [123]) == "/users/123"

    def test_optional_parameter_collapses(self) -> None:
        routes = RouteCollection()
        routes.add(_route("GET", "/foo/(:alpha)/(:int)?", name="r3"))
        assert routes.get_route("r3", ["lipsum"]) == "/foo/lipsum"
        assert routes.get_route("r3", ["lipsum", 7]) == "/foo/lipsum/7"

    def test_only_optional_parameters(self) -> None:
        routes = RouteCollection()
        routes.add(_route("GET", "/test/(:any)?/(:any)?", name="test"))
        assert routes.get_route("test") == "/test"
        assert routes.get_route("test", ["first"]) == "/test/first"
        assert routes.get_route("test", ["first", "second"]) == "/test/first/second"

    def test_missing_required_parameter(self) -> None:
        routes = RouteCollection()
        routes.add(_route("GET", "/foo/(:alpha)/(:int)?", name="r3"))
        with pytest.raises(MissingRouteParameter, match="r3"):
            routes.get_route("r3", [])

    def test_name_is_rebound_by_later_route(self) -> None:
        routes = RouteCollection()
        routes.add(_route("GET", "/old", name="page"))
        routes.add(_route("GET", "/new", name="page"))
        assert routes.get_route("page") == "/new"

    def test_round_trip(self) -> None:
        routes = RouteCollection()
        route = routes.add(_route("GET", "/blog/(:alpha)/(:int)/(:any)?", name="post"))
        for args in (["news", 2024], ["news", 2024, "hello"]):
            url = routes.get_route("post", args)
            match = routes.find_match("GET", url)
            assert match.route is route
            assert match.arguments == tuple(str(a) for a in args)

    def test_base_url_on_request(self) -> None:
        routes = RouteCollection(Config({"base_url": "https://example.com/"}))
        routes.add(_route("GET", "/foo/(:any)", name="foo"))
        routes.add(_route("GET", "/", name="home"))
        assert routes.get_route("foo", ["bar"]) == "/foo/bar"
        assert routes.get_route("foo", ["bar"], use_base_url=True) == "https://example.com/foo/bar"
        assert routes.get_route("home", use_base_url=True) == "https://example.com/"

    def test_base_url_always(self) -> None:
        config = Config({"base_url": "https://example.com", "prepend_base_url": True})
        routes = RouteCollection(config)
        routes.add(_route("GET", "/static", name="static"))
        assert routes.get_route("static") == "https://example.com/static"

    def test_use_base_url_without_base_url(self) -> None:
        routes = RouteCollection()
        routes.add(_route("GET", "/x", name="x"))
        assert routes.get_route("x", use_base_url=True) == "/x"
