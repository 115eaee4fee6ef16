"""Tests for bindparams.routing.router — trie router feeding the binder."""

from dataclasses import dataclass, field

import pytest

from bindparams.binding.binder import Binder
from bindparams.errors import ConfigurationError, MethodNotAllowed, NotFound
from bindparams.http.request import Request
from bindparams.routing.route import Route
from bindparams.routing.router import Router, parse_path


@dataclass
class NoParams:
    pass


@dataclass
class IdParams:
    id: int = 0


def _handler(params: NoParams) -> str:
    return "ok"


def _route(path: str, methods: frozenset[str] | None = None) -> Route:
    return Route(path=path, binder=Binder(_handler), methods=methods or frozenset({"GET"}))


class TestParsePath:
    def test_static(self) -> None:
        segments = parse_path("/users")
        assert len(segments) == 1
        assert segments[0].value == "users"
        assert segments[0].is_param is False

    def test_multi_static(self) -> None:
        segments = parse_path("/api/v2/users")
        assert [s.value for s in segments] == ["api", "v2", "users"]

    def test_param(self) -> None:
        segments = parse_path("/users/{id}")
        assert len(segments) == 2
        assert segments[1].is_param is True
        assert segments[1].param_name == "id"
        assert segments[1].param_type == "str"

    def test_typed_param(self) -> None:
        segments = parse_path("/users/{id:int}")
        assert segments[1].param_type == "int"

    def test_path_param(self) -> None:
        segments = parse_path("/files/{filepath:path}")
        assert segments[1].param_type == "path"
        assert segments[1].param_name == "filepath"

    def test_root(self) -> None:
        assert parse_path("/") == []

    def test_rejects_flask_style_param(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            parse_path("/share/<slug>")
        assert "<param>" in str(exc_info.value)
        assert "{param}" in str(exc_info.value)
        assert "/share/<slug>" in str(exc_info.value)

    def test_rejects_unknown_converter(self) -> None:
        with pytest.raises(ConfigurationError, match="uuid"):
            parse_path("/users/{id:uuid}")


class TestRouterStaticRoutes:
    def test_root(self) -> None:
        r = Router()
        r.add(_route("/"))
        r.compile()

        assert r.match("GET", "/").path_params == ()

    def test_nested_path(self) -> None:
        r = Router()
        r.add(_route("/api/v2/users"))
        r.compile()

        assert r.match("GET", "/api/v2/users").route.path == "/api/v2/users"

    def test_trailing_slash_ignored(self) -> None:
        r = Router()
        r.add(_route("/users"))
        r.compile()

        assert r.match("GET", "/users/").route.path == "/users"

    def test_routes_listed_once(self) -> None:
        r = Router()
        r.add(_route("/users", frozenset({"GET", "POST"})))
        r.add(_route("/files/{p:path}"))
        assert sorted(route.path for route in r.routes) == ["/files/{p:path}", "/users"]


class TestRouterParams:
    def test_params_in_path_order(self) -> None:
        r = Router()
        r.add(_route("/user/{id}/post/{postId}"))
        r.compile()

        match = r.match("GET", "/user/1234/post/9876")
        assert match.path_params == (("id", "1234"), ("postId", "9876"))

    def test_int_param_rejects_non_digit(self) -> None:
        r = Router()
        r.add(_route("/users/{id:int}"))
        r.compile()

        with pytest.raises(NotFound):
            r.match("GET", "/users/alice")

    def test_float_param(self) -> None:
        r = Router()
        r.add(_route("/price/{amount:float}"))
        r.compile()

        assert r.match("GET", "/price/9.99").path_params == (("amount", "9.99"),)

    def test_catch_all(self) -> None:
        r = Router()
        r.add(_route("/files/{filepath:path}"))
        r.compile()

        match = r.match("GET", "/files/docs/api/index.html")
        assert match.path_params == (("filepath", "docs/api/index.html"),)

    def test_static_preferred_over_param(self) -> None:
        r = Router()
        r.add(_route("/users/me"))
        r.add(_route("/users/{id}"))
        r.compile()

        assert r.match("GET", "/users/me").route.path == "/users/me"
        assert r.match("GET", "/users/42").route.path == "/users/{id}"

    def test_names_belong_to_each_route(self) -> None:
        r = Router()
        r.add(_route("/items/{id}", frozenset({"GET"})))
        r.add(_route("/items/{slug}", frozenset({"DELETE"})))
        r.compile()

        assert r.match("GET", "/items/x").path_params == (("id", "x"),)
        assert r.match("DELETE", "/items/x").path_params == (("slug", "x"),)

    def test_conflicting_converters_rejected(self) -> None:
        r = Router()
        r.add(_route("/items/{id:int}"))
        with pytest.raises(ConfigurationError, match="converter"):
            r.add(_route("/items/{name:str}", frozenset({"POST"})))


class TestRouterMethods:
    def test_method_not_allowed(self) -> None:
        r = Router()
        r.add(_route("/users", frozenset({"GET"})))
        r.compile()

        with pytest.raises(MethodNotAllowed) as exc_info:
            r.match("POST", "/users")

        err = exc_info.value
        assert err.status == 405
        assert "GET" in dict(err.headers)["Allow"]


class TestRouterErrors:
    def test_not_found(self) -> None:
        r = Router()
        r.add(_route("/users"))
        r.compile()

        with pytest.raises(NotFound) as exc_info:
            r.match("GET", "/nonexistent")
        assert exc_info.value.status == 404

    def test_add_after_compile_raises(self) -> None:
        r = Router()
        r.compile()

        with pytest.raises(RuntimeError, match="Cannot add routes after compilation"):
            r.add(_route("/users"))


class TestRouteDecorator:
    def test_bad_handler_fails_at_registration(self) -> None:
        r = Router()

        with pytest.raises(ConfigurationError):

            @r.route("/users/{id}")
            def handler(params: IdParams, body: IdParams, extra: IdParams) -> None:
                pass

        assert r.routes == []

    def test_methods_uppercased(self) -> None:
        r = Router()

        @r.route("/users/{id}", methods=["post"])
        def handler(params: IdParams) -> int:
            return params.id

        r.compile()
        (result,) = r.dispatch(Request.build("POST", "/users/5"))
        assert result == 5

    def test_decorator_returns_handler(self) -> None:
        r = Router()

        def handler(params: IdParams) -> int:
            return params.id

        assert r.route("/x")(handler) is handler

    def test_dispatch_unknown_path(self) -> None:
        r = Router()
        r.compile()
        with pytest.raises(NotFound):
            r.dispatch(Request.build("GET", "/missing"))


@dataclass
class TagParams:
    id: int = 0
    tags: list[str] = field(default_factory=list)


class TestDispatchAsync:
    @pytest.mark.anyio
    async def test_async_handler(self) -> None:
        r = Router()

        @r.route("/users/{id}")
        async def handler(params: TagParams) -> tuple[int, list[str]]:
            return params.id, params.tags

        r.compile()
        result = await r.dispatch_async(Request.build("GET", "/users/3?tags[]=a&tags[]=b"))
        assert result == (3, ["a", "b"])
