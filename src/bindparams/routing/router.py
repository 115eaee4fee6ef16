"""Trie-based router that feeds path parameters to the binder.

Routes are registered during setup and compiled into an immutable lookup
structure. ``dispatch`` matches a request, attaches the captured path
parameters, and lets the route's binder call the handler.
"""

import logging
import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from bindparams._internal.types import Handler
from bindparams.binding.binder import Binder
from bindparams.config import BindingConfig
from bindparams.errors import ConfigurationError, MethodNotAllowed, NotFound
from bindparams.http.request import Request
from bindparams.routing.params import CONVERTERS
from bindparams.routing.route import PathSegment, Route, RouteMatch

logger = logging.getLogger("bindparams.routing")


def parse_path(path: str) -> list[PathSegment]:
    """Parse a route path string into segments.

    Examples::

        "/users"          -> [PathSegment("users")]
        "/users/{id}"     -> [PathSegment("users"), PathSegment("{id}", is_param=True, ...)]
        "/users/{id:int}" -> [PathSegment("{id:int}", is_param=True, param_type="int")]
        "/files/{path:path}" -> [PathSegment("{path:path}", is_param=True, param_type="path")]

    Raises ``ConfigurationError`` for ``<param>`` syntax or an unknown converter.
    """
    segments: list[PathSegment] = []
    for part in path.strip("/").split("/"):
        if not part:
            continue
        if part.startswith("<") and part.endswith(">"):
            msg = f"Route {path!r} uses <param> syntax; write path parameters as {{param}}."
            raise ConfigurationError(msg)
        if part.startswith("{") and part.endswith("}"):
            inner = part[1:-1]
            if ":" in inner:
                param_name, param_type = inner.split(":", 1)
            else:
                param_name = inner
                param_type = "str"
            if param_type not in CONVERTERS:
                msg = f"Unknown converter {param_type!r} in route {path!r}."
                raise ConfigurationError(msg)
            segments.append(
                PathSegment(
                    value=part,
                    is_param=True,
                    param_name=param_name,
                    param_type=param_type,
                )
            )
        else:
            segments.append(PathSegment(value=part))
    return segments


class _TrieNode:
    """A node in the route trie. Mutable during compilation only."""

    __slots__ = ("catch_all_route", "children", "param_child", "routes_by_method")

    def __init__(self) -> None:
        # Static segment children: "users" -> node
        self.children: dict[str, _TrieNode] = {}
        # Single parameter child (only one param pattern per level)
        self.param_child: _ParamEdge | None = None
        # Catch-all route (path converter)
        self.catch_all_route: dict[str, Route] | None = None
        # Routes at this node, keyed by HTTP method
        self.routes_by_method: dict[str, Route] = {}


@dataclass(slots=True)
class _ParamEdge:
    """A parameter edge in the trie."""

    param_type: str
    regex: re.Pattern[str]
    node: _TrieNode


class Router:
    """Compiled router with trie-based path matching.

    Usage::

        router = Router()

        @router.route("/user/{id}/post/{postId}")
        def show(params: PostParams) -> str: ...

        router.compile()
        (text,) = router.dispatch(Request.build("GET", "/user/1/post/2"))

    Parameter names belong to each route, so ``/a/{id}`` and ``/a/{slug}``
    with different methods capture under their own names.
    """

    __slots__ = ("_compiled", "_config", "_param_names", "_root")

    def __init__(self, config: BindingConfig | None = None) -> None:
        self._root = _TrieNode()
        self._compiled = False
        self._config = config
        self._param_names: dict[str, tuple[str, ...]] = {}

    def add(self, route: Route) -> None:
        """Add a route to the router. Must be called before compile()."""
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)

        segments = parse_path(route.path)
        self._param_names[route.path] = tuple(s.param_name or "" for s in segments if s.is_param)
        node = self._root

        for seg in segments:
            if seg.is_param and seg.param_type == "path":
                # Catch-all: consumes rest of path, must be last segment
                if node.catch_all_route is None:
                    node.catch_all_route = {}
                for method in route.methods:
                    node.catch_all_route[method] = route
                self._log_added(route)
                return

            if seg.is_param:
                if node.param_child is None:
                    node.param_child = _ParamEdge(
                        param_type=seg.param_type,
                        regex=re.compile(f"^{CONVERTERS[seg.param_type]}$"),
                        node=_TrieNode(),
                    )
                elif node.param_child.param_type != seg.param_type:
                    msg = (
                        f"Route {route.path!r} uses converter {seg.param_type!r} where another "
                        f"route already uses {node.param_child.param_type!r}."
                    )
                    raise ConfigurationError(msg)
                node = node.param_child.node
            else:
                if seg.value not in node.children:
                    node.children[seg.value] = _TrieNode()
                node = node.children[seg.value]

        # Register methods at the terminal node
        for method in route.methods:
            node.routes_by_method[method] = route
        self._log_added(route)

    def route(
        self,
        path: str,
        *,
        methods: Iterable[str] = ("GET",),
        name: str | None = None,
        config: BindingConfig | None = None,
    ) -> Callable[[Handler], Handler]:
        """Decorator form of ``add``; binds the handler immediately."""

        def decorator(handler: Handler) -> Handler:
            binder = Binder(handler, config or self._config)
            self.add(
                Route(
                    path=path,
                    binder=binder,
                    methods=frozenset(m.upper() for m in methods),
                    name=name,
                )
            )
            return handler

        return decorator

    @property
    def routes(self) -> list[Route]:
        """Return all registered routes, each once."""
        seen: set[int] = set()
        result: list[Route] = []
        self._collect_routes(self._root, seen, result)
        return result

    def _collect_routes(self, node: _TrieNode, seen: set[int], result: list[Route]) -> None:
        candidates = list(node.routes_by_method.values())
        if node.catch_all_route is not None:
            candidates.extend(node.catch_all_route.values())
        for route in candidates:
            if id(route) not in seen:
                seen.add(id(route))
                result.append(route)

        for child in node.children.values():
            self._collect_routes(child, seen, result)

        if node.param_child is not None:
            self._collect_routes(node.param_child.node, seen, result)

    def compile(self) -> None:
        """Freeze the router. No more routes can be added."""
        self._compiled = True

    def match(self, method: str, path: str) -> RouteMatch:
        """Match a request path and method against compiled routes.

        Returns a ``RouteMatch`` on success.
        Raises ``NotFound`` if no route matches the path.
        Raises ``MethodNotAllowed`` if the path matches but the method doesn't.
        """
        parts = [p for p in path.strip("/").split("/") if p]
        result = self._match_node(self._root, parts, 0, ())

        if result is None:
            raise NotFound(f"No route matches {method} {path!r}")

        routes, values = result

        if method in routes:
            route = routes[method]
            names = self._param_names[route.path]
            return RouteMatch(route=route, path_params=tuple(zip(names, values, strict=True)))

        if routes:
            raise MethodNotAllowed(frozenset(routes))

        raise NotFound(f"No route matches {method} {path!r}")

    def _match_node(
        self,
        node: _TrieNode,
        parts: list[str],
        index: int,
        values: tuple[str, ...],
    ) -> tuple[dict[str, Route], tuple[str, ...]] | None:
        """Recursively match path parts against the trie."""
        # All parts consumed
        if index == len(parts):
            if node.routes_by_method:
                return node.routes_by_method, values
            return None

        part = parts[index]

        # 1. Static child first (exact match)
        if part in node.children:
            result = self._match_node(node.children[part], parts, index + 1, values)
            if result is not None:
                return result

        # 2. Parameter child
        if node.param_child is not None:
            edge = node.param_child
            if edge.regex.match(part):
                result = self._match_node(edge.node, parts, index + 1, (*values, part))
                if result is not None:
                    return result

        # 3. Catch-all
        if node.catch_all_route is not None:
            remaining = "/".join(parts[index:])
            return node.catch_all_route, (*values, remaining)

        return None

    def dispatch(self, request: Request) -> tuple[Any, ...]:
        """Match *request*, bind its parameters, call the handler.

        Returns the handler's outputs. Raises ``NotFound``,
        ``MethodNotAllowed``, or any binding error.
        """
        route, bound_request = self._resolve(request)
        return route.binder.call(bound_request, bound_request.path_param)

    async def dispatch_async(self, request: Request) -> tuple[Any, ...]:
        """Like ``dispatch``, awaiting ``async def`` handlers."""
        route, bound_request = self._resolve(request)
        return await route.binder.call_async(bound_request, bound_request.path_param)

    def _resolve(self, request: Request) -> tuple[Route, Request]:
        match = self.match(request.method, request.path)
        return match.route, request.with_path_params(match.path_params)

    def _log_added(self, route: Route) -> None:
        logger.debug("Route %s %s -> %r", ",".join(sorted(route.methods)), route.path, route.binder)
