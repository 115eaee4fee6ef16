"""Route and RouteMatch frozen dataclasses."""

from dataclasses import dataclass

from bindparams.binding.binder import Binder


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route path.

    Static:  ``/users``  (is_param=False)
    Param:   ``/{id}``   (is_param=True, param_name="id")
    Typed:   ``/{id:int}`` (is_param=True, param_name="id", param_type="int")
    """

    value: str
    is_param: bool = False
    param_name: str | None = None
    param_type: str = "str"


@dataclass(frozen=True, slots=True)
class Route:
    """A frozen route definition.

    The binder is built when the route is created, so a handler with
    unbindable inputs fails at registration.
    """

    path: str
    binder: Binder
    methods: frozenset[str]
    name: str | None = None


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match.

    ``path_params`` keeps ``(name, value)`` pairs in path order.
    """

    route: Route
    path_params: tuple[tuple[str, str], ...]
