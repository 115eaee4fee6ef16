"""bindparams — bind path, query and JSON body parameters into handler inputs.

A handler declares one or two dataclass inputs. The first is filled from
path parameters and the query string, with string values coerced to the
field types; the second, if present, is decoded from the JSON body.

Basic usage::

    from dataclasses import dataclass, field
    from bindparams import Request, into

    @dataclass
    class Params:
        id: int = 0
        tags: list[str] = field(default_factory=list)

    def handler(params: Params) -> str:
        return f"{params.id} {params.tags}"

    request = Request.build("GET", "/user?tags=a&tags=b", path_params=(("id", "7"),))
    (text,) = into(request, request.path_param, handler)

With a router::

    from bindparams import Router

    router = Router()

    @router.route("/user/{id}", methods=["POST"])
    def update(params: Params, user: User) -> User: ...
"""

__version__ = "0.1.0"
__all__ = [
    "Binder",
    "BindingConfig",
    "BindingError",
    "CoercionError",
    "ConfigurationError",
    "DecodeError",
    "Float32",
    "Float64",
    "HTTPError",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "MethodNotAllowed",
    "NotFound",
    "QueryParams",
    "Request",
    "Router",
    "Uint",
    "Uint8",
    "Uint16",
    "Uint32",
    "Uint64",
    "UnknownParameterError",
    "into",
    "into_async",
]

_KINDS = (
    "Float32",
    "Float64",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "Uint",
    "Uint8",
    "Uint16",
    "Uint32",
    "Uint64",
)

_ERRORS = (
    "BindingError",
    "CoercionError",
    "ConfigurationError",
    "DecodeError",
    "HTTPError",
    "MethodNotAllowed",
    "NotFound",
    "UnknownParameterError",
)


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import bindparams`` fast while providing a clean top-level API.
    """
    if name in ("Binder", "into", "into_async"):
        from bindparams.binding import binder as _binder

        return getattr(_binder, name)

    if name == "BindingConfig":
        from bindparams.config import BindingConfig

        return BindingConfig

    if name == "Request":
        from bindparams.http.request import Request

        return Request

    if name == "QueryParams":
        from bindparams.http.query import QueryParams

        return QueryParams

    if name == "Router":
        from bindparams.routing.router import Router

        return Router

    if name in _KINDS:
        from bindparams.binding import kinds as _kinds

        return getattr(_kinds, name)

    if name in _ERRORS:
        from bindparams import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
