"""bindparams exception hierarchy.

Shared across the inspector, resolver, body decoder and router so every
module raises and catches the same types. Each error carries the HTTP
status a request-handling layer would answer with; the engine itself never
writes a response.
"""

from dataclasses import dataclass


class BindingError(Exception):
    """Base for all bindparams errors."""

    status: int = 500


class ConfigurationError(BindingError):
    """Raised when a handler's declared input shapes cannot be bound.

    Wrong arity, a first input that is not a dataclass, or a flat field of
    an unsupported kind. Raised before any request data is read, typically
    when a ``Binder`` is created.
    """

    status = 500


class DecodeError(BindingError):
    """Raised when the request body cannot be decoded into the body shape.

    Covers malformed JSON, a payload whose structure does not fit the
    target dataclass, and failures reading the body stream. ``path`` is the
    dotted field location of a structural mismatch, empty otherwise.
    """

    status = 400

    def __init__(self, message: str, *, path: str = "") -> None:
        self.path = path
        if path:
            message = f"{path}: {message}"
        super().__init__(message)


class CoercionError(BindingError):
    """Raised in strict mode when a path or query value cannot be parsed.

    The default policy leaves the field at its zero value instead.
    """

    status = 400

    def __init__(self, field: str, value: str, kind: str, reason: str = "") -> None:
        self.field = field
        self.value = value
        self.kind = kind
        super().__init__(reason or f"Cannot parse {value!r} as {kind} for field {field!r}")


class UnknownParameterError(BindingError):
    """Raised in strict mode when a query key matches no flat field."""

    status = 400

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Unknown query parameter {key!r}")


@dataclass(frozen=True, slots=True)
class HTTPError(BindingError):
    """An error that maps directly to an HTTP status code.

    Raised by the router when a request cannot be dispatched.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404 — no route matched the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818
    """405 — route exists but not for this HTTP method.

    Includes an ``Allow`` header listing the valid methods.
    """

    def __init__(self, allowed: frozenset[str], detail: str = "") -> None:
        allow_value = ", ".join(sorted(allowed))
        default_detail = f"Method not allowed. Allowed methods: {allow_value}"
        super().__init__(
            status=405,
            detail=detail or default_detail,
            headers=(("Allow", allow_value),),
        )
