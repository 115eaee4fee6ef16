"""Binder — inspect once, then bind and call per request.

A binding invocation runs four steps in order: the handler plan is
checked (at ``Binder`` creation), the flat shape is resolved from path
parameters and the query string, the body shape is decoded from JSON if
declared, and the handler is called with the flat instance first and the
body instance second.

Usage::

    @dataclass
    class UserParams:
        id: int = 0
        post_id: int = field(default=0, metadata={"name": "postId"})

    def show(params: UserParams) -> str:
        return f"{params.id}/{params.post_id}"

    binder = Binder(show)                       # ConfigurationError here, not per request
    (text,) = binder.call(request, request.path_param)

    # or in one go
    (text,) = into(request, request.path_param, show)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

import anyio.to_thread

from bindparams._internal.invoke import as_outputs, invoke
from bindparams._internal.multimap import MultiValueMapping
from bindparams._internal.types import Handler, PathLookup
from bindparams.binding.body import decode_body
from bindparams.binding.inspector import HandlerPlan, inspect_handler
from bindparams.binding.resolver import resolve_flat
from bindparams.config import DEFAULT_CONFIG, BindingConfig


class BindingRequest(Protocol):
    """What the binder reads from a request: a query multimap and a body stream."""

    @property
    def query(self) -> MultiValueMapping: ...

    @property
    def body(self) -> Any: ...


@dataclass(frozen=True, slots=True)
class BoundArguments:
    """The resolved inputs of one invocation, in call order."""

    params: Any
    body: Any = None
    has_body: bool = False

    @property
    def args(self) -> tuple[Any, ...]:
        if self.has_body:
            return (self.params, self.body)
        return (self.params,)


class Binder:
    """Binds requests to one handler.

    The handler is inspected when the binder is created, so declaration
    mistakes raise ``ConfigurationError`` before any request arrives.
    A binder holds no per-request state and may be shared between threads.
    """

    __slots__ = ("_config", "_plan")

    def __init__(self, handler: Handler, config: BindingConfig | None = None) -> None:
        self._plan: HandlerPlan = inspect_handler(handler)
        self._config = config or DEFAULT_CONFIG

    @property
    def handler(self) -> Handler:
        return self._plan.handler

    @property
    def plan(self) -> HandlerPlan:
        return self._plan

    def bind(self, request: BindingRequest, path_param: PathLookup) -> BoundArguments:
        """Resolve the flat shape, then decode the body shape if declared.

        Raises ``DecodeError`` if the body cannot be decoded, and
        ``CoercionError``/``UnknownParameterError`` under strict policies.
        """
        params = resolve_flat(self._plan.flat, request.query, path_param, self._config)
        if self._plan.body is None:
            return BoundArguments(params=params)
        body = decode_body(self._plan.body, request.body, self._config.max_body_size)
        return BoundArguments(params=params, body=body, has_body=True)

    def call(self, request: BindingRequest, path_param: PathLookup) -> tuple[Any, ...]:
        """Bind, call the handler, and return its outputs as a tuple."""
        bound = self.bind(request, path_param)
        return as_outputs(self._plan.handler(*bound.args))

    async def call_async(self, request: BindingRequest, path_param: PathLookup) -> tuple[Any, ...]:
        """Like ``call``, awaiting the handler if it is ``async def``.

        When a body shape is declared the blocking body read and decode run
        in an anyio worker thread.
        """
        if self._plan.body is None:
            bound = self.bind(request, path_param)
        else:
            bound = await anyio.to_thread.run_sync(self.bind, request, path_param)
        return as_outputs(await invoke(self._plan.handler, *bound.args))

    def __repr__(self) -> str:
        name = getattr(self._plan.handler, "__qualname__", repr(self._plan.handler))
        return f"Binder({name})"


def into(
    request: BindingRequest,
    path_param: PathLookup,
    handler: Handler,
    config: BindingConfig | None = None,
) -> tuple[Any, ...]:
    """Bind *request* into *handler*'s inputs, call it, and return its outputs."""
    return Binder(handler, config).call(request, path_param)


async def into_async(
    request: BindingRequest,
    path_param: PathLookup,
    handler: Handler,
    config: BindingConfig | None = None,
) -> tuple[Any, ...]:
    """Async variant of ``into`` for ``async def`` handlers."""
    return await Binder(handler, config).call_async(request, path_param)
