"""Handler inspection — validate declared input shapes once, bind many times.

``inspect_handler`` turns a handler into a ``HandlerPlan``: the flat
shape's field descriptors and the optional body shape. Every check that
depends only on the handler's signature happens here, so a badly declared
handler fails with ``ConfigurationError`` at registration time and never
touches request data.

Plans are cached by handler identity and shapes by class identity, each
in a bounded LRU cache. Handlers and shapes defined per request still
work but only churn the cache; declare them once at module level.
"""

from __future__ import annotations

import dataclasses
import functools
import inspect
import logging
import typing
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from bindparams.binding.kinds import FieldSpec
from bindparams.errors import ConfigurationError

logger = logging.getLogger("bindparams.binding")

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


@dataclass(frozen=True, slots=True)
class ShapePlan:
    """Field descriptors for one flat-shape dataclass."""

    cls: type
    fields: tuple[FieldSpec, ...]


@dataclass(frozen=True, slots=True)
class HandlerPlan:
    """Everything the binder needs to know about a handler."""

    handler: Callable[..., Any]
    flat: ShapePlan
    body: type | None = None

    @property
    def has_body(self) -> bool:
        return self.body is not None


def is_shape(annotation: Any) -> bool:
    """Return True if *annotation* is a dataclass type (not an instance)."""
    return isinstance(annotation, type) and dataclasses.is_dataclass(annotation)


def inspect_handler(handler: Any) -> HandlerPlan:
    """Validate *handler* and return its binding plan.

    Raises ``ConfigurationError`` if the handler is not callable, does not
    take exactly one or two positional inputs, or declares inputs that are
    not dataclasses, or if the first input has a field of unsupported kind.
    """
    try:
        hash(handler)
    except TypeError:
        # Unhashable callables are inspected on every call.
        return _build_plan(handler)
    return _cached_plan(handler)


@functools.lru_cache(maxsize=1024)
def _cached_plan(handler: Any) -> HandlerPlan:
    return _build_plan(handler)


def _build_plan(handler: Any) -> HandlerPlan:
    if not callable(handler):
        msg = f"Expected a callable handler, got {type(handler).__name__}."
        raise ConfigurationError(msg)

    label = _describe(handler)
    try:
        sig = inspect.signature(handler, eval_str=True)
    except NameError as exc:
        msg = f"Cannot resolve annotations of {label}: {exc}"
        raise ConfigurationError(msg) from exc
    except (TypeError, ValueError) as exc:
        msg = f"Cannot read the signature of {label}: {exc}"
        raise ConfigurationError(msg) from exc

    inputs: list[inspect.Parameter] = []
    for param in sig.parameters.values():
        if param.kind in _POSITIONAL:
            inputs.append(param)
        elif param.kind is inspect.Parameter.KEYWORD_ONLY and param.default is not param.empty:
            continue
        else:
            msg = (
                f"{label} declares {param.kind.description} parameter {param.name!r}; "
                "only one or two positional inputs can be bound."
            )
            raise ConfigurationError(msg)

    if len(inputs) not in (1, 2):
        msg = f"{label} must take one or two inputs, got {len(inputs)}."
        raise ConfigurationError(msg)

    for param in inputs:
        if param.annotation is param.empty:
            msg = f"Input {param.name!r} of {label} has no type annotation."
            raise ConfigurationError(msg)
        if not is_shape(param.annotation):
            msg = (
                f"Input {param.name!r} of {label} must be a dataclass type, "
                f"got {param.annotation!r}."
            )
            raise ConfigurationError(msg)

    flat = shape_plan(inputs[0].annotation)
    body = inputs[1].annotation if len(inputs) == 2 else None
    if body is not None:
        _type_hints(body)

    logger.debug(
        "Built binding plan for %s: %d flat field(s), body=%s",
        label,
        len(flat.fields),
        body.__name__ if body is not None else None,
    )
    return HandlerPlan(handler=handler, flat=flat, body=body)


@functools.lru_cache(maxsize=1024)
def shape_plan(cls: type) -> ShapePlan:
    """Describe the fields of a flat-shape dataclass.

    Fields with ``init=False`` are not bindable and are skipped.
    """
    hints = _type_hints(cls)
    specs: list[FieldSpec] = []
    for f in dataclasses.fields(cls):
        if not f.init:
            continue
        annotation = hints.get(f.name, f.type)
        spec = FieldSpec.from_field(f, annotation)
        if spec is None:
            msg = (
                f"Field {cls.__name__}.{f.name} has unsupported type {annotation!r}. "
                "Path and query fields must be bool, int, float, str, a sized "
                "integer/float marker, or a list/tuple/Sequence of those."
            )
            raise ConfigurationError(msg)
        specs.append(spec)
    return ShapePlan(cls=cls, fields=tuple(specs))


def _type_hints(cls: type) -> dict[str, Any]:
    try:
        return typing.get_type_hints(cls, include_extras=True)
    except NameError as exc:
        msg = f"Cannot resolve annotations of {cls.__name__}: {exc}"
        raise ConfigurationError(msg) from exc


def _describe(handler: Any) -> str:
    name = getattr(handler, "__qualname__", None) or type(handler).__qualname__
    return f"handler {name!r}"
