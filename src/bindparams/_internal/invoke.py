"""Invoke helpers — call sync or async handlers uniformly.

Handlers can be ``def`` or ``async def``. This module keeps the
sync/async check in exactly one place.

Usage::

    from bindparams._internal.invoke import invoke

    result = await invoke(handler, *args)
"""

import inspect
from typing import Any


async def invoke(handler: Any, *args: Any, **kwargs: Any) -> Any:
    """Call a handler and await the result if it's awaitable."""
    result = handler(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result


def as_outputs(result: Any) -> tuple[Any, ...]:
    """Normalize a handler's result into its ordered output values.

    ``None`` means the handler declared no outputs. A tuple is already
    the ordered outputs. Anything else is a single output.
    """
    if result is None:
        return ()
    if isinstance(result, tuple):
        return result
    return (result,)
