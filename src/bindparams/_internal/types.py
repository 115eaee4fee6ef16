"""Shared type aliases used across bindparams modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Route handler: user-defined function taking one or two dataclass inputs
Handler: TypeAlias = Callable[..., Any]

# Path-parameter lookup: name -> value, "" when the parameter is absent
PathLookup: TypeAlias = Callable[[str], str]
