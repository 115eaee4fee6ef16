"""String coercion into primitive kinds.

``parse_value`` is strict: it raises ``ValueError`` on anything that is not
a valid literal for the kind. The resolver decides whether a failure
becomes a zero value or a ``CoercionError``.
"""

import math
import re
import struct
from typing import Any

from bindparams.binding.kinds import Kind

TRUE_LITERALS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
FALSE_LITERALS = frozenset({"0", "f", "F", "FALSE", "false", "False"})

_INT_RE = re.compile(r"[+-]?[0-9]+")
_FLOAT_RE = re.compile(
    r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?"
    r"|[+-]?(?:inf|infinity|nan)",
    re.IGNORECASE,
)
_HEX_FLOAT_RE = re.compile(r"[+-]?0[xX](?:[0-9a-fA-F]+\.?[0-9a-fA-F]*|\.[0-9a-fA-F]+)[pP][+-]?[0-9]+")


def parse_value(raw: str, kind: Kind) -> Any:
    """Parse a non-empty string as *kind*.

    Raises ``ValueError`` if *raw* is not a valid literal or does not fit.
    """
    base = kind.base
    if base is str:
        return raw
    if base is bool:
        return _parse_bool(raw)
    if base is int:
        return _parse_int(raw, kind)
    if base is float:
        return _parse_float(raw, kind)
    msg = f"unsupported kind {kind.name}"
    raise ValueError(msg)


def _parse_bool(raw: str) -> bool:
    if raw in TRUE_LITERALS:
        return True
    if raw in FALSE_LITERALS:
        return False
    msg = f"invalid boolean literal {raw!r}"
    raise ValueError(msg)


def _parse_int(raw: str, kind: Kind) -> int:
    if not _INT_RE.fullmatch(raw):
        msg = f"invalid base-10 integer {raw!r}"
        raise ValueError(msg)
    value = int(raw)
    bounds = kind.int_range()
    if bounds is not None and not bounds[0] <= value <= bounds[1]:
        msg = f"{raw!r} out of range for {kind.name}"
        raise ValueError(msg)
    return value


def _parse_float(raw: str, kind: Kind) -> float:
    if _HEX_FLOAT_RE.fullmatch(raw):
        # Hex mantissa with a binary exponent, e.g. 0x1p-2.
        try:
            value = float.fromhex(raw)
        except OverflowError:
            msg = f"{raw!r} out of range for {kind.name}"
            raise ValueError(msg) from None
    elif _FLOAT_RE.fullmatch(raw):
        value = float(raw)
    else:
        msg = f"invalid float literal {raw!r}"
        raise ValueError(msg)
    if kind.bits == 32 and math.isfinite(value):
        try:
            value = struct.unpack("f", struct.pack("f", value))[0]
        except OverflowError:
            value = math.inf
    if math.isinf(value) and "inf" not in raw.lower():
        msg = f"{raw!r} out of range for {kind.name}"
        raise ValueError(msg)
    return value
