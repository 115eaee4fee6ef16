"""JSON body decoding into dataclasses.

The whole body is read once and parsed with ``json``, then mapped onto the
body-shape dataclass field by field, recursing into nested dataclasses,
lists, tuples and dicts.

Key matching per object: a field's external name (``metadata["name"]`` or
the attribute name) matches exactly, otherwise case-insensitively. Unknown
keys are ignored; when two keys land on one field, the later key wins.
Missing keys and ``null`` keep the field's default, or its type's zero.

Anything that stops the payload from fitting the shape raises
``DecodeError``. Nothing is recovered here.
"""

from __future__ import annotations

import collections.abc
import dataclasses
import enum
import functools
import json
import types
import typing
from typing import IO, Annotated, Any, TypeVar, Union, get_args, get_origin

from bindparams.binding.kinds import Kind
from bindparams.binding.names import external_name
from bindparams.errors import DecodeError

T = TypeVar("T")


def decode_body(shape: type[T], stream: IO[bytes], max_size: int | None = None) -> T:
    """Read *stream* once and decode it as UTF-8 JSON into a new *shape* instance."""
    raw = _read(stream, max_size)
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        msg = f"request body is not valid UTF-8: {exc.reason}"
        raise DecodeError(msg) from exc
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        if not text.strip():
            msg = "unexpected end of JSON input"
        else:
            msg = f"invalid JSON: {exc.msg} at line {exc.lineno} column {exc.colno}"
        raise DecodeError(msg) from exc
    except RecursionError as exc:
        msg = "invalid JSON: nesting too deep"
        raise DecodeError(msg) from exc
    except ValueError as exc:
        # Integer literals past the interpreter's digit limit.
        msg = f"invalid JSON: {exc}"
        raise DecodeError(msg) from exc
    return from_json(shape, data)


def from_json(shape: type[T], data: Any) -> T:
    """Map already-parsed JSON *data* onto the dataclass *shape*."""
    if not isinstance(data, dict):
        msg = f"cannot decode JSON {_json_type(data)} into {shape.__name__}"
        raise DecodeError(msg)
    return _convert(data, shape, "")


def encode_body(value: Any) -> bytes:
    """Serialize a body-shape instance the way ``decode_body`` reads it."""
    return json.dumps(to_json(value)).encode("utf-8")


def to_json(value: Any) -> Any:
    """Turn dataclass instances into JSON-ready data, keyed by external names."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {external_name(f): to_json(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_json(v) for v in value]
    if isinstance(value, dict):
        return {str(k): to_json(v) for k, v in value.items()}
    return value


def _read(stream: IO[bytes], max_size: int | None) -> bytes:
    try:
        if max_size is None:
            return stream.read()
        raw = stream.read(max_size + 1)
    except (OSError, ValueError) as exc:
        msg = f"cannot read request body: {exc}"
        raise DecodeError(msg) from exc
    if len(raw) > max_size:
        msg = f"request body exceeds {max_size} bytes"
        raise DecodeError(msg)
    return raw


def _convert(value: Any, tp: Any, path: str) -> Any:
    if tp is Any or tp is object:
        return value

    origin = get_origin(tp)

    if origin is Annotated:
        base, *extras = get_args(tp)
        result = _convert(value, base, path)
        for extra in extras:
            if isinstance(extra, Kind):
                _check_kind(result, extra, path)
        return result

    if origin is Union or origin is types.UnionType:
        return _convert_union(value, get_args(tp), path)

    if value is None:
        return zero_of(tp)

    if dataclasses.is_dataclass(tp) and isinstance(tp, type):
        if not isinstance(value, dict):
            raise _mismatch(value, tp.__name__, path)
        return _convert_object(value, tp, path)

    if origin in (list, tuple, set, frozenset) or origin is collections.abc.Sequence:
        return _convert_array(value, tp, origin, path)

    if origin is dict or tp is dict:
        if not isinstance(value, dict):
            raise _mismatch(value, "object", path)
        args = get_args(tp)
        item_tp = args[1] if len(args) == 2 else Any
        return {k: _convert(v, item_tp, _join(path, k)) for k, v in value.items()}

    if tp is list or tp is tuple:
        if not isinstance(value, list):
            raise _mismatch(value, "array", path)
        return tp(value)

    if isinstance(tp, type) and issubclass(tp, enum.Enum):
        try:
            return tp(value)
        except ValueError as exc:
            msg = f"{value!r} is not a valid {tp.__name__}"
            raise DecodeError(msg, path=path) from exc

    return _convert_scalar(value, tp, path)


def _convert_scalar(value: Any, tp: Any, path: str) -> Any:
    if tp is bool:
        if isinstance(value, bool):
            return value
        raise _mismatch(value, "bool", path)
    if tp is int:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        raise _mismatch(value, "int", path)
    if tp is float:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            try:
                return float(value)
            except OverflowError:
                raise _mismatch(value, "float", path) from None
        raise _mismatch(value, "float", path)
    if tp is str:
        if isinstance(value, str):
            return value
        raise _mismatch(value, "str", path)
    # Unknown annotation: hand the JSON value through untouched.
    return value


def _convert_union(value: Any, args: tuple[Any, ...], path: str) -> Any:
    if value is None and type(None) in args:
        return None
    options = [a for a in args if a is not type(None)]
    if len(options) == 1:
        return _convert(value, options[0], path)
    for option in options:
        try:
            return _convert(value, option, path)
        except DecodeError:
            continue
    names = " | ".join(getattr(a, "__name__", repr(a)) for a in options)
    raise _mismatch(value, names, path)


def _convert_array(value: Any, tp: Any, origin: Any, path: str) -> Any:
    if not isinstance(value, list):
        raise _mismatch(value, "array", path)
    args = get_args(tp)
    if origin is tuple and args and args[-1] is not Ellipsis:
        if len(args) != len(value):
            msg = f"expected array of {len(args)} items, got {len(value)}"
            raise DecodeError(msg, path=path)
        return tuple(
            _convert(v, a, _join(path, i)) for i, (v, a) in enumerate(zip(value, args, strict=True))
        )
    item_tp = args[0] if args else Any
    items = [_convert(v, item_tp, _join(path, i)) for i, v in enumerate(value)]
    if origin in (tuple, set, frozenset):
        return origin(items)
    return items


def _convert_object(data: dict[str, Any], cls: type, path: str) -> Any:
    fields = _object_fields(cls)
    exact = {name: f for name, (f, _) in fields.items()}
    folded = {name.lower(): f for name, (f, _) in reversed(fields.items())}

    received: dict[str, Any] = {}
    for key, value in data.items():
        f = exact.get(key) or folded.get(key.lower())
        if f is not None:
            received[f.name] = (key, value)

    kwargs: dict[str, Any] = {}
    for f, tp in fields.values():
        if f.name in received:
            key, value = received[f.name]
            if value is not None or _accepts_none(tp):
                kwargs[f.name] = _convert(value, tp, _join(path, key))
                continue
        if f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING:
            kwargs[f.name] = zero_of(tp)
    return cls(**kwargs)


@functools.lru_cache(maxsize=1024)
def _object_fields(cls: type) -> dict[str, tuple[dataclasses.Field, Any]]:
    """External name -> (field, resolved type) for every init field of *cls*."""
    hints = typing.get_type_hints(cls, include_extras=True)
    return {
        external_name(f): (f, hints.get(f.name, Any))
        for f in dataclasses.fields(cls)
        if f.init
    }


def zero_of(tp: Any) -> Any:
    """The value a missing field of type *tp* takes."""
    origin = get_origin(tp)
    if origin is Annotated:
        return zero_of(get_args(tp)[0])
    if _accepts_none(tp) or tp is Any:
        return None
    if dataclasses.is_dataclass(tp) and isinstance(tp, type):
        return _convert_object({}, tp, "")
    if origin is not None:
        tp = origin
    if tp in (bool, int, float, str, list, tuple, dict, set, frozenset):
        return tp()
    if tp is collections.abc.Sequence:
        return []
    return None


def _accepts_none(tp: Any) -> bool:
    origin = get_origin(tp)
    if origin is Annotated:
        return _accepts_none(get_args(tp)[0])
    return (origin is Union or origin is types.UnionType) and type(None) in get_args(tp)


def _check_kind(value: Any, kind: Kind, path: str) -> None:
    bounds = kind.int_range()
    if bounds is not None and not bounds[0] <= value <= bounds[1]:
        msg = f"number {value} overflows {kind.name}"
        raise DecodeError(msg, path=path)


def _mismatch(value: Any, expected: str, path: str) -> DecodeError:
    return DecodeError(f"cannot decode JSON {_json_type(value)} into {expected}", path=path)


def _json_type(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    return "object"


def _join(path: str, key: object) -> str:
    if isinstance(key, int):
        return f"{path}[{key}]"
    return f"{path}.{key}" if path else str(key)
