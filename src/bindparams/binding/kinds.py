"""Primitive kinds accepted in flat shapes.

A flat field is ``bool``, ``int``, ``float`` or ``str``, one of the sized
markers below, or a homogeneous sequence of one of those. The sized
markers are ``Annotated`` aliases, so type checkers still see a plain
``int`` or ``float``::

    @dataclass
    class Filters:
        page: Uint16 = 0
        ratio: Float32 = 0.0
        tags: list[str] = field(default_factory=list)
"""

from __future__ import annotations

import collections.abc
import dataclasses
from dataclasses import dataclass
from typing import Annotated, Any, get_args, get_origin

from bindparams.binding.names import external_name, normalize_key


@dataclass(frozen=True, slots=True)
class Kind:
    """A primitive destination kind.

    ``bits`` bounds sized integers and selects float precision;
    ``None`` means Python's native range.
    """

    name: str
    base: type
    bits: int | None = None
    signed: bool = True

    def zero(self) -> Any:
        return self.base()

    def int_range(self) -> tuple[int, int] | None:
        """Inclusive bounds for sized integer kinds."""
        if self.base is not int or self.bits is None:
            return None
        if self.signed:
            half = 1 << (self.bits - 1)
            return -half, half - 1
        return 0, (1 << self.bits) - 1


BOOL = Kind("bool", bool)
INT = Kind("int", int)
FLOAT = Kind("float", float)
STR = Kind("str", str)

Int8 = Annotated[int, Kind("int8", int, 8)]
Int16 = Annotated[int, Kind("int16", int, 16)]
Int32 = Annotated[int, Kind("int32", int, 32)]
Int64 = Annotated[int, Kind("int64", int, 64)]
Uint = Annotated[int, Kind("uint", int, 64, signed=False)]
Uint8 = Annotated[int, Kind("uint8", int, 8, signed=False)]
Uint16 = Annotated[int, Kind("uint16", int, 16, signed=False)]
Uint32 = Annotated[int, Kind("uint32", int, 32, signed=False)]
Uint64 = Annotated[int, Kind("uint64", int, 64, signed=False)]
Float32 = Annotated[float, Kind("float32", float, 32)]
Float64 = Annotated[float, Kind("float64", float, 64)]

_PRIMITIVES: dict[type, Kind] = {bool: BOOL, int: INT, float: FLOAT, str: STR}

_SEQUENCE_ORIGINS: dict[Any, type] = {
    list: list,
    tuple: tuple,
    collections.abc.Sequence: list,
}


def kind_of(annotation: Any) -> Kind | None:
    """Return the primitive kind for *annotation*, or None if unsupported.

    Subclasses (``IntEnum``, ``bool`` posing as ``int``) do not count.
    """
    if get_origin(annotation) is Annotated:
        base, *extras = get_args(annotation)
        for extra in extras:
            if isinstance(extra, Kind) and extra.base is base:
                return extra
        return kind_of(base)
    if isinstance(annotation, type):
        return _PRIMITIVES.get(annotation)
    return None


def sequence_of(annotation: Any) -> tuple[type, Kind] | None:
    """Return ``(container, element kind)`` for a primitive sequence.

    ``list[T]``, ``Sequence[T]`` and ``tuple[T, ...]`` qualify.
    Fixed-length tuples and bare ``list`` do not.
    """
    if get_origin(annotation) is Annotated:
        return sequence_of(get_args(annotation)[0])
    container = _SEQUENCE_ORIGINS.get(get_origin(annotation))
    if container is None:
        return None
    args = get_args(annotation)
    if container is tuple:
        if len(args) != 2 or args[1] is not Ellipsis:
            return None
        args = args[:1]
    if len(args) != 1:
        return None
    element = kind_of(args[0])
    if element is None:
        return None
    return container, element


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """How one flat-shape field is matched and coerced.

    Built once per shape at inspection time; never holds request data.
    """

    name: str
    external: str
    key: str
    kind: Kind
    container: type | None = None
    field: dataclasses.Field | None = None

    @property
    def is_sequence(self) -> bool:
        return self.container is not None

    def zero(self) -> Any:
        """The value an unresolved field keeps.

        Scalars keep their dataclass default when one is declared, else
        the kind's zero. Sequences are always a new empty container.
        """
        if self.container is not None:
            return self.container()
        f = self.field
        if f is not None:
            if f.default is not dataclasses.MISSING:
                return f.default
            if f.default_factory is not dataclasses.MISSING:
                return f.default_factory()
        return self.kind.zero()

    @classmethod
    def from_field(cls, f: dataclasses.Field, annotation: Any) -> FieldSpec | None:
        """Describe a dataclass field, or return None if its type is unsupported."""
        container: type | None = None
        kind = kind_of(annotation)
        if kind is None:
            seq = sequence_of(annotation)
            if seq is None:
                return None
            container, kind = seq
        name = external_name(f)
        return cls(
            name=f.name,
            external=name,
            key=normalize_key(name),
            kind=kind,
            container=container,
            field=f,
        )
