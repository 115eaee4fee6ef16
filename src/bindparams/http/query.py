"""Immutable query string parameters.

Implements ``Mapping[str, str]`` and the ``MultiValueMapping`` protocol.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from urllib.parse import parse_qsl, urlencode


class QueryParams(Mapping[str, str]):
    """Immutable query string parameters.

    Attributes:
        _data: Parsed query string as key -> list of values, keys in the
            order they first appear, values in request order.
        _raw: Raw query string bytes.

    ``__getitem__`` returns the first value for a key.
    ``get_list`` returns all values for a key.
    """

    _data: dict[str, list[str]]
    _raw: bytes

    __slots__ = ("_data", "_raw")

    def __init__(self, query_string: bytes | str = b"") -> None:
        if isinstance(query_string, str):
            text = query_string
            query_string = text.encode("utf-8")
        else:
            text = query_string.decode("latin-1")
        object.__setattr__(self, "_raw", query_string)
        data: dict[str, list[str]] = {}
        for key, value in parse_qsl(text, keep_blank_values=True):
            data.setdefault(key, []).append(value)
        object.__setattr__(self, "_data", data)

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[str, str]]) -> QueryParams:
        """Build from ``(key, value)`` pairs, duplicates kept in order."""
        return cls(urlencode(list(pairs)))

    def __setattr__(self, name: str, value: object) -> None:
        msg = "QueryParams is immutable"
        raise AttributeError(msg)

    def __getitem__(self, key: str) -> str:
        return self._data[key][0]

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {v!r}" for k, v in self._data.items())
        return f"QueryParams({{{items}}})"

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key*, in request order."""
        return list(self._data.get(key, []))

    def multi_items(self) -> list[tuple[str, str]]:
        """Return every ``(key, value)`` pair, grouped by key."""
        return [(k, v) for k, values in self._data.items() for v in values]

    @property
    def raw(self) -> bytes:
        """The undecoded query string."""
        return self._raw
