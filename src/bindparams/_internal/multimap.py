"""MultiValueMapping protocol — the query interface the resolver reads.

A structural protocol so callers can hand the binder any multi-valued
mapping (``QueryParams``, a framework's own query object) without coupling
to the concrete type.
"""

from collections.abc import Iterator
from typing import Protocol, runtime_checkable


@runtime_checkable
class MultiValueMapping(Protocol):
    """A read-only string mapping where keys can have multiple values.

    ``__iter__`` yields keys in the order they first appeared.
    ``get_list`` returns all values for a key, duplicates preserved.

    Defined with explicit dunder methods because Protocols cannot inherit
    from non-Protocol ABCs like ``Mapping``.
    """

    def __getitem__(self, key: str) -> str: ...
    def __contains__(self, key: object) -> bool: ...
    def __iter__(self) -> Iterator[str]: ...
    def __len__(self) -> int: ...
    def get_list(self, key: str) -> list[str]: ...
