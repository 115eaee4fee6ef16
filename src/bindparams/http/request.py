"""Immutable binding request.

Frozen metadata plus a single-read body stream. This is the request
collaborator the binder reads from: a query multimap, ordered path
parameters reachable by name, and the raw body.
"""

from __future__ import annotations

import dataclasses
import io
from dataclasses import dataclass
from typing import BinaryIO
from urllib.parse import urlsplit

from bindparams.http.query import QueryParams


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request as seen by the binder.

    ``path_params`` keeps the router's ``(name, value)`` pairs in route
    order so lookups can apply the same tie-break every time.
    ``body`` is consumed by whoever reads it first; the binder reads it at
    most once per invocation.
    """

    method: str
    path: str
    query: QueryParams
    body: BinaryIO
    path_params: tuple[tuple[str, str], ...] = ()

    @classmethod
    def build(
        cls,
        method: str,
        target: str,
        *,
        body: bytes | BinaryIO = b"",
        path_params: tuple[tuple[str, str], ...] = (),
    ) -> Request:
        """Create a request from a method and a request target.

        ``target`` is a path with an optional query string, e.g.
        ``"/user/1234?filterInt=10"``.
        """
        parts = urlsplit(target)
        stream = io.BytesIO(body) if isinstance(body, bytes) else body
        return cls(
            method=method.upper(),
            path=parts.path or "/",
            query=QueryParams(parts.query),
            body=stream,
            path_params=path_params,
        )

    def with_path_params(self, path_params: tuple[tuple[str, str], ...]) -> Request:
        """Return a copy carrying the router's captured path parameters."""
        return dataclasses.replace(self, path_params=path_params)

    def path_param(self, name: str) -> str:
        """Look up a path parameter by name, case-insensitively.

        When several parameters match under different casing, the last one
        in route order wins. Returns ``""`` when nothing matches.
        """
        wanted = name.lower()
        for key, value in reversed(self.path_params):
            if key.lower() == wanted:
                return value
        return ""

    @property
    def url(self) -> str:
        """Request path plus query string."""
        qs = self.query.raw
        if qs:
            return f"{self.path}?{qs.decode('latin-1')}"
        return self.path
