"""Binding engine — fill handler input dataclasses from a request.

Path parameters and the query string populate the first input (the flat
shape); the JSON body populates the optional second input.
"""

from bindparams.binding.binder import Binder, BoundArguments, into, into_async
from bindparams.binding.body import decode_body, encode_body
from bindparams.binding.inspector import inspect_handler
from bindparams.binding.names import normalize_key

__all__ = [
    "Binder",
    "BoundArguments",
    "decode_body",
    "encode_body",
    "inspect_handler",
    "into",
    "into_async",
    "normalize_key",
]
