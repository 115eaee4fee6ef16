"""Name normalization for matching fields against external keys.

One pure function applied to both sides of every path and query
comparison, so ``filterArrInt``, ``FilterArrInt`` and ``filterArrInt[]``
all meet at ``filterarrint``.
"""

import dataclasses

NAME_METADATA_KEY = "name"


def normalize_key(key: str) -> str:
    """Lowercase *key* and strip one trailing ``[]`` suffix."""
    key = key.lower()
    if key.endswith("[]"):
        key = key[:-2]
    return key


def external_name(field: dataclasses.Field) -> str:
    """Return the name a field is known by outside Python.

    ``field(metadata={"name": "postId"})`` overrides the attribute name.
    """
    return field.metadata.get(NAME_METADATA_KEY) or field.name
