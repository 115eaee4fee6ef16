"""Flat-field resolution — path parameters first, then the query string.

For each field of the flat shape:

1. Ask the path lookup for the field's external name. A non-empty answer
   is coerced and the field is done.
2. Otherwise find the first query key that normalizes to the same name
   (case-insensitive, trailing ``[]`` ignored). Sequence fields take every
   value under that key in order; scalar fields take the first.
3. Empty strings are skipped, leaving the zero value. Values that fail to
   parse also leave the zero value unless strict coercion is configured.

A field never takes values from more than one source.
"""

from __future__ import annotations

import logging
from typing import Any

from bindparams._internal.multimap import MultiValueMapping
from bindparams._internal.types import PathLookup
from bindparams.binding.coerce import parse_value
from bindparams.binding.inspector import ShapePlan
from bindparams.binding.kinds import FieldSpec, Kind
from bindparams.binding.names import normalize_key
from bindparams.config import BindingConfig
from bindparams.errors import CoercionError, UnknownParameterError

logger = logging.getLogger("bindparams.binding")


def resolve_flat(
    plan: ShapePlan,
    query: MultiValueMapping,
    path_param: PathLookup,
    config: BindingConfig,
) -> Any:
    """Build a new flat-shape instance from path parameters and *query*."""
    keys = _index_query(query)
    if config.reject_unknown_query_keys:
        known = {spec.key for spec in plan.fields}
        for normalized, key in keys.items():
            if normalized not in known:
                raise UnknownParameterError(key)

    values: dict[str, Any] = {}
    for spec in plan.fields:
        values[spec.name] = _resolve_field(spec, query, keys, path_param, config)
    return plan.cls(**values)


def _index_query(query: MultiValueMapping) -> dict[str, str]:
    """Map each normalized key to the first original key that produced it."""
    index: dict[str, str] = {}
    for key in query:
        index.setdefault(normalize_key(key), key)
    return index


def _resolve_field(
    spec: FieldSpec,
    query: MultiValueMapping,
    keys: dict[str, str],
    path_param: PathLookup,
    config: BindingConfig,
) -> Any:
    raw = path_param(spec.external)
    if raw:
        if spec.container is not None:
            return spec.container([_coerce(raw, spec.kind, spec, config)])
        return _coerce(raw, spec.kind, spec, config, default=spec.zero())

    key = keys.get(spec.key)
    found = query.get_list(key) if key is not None else []

    if spec.container is not None:
        return spec.container(_coerce(value, spec.kind, spec, config) for value in found)

    if not found:
        return spec.zero()
    if len(found) > 1 and config.reject_duplicate_scalars:
        reason = f"Field {spec.name!r} takes one value, got {len(found)} for {key!r}"
        raise CoercionError(spec.name, found[1], spec.kind.name, reason=reason)
    return _coerce(found[0], spec.kind, spec, config, default=spec.zero())


_UNSET: Any = object()


def _coerce(
    raw: str,
    kind: Kind,
    spec: FieldSpec,
    config: BindingConfig,
    default: Any = _UNSET,
) -> Any:
    """Parse *raw* as *kind*, falling back to *default* (or the kind's zero)."""
    if default is _UNSET:
        default = kind.zero()
    if raw == "":
        return default
    try:
        return parse_value(raw, kind)
    except ValueError as exc:
        if config.strict_coercion:
            raise CoercionError(spec.name, raw, kind.name) from exc
        logger.debug("Leaving %s at its zero value: %s", spec.name, exc)
        return default
