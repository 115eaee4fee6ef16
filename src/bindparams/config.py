"""Binding configuration.

BindingConfig is a frozen dataclass — immutable after creation, shared
safely between concurrent binding invocations.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class BindingConfig:
    """Binding policy. Immutable after creation.

    The defaults reproduce the lenient behavior: malformed values become
    zero values, extra query values and unknown keys are dropped. Opt into
    the stricter checks you need::

        config = BindingConfig(strict_coercion=True, reject_duplicate_scalars=True)
    """

    # Raise CoercionError instead of leaving a zero value on parse failure
    strict_coercion: bool = False

    # Raise CoercionError when a scalar field receives more than one query value
    reject_duplicate_scalars: bool = False

    # Raise UnknownParameterError for query keys that match no field
    reject_unknown_query_keys: bool = False

    # Limits
    max_body_size: int | None = None  # None = read the whole body


DEFAULT_CONFIG = BindingConfig()
