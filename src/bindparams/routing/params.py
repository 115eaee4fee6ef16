"""Path segment converters.

Converters only constrain which segments match; captured values stay
strings and are coerced by the binder like any other path parameter.
"""

# Regex pattern for each supported converter, e.g. ``{id:int}``
CONVERTERS: dict[str, str] = {
    "str": r"[^/]+",
    "int": r"[+-]?\d+",
    "float": r"[+-]?\d+(?:\.\d+)?",
    "path": r".+",
}
