"""Value coercion helpers for Zimbra attribute maps.

Zimbra transmits preferences and attributes as strings ("TRUE"/"FALSE") and
accepts integer flags for many booleans.
"""

from __future__ import annotations

from typing import Any, Callable


def coerce_boolean_to_int(value: Any) -> Any:
    if isinstance(value, bool):
        return 1 if value else 0
    return value


def coerce_boolean_to_string(value: Any) -> Any:
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    return value


def coerce_string_to_boolean(value: Any) -> Any:
    if isinstance(value, str):
        lowered = value.lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
    return value


def map_values_deep(value: Any, fn: Callable[[Any], Any]) -> Any:
    """Apply ``fn`` to every leaf of nested dicts/lists."""
    if isinstance(value, dict):
        return {k: map_values_deep(v, fn) for k, v in value.items()}
    if isinstance(value, list):
        return [map_values_deep(v, fn) for v in value]
    return fn(value)
