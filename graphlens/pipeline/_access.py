"""Duck-typed field access for untrusted provider payloads.

Grounding metadata arrives either as plain JSON (camelCase keys) or as SDK
objects (snake_case attributes); both are read through ``get_field``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


def get_field(obj: Any, *names: str) -> Any:
    """Return the first non-None value found under any of ``names``."""
    if obj is None:
        return None
    for name in names:
        if isinstance(obj, Mapping):
            value = obj.get(name)
        else:
            value = getattr(obj, name, None)
        if value is not None:
            return value
    return None


def as_list(value: Any) -> list[Any]:
    """Materialize a sequence-like input; anything else becomes an empty list."""
    if value is None or isinstance(value, (str, bytes, Mapping)):
        return []
    try:
        return list(value)
    except TypeError:
        return []


def is_index(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def non_empty_str(value: Any) -> str | None:
    if isinstance(value, str) and value:
        return value
    return None
