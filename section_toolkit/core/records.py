from __future__ import annotations

"""Field access helpers shared by the ordering primitives.

The primitives accept two record flavours: plain mappings (as deserialized
from JSON) and dataclass instances such as :class:`~section_toolkit.core.models.Item`.
Reads go through :func:`get_field` and copies through :func:`with_fields`, so
callers never have to convert their records first.
"""

import dataclasses
from collections.abc import Mapping
from typing import Any

__all__ = ["get_field", "with_fields", "record_id"]


def get_field(record: Any, name: str, default: Any = None) -> Any:
    """Return field *name* of *record*, or *default* when it is absent."""
    if isinstance(record, Mapping):
        return record.get(name, default)
    return getattr(record, name, default)


def with_fields(record: Any, **changes: Any) -> Any:
    """Return a shallow copy of *record* with *changes* applied.

    Mappings become new dicts; dataclass instances go through
    :func:`dataclasses.replace`. The input record is never modified.
    """
    if isinstance(record, Mapping):
        copied = dict(record)
        copied.update(changes)
        return copied
    if dataclasses.is_dataclass(record) and not isinstance(record, type):
        return dataclasses.replace(record, **changes)
    raise TypeError(
        f"Unsupported record type {type(record).__name__!r}; expected a mapping or dataclass"
    )


def record_id(record: Any) -> str:
    """Return the record id as a string ('' when missing), used for tie-breaks."""
    value = get_field(record, "id")
    return "" if value is None else str(value)
