from __future__ import annotations

"""Typed records for ordered items and named sections.

This module is intentionally free of I/O so that the contained objects can be
reused in any context (unit-tests, API handlers, importers). The ordering
primitives work on these dataclasses and on plain dicts alike.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from section_toolkit.core.positions import is_numeric_position

__all__ = ["Item", "Section"]


def _position_or_zero(value: Any) -> int:
    # Stored data may carry None or junk; reindexing fixes the order later.
    return int(value) if is_numeric_position(value) else 0


@dataclass(frozen=True)
class Item:
    """A single positioned record (an ingredient line or an instruction step).

    Attributes
    ----------
    id
        Opaque identifier, stable across edits.
    position
        Order within the containing list; unique and contiguous after any
        ordering operation.
    payload
        Domain fields carried through unchanged (name, amount, content...).
    section_id
        Back-reference used only in flattened representations.
    """

    id: str
    position: int
    payload: Dict[str, Any] = field(default_factory=dict)
    section_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = dict(self.payload)
        data["id"] = self.id
        data["position"] = self.position
        if self.section_id is not None:
            data["section_id"] = self.section_id
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Item":
        payload = {k: v for k, v in data.items() if k not in ("id", "position", "section_id")}
        return cls(
            id=str(data["id"]),
            position=_position_or_zero(data.get("position")),
            payload=payload,
            section_id=data.get("section_id"),
        )


@dataclass(frozen=True)
class Section:
    """A named, ordered group of items."""

    id: str
    name: str
    order: int
    items: List[Any] = field(default_factory=list)

    def is_empty(self) -> bool:
        """Return True if the section holds no items."""
        return len(self.items) == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "order": self.order,
            "items": [i.to_dict() if isinstance(i, Item) else dict(i) for i in self.items],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Section":
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", "")),
            order=_position_or_zero(data.get("order")),
            items=[Item.from_dict(i) for i in data.get("items", [])],
        )
