from __future__ import annotations

"""Conversion between the sectioned view and the flat (denormalized) view.

Older consumers read a single flat item list where each item points back to
its section through ``section_id``. The sectioned view stays authoritative;
the flat view is derived from it.
"""

from collections.abc import Mapping
from typing import Any, Callable, Dict, List, Optional, Sequence

from section_toolkit.core.positions import reindex_item_positions
from section_toolkit.core.records import get_field, record_id, with_fields
from section_toolkit.core.sections import DEFAULT_SECTION_NAME, new_id

__all__ = ["sections_to_flat", "flat_to_sections"]


def sections_to_flat(sections: Optional[Sequence[Any]]) -> List[Any]:
    """Flatten *sections* into one list ordered section by section.

    Each output record is a copy tagged with its ``section_id`` and carrying a
    global position ``0..N-1`` across all sections.
    """
    flat: List[Any] = []
    for section in sections or []:
        section_id = record_id(section)
        for item in get_field(section, "items") or []:
            flat.append(with_fields(item, section_id=section_id, position=len(flat)))
    return flat


def _detach(item: Any) -> Any:
    if isinstance(item, Mapping):
        return {k: v for k, v in item.items() if k != "section_id"}
    return with_fields(item, section_id=None)


def flat_to_sections(
    items: Optional[Sequence[Any]],
    default_name: str = DEFAULT_SECTION_NAME,
    id_factory: Callable[[], str] = new_id,
) -> List[Dict[str, Any]]:
    """Group a flat list into sections by ``section_id``.

    Sections appear in the order their first item appears. Items without a
    ``section_id`` are collected into a leading section named *default_name*.
    Item positions are renumbered within each section.
    """
    grouped: Dict[str, List[Any]] = {}
    unsectioned: List[Any] = []
    for item in items or []:
        section_id = get_field(item, "section_id")
        if section_id:
            grouped.setdefault(str(section_id), []).append(_detach(item))
        else:
            unsectioned.append(_detach(item))

    sections: List[Dict[str, Any]] = []
    if unsectioned:
        sections.append({"id": id_factory(), "name": default_name, "items": unsectioned})
    for section_id, members in grouped.items():
        sections.append({"id": section_id, "name": default_name, "items": members})

    return [
        {**section, "order": index, "items": reindex_item_positions(section["items"])}
        for index, section in enumerate(sections)
    ]
