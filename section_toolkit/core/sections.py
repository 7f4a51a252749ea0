from __future__ import annotations

"""Section lifecycle: add, rename, delete, plus item add/remove within a section.

Sections are append-only at creation time: a new section always receives
``order = len(sections)``. Existing orders change only when a section is
deleted (survivors are renumbered) or through an explicit reorder/reindex.

These functions do not validate their output; callers run
:func:`~section_toolkit.core.positions.validate_positions` afterwards (the
editing service does).
"""

from enum import Enum
import logging
import uuid
from typing import Any, List, Optional, Sequence

from section_toolkit.core.models import Section
from section_toolkit.core.positions import (
    auto_correct_positions,
    reindex_item_positions,
    reindex_section_positions,
)
from section_toolkit.core.records import get_field, record_id, with_fields

__all__ = [
    "DEFAULT_SECTION_NAME",
    "EmptySectionPolicy",
    "new_id",
    "find_section",
    "add_section",
    "rename_section",
    "delete_section",
    "add_item",
    "remove_item",
    "remove_empty_sections",
]

logger = logging.getLogger(__name__)

DEFAULT_SECTION_NAME = "Untitled Section"


class EmptySectionPolicy(str, Enum):
    """What to do with a section whose last item was moved out."""

    KEEP = "keep"
    REMOVE = "remove"


def new_id() -> str:
    return str(uuid.uuid4())


def find_section(sections: Optional[Sequence[Any]], section_id: str) -> Optional[Any]:
    """Return the section with *section_id*, or None."""
    for section in sections or []:
        if record_id(section) == str(section_id):
            return section
    return None


def add_section(
    sections: Optional[Sequence[Any]],
    name: str = DEFAULT_SECTION_NAME,
    section_id: Optional[str] = None,
) -> List[Any]:
    """Append a new empty section with ``order = len(sections)``.

    Existing sections are returned as-is. The new section is a
    :class:`~section_toolkit.core.models.Section` when the collection already
    holds those, otherwise a plain dict.
    """
    current = list(sections or [])
    section_id = section_id or new_id()
    if current and isinstance(current[-1], Section):
        section: Any = Section(id=section_id, name=name, order=len(current), items=[])
    else:
        section = {"id": section_id, "name": name, "order": len(current), "items": []}
    logger.debug("Added section id=%s order=%d", section_id, len(current))
    return current + [section]


def rename_section(sections: Optional[Sequence[Any]], section_id: str, new_name: str) -> List[Any]:
    """Replace the name of the matching section; unknown ids are a no-op."""
    current = list(sections or [])
    if find_section(current, section_id) is None:
        logger.debug("Rename skipped: section id=%s not found", section_id)
        return current
    return [
        with_fields(s, name=new_name) if record_id(s) == str(section_id) else s
        for s in current
    ]


def delete_section(sections: Optional[Sequence[Any]], section_id: str) -> List[Any]:
    """Remove the matching section and renumber the survivors ``0..n-1``.

    Deleting the last remaining section is allowed.
    """
    survivors = [s for s in sections or [] if record_id(s) != str(section_id)]
    return reindex_section_positions(survivors)


def add_item(sections: Optional[Sequence[Any]], section_id: str, item: Any) -> List[Any]:
    """Append *item* as the last item of the matching section.

    Existing items are repaired first (non-numeric positions take their array
    index, then ``0..n-1``), so the new item always lands at the end.
    """
    result = []
    for section in sections or []:
        if record_id(section) == str(section_id):
            items = auto_correct_positions(get_field(section, "items") or [])
            items.append(with_fields(item, position=len(items)))
            section = with_fields(section, items=items)
        result.append(section)
    return result


def remove_item(sections: Optional[Sequence[Any]], section_id: str, item_id: str) -> List[Any]:
    """Drop the item with *item_id* from the matching section and renumber it."""
    result = []
    for section in sections or []:
        if record_id(section) == str(section_id):
            items = [i for i in get_field(section, "items") or [] if record_id(i) != str(item_id)]
            section = with_fields(section, items=reindex_item_positions(items))
        result.append(section)
    return result


def remove_empty_sections(sections: Optional[Sequence[Any]]) -> List[Any]:
    """Drop sections without items and renumber the rest."""
    kept = [s for s in sections or [] if get_field(s, "items")]
    if len(kept) == len(sections or []):
        return list(sections or [])
    return reindex_section_positions(kept)
