from __future__ import annotations

"""Last-write-wins merge of persisted and client-submitted collections.

When several people edit the same document, a save request carries the full
state of the scope it touches. That submitted state replaces what is stored:

- ``incoming is None``  -> the caller did not touch this scope, keep ``existing``.
- ``incoming == []``    -> the caller emptied it (e.g. moved every item to
  another section); the result is empty.

Existing records that are absent from ``incoming`` are not spliced back in.
Doing so re-creates items that were legitimately moved to another section.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from section_toolkit.core.positions import reindex_item_positions, reindex_section_positions
from section_toolkit.core.records import get_field, record_id, with_fields

__all__ = ["resolve_position_conflicts", "resolve_section_conflicts"]

logger = logging.getLogger(__name__)


def resolve_position_conflicts(
    existing_items: Optional[Sequence[Any]],
    incoming_items: Optional[Sequence[Any]],
) -> List[Any]:
    """Pick the authoritative item list and reindex it.

    Parameters
    ----------
    existing_items
        Items currently persisted.
    incoming_items
        Items from the save request. ``None`` means "not submitted".

    Returns
    -------
    list
        ``reindex(incoming)`` when submitted, otherwise ``reindex(existing)``.
    """
    if incoming_items is None:
        return reindex_item_positions(existing_items or [])
    return reindex_item_positions(incoming_items)


def resolve_section_conflicts(
    existing_sections: Optional[Sequence[Any]],
    incoming_sections: Optional[Sequence[Any]],
) -> List[Any]:
    """Section-level last-write-wins merge.

    The section list is chosen with the same rule as
    :func:`resolve_position_conflicts`. Each surviving section's items are then
    resolved individually: an incoming section whose ``items`` is missing
    falls back to the items of the stored section with the same id.
    """
    if incoming_sections is None:
        chosen = list(existing_sections or [])
        resolved = [with_fields(s, items=resolve_position_conflicts(get_field(s, "items"), None)) for s in chosen]
        return reindex_section_positions(resolved)

    existing_by_id: Dict[str, Any] = {record_id(s): s for s in existing_sections or []}

    resolved = []
    for section in incoming_sections:
        stored = existing_by_id.get(record_id(section))
        stored_items = get_field(stored, "items") if stored is not None else None
        items = resolve_position_conflicts(stored_items, get_field(section, "items"))
        resolved.append(with_fields(section, items=items))

    dropped = set(existing_by_id) - {record_id(s) for s in incoming_sections}
    if dropped:
        logger.debug("Last write removed %d stored section(s): %s", len(dropped), sorted(dropped))
    return reindex_section_positions(resolved)
