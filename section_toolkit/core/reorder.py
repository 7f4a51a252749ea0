from __future__ import annotations

"""Reordering within one list and moving items between lists.

Both operations copy before transforming: the caller's lists and records are
never modified, which keeps earlier snapshots safe to restore.
"""

import logging
from typing import Any, List, NamedTuple, Optional, Sequence

from section_toolkit.core.exceptions import EmptySourceError, PositionIndexError
from section_toolkit.core.positions import ITEM_POSITION_KEY, SECTION_ORDER_KEY
from section_toolkit.core.records import with_fields

__all__ = ["MoveResult", "reorder_within_section", "reorder_sections", "move_between_sections"]

logger = logging.getLogger(__name__)


class MoveResult(NamedTuple):
    """Source and destination lists after a cross-section move."""

    source_items: List[Any]
    dest_items: List[Any]


def _is_index(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _assign(records: Sequence[Any], key: str) -> List[Any]:
    return [with_fields(record, **{key: index}) for index, record in enumerate(records)]


def _reorder(records: Sequence[Any], source_index: int, destination_index: int, key: str) -> List[Any]:
    length = len(records)
    if not (_is_index(source_index) and 0 <= source_index < length
            and _is_index(destination_index) and 0 <= destination_index < length):
        raise PositionIndexError(
            f"Invalid indices: source_index={source_index}, "
            f"destination_index={destination_index}, length={length}",
            source_index=source_index,
            destination_index=destination_index,
            length=length,
        )

    if source_index == destination_index:
        return list(records)

    result = list(records)
    moved = result.pop(source_index)
    result.insert(destination_index, moved)
    return _assign(result, key)


def reorder_within_section(items: Optional[Sequence[Any]], source_index: int, destination_index: int) -> List[Any]:
    """Move the item at *source_index* to *destination_index* and renumber.

    The item is removed first, so indices after the removal point shift down
    by one before insertion. Positions of the result are ``0..n-1`` in the
    new order. Equal indices return the records unchanged.

    Raises
    ------
    PositionIndexError
        If either index is outside ``[0, len(items))``.

    Examples
    --------
    >>> items = [{"id": "a", "position": 0}, {"id": "b", "position": 1}, {"id": "c", "position": 2}]
    >>> [i["id"] for i in reorder_within_section(items, 0, 2)]
    ['b', 'c', 'a']
    """
    return _reorder(list(items or []), source_index, destination_index, ITEM_POSITION_KEY)


def reorder_sections(sections: Optional[Sequence[Any]], source_index: int, destination_index: int) -> List[Any]:
    """Section-level counterpart of :func:`reorder_within_section`, rewriting ``order``."""
    return _reorder(list(sections or []), source_index, destination_index, SECTION_ORDER_KEY)


def move_between_sections(
    source_items: Optional[Sequence[Any]],
    dest_items: Optional[Sequence[Any]],
    source_index: int,
    destination_index: int,
) -> MoveResult:
    """Take the item at *source_index* out of one list and insert it into another.

    *destination_index* may equal ``len(dest_items)``, meaning "append". The
    moved record keeps all of its fields except the position, and both lists
    are renumbered ``0..n-1``. Moving the last item out leaves the source list
    empty; deciding what happens to an emptied section is up to the caller.

    Raises
    ------
    EmptySourceError
        If *source_items* is empty.
    PositionIndexError
        If *source_index* is outside ``[0, len(source_items))`` or
        *destination_index* is outside ``[0, len(dest_items)]``.
    """
    source = list(source_items or [])
    dest = list(dest_items or [])

    if not source:
        raise EmptySourceError("Source items list is empty")

    if not (_is_index(source_index) and 0 <= source_index < len(source)):
        raise PositionIndexError(
            f"Invalid source index: {source_index}, length={len(source)}",
            source_index=source_index,
            length=len(source),
        )

    if not (_is_index(destination_index) and 0 <= destination_index <= len(dest)):
        raise PositionIndexError(
            f"Invalid destination index: {destination_index}, max allowed={len(dest)}",
            destination_index=destination_index,
            length=len(dest),
        )

    moved = source.pop(source_index)
    dest.insert(destination_index, moved)
    logger.debug(
        "Moved item from index %d to index %d (source now %d, destination now %d)",
        source_index, destination_index, len(source), len(dest),
    )
    return MoveResult(source_items=_assign(source, ITEM_POSITION_KEY), dest_items=_assign(dest, ITEM_POSITION_KEY))
