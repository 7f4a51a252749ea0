from __future__ import annotations

"""Position validation and reindexing for ordered items and sections.

Every higher-level operation (reorder, move, merge, lifecycle, import) ends by
calling one of the reindexers in this module, so the post-condition "positions
form exactly 0..n-1" is established in one place.

Performance notes
-----------------
These functions run on every drag/drop and add/remove action. They are
O(n log n) at worst, allocate only the output list, and take explicit fast
paths for empty and single-element inputs.

Examples
--------
    >>> reindex_item_positions([{"id": "b", "position": 5}, {"id": "a", "position": 5}])
    [{'id': 'a', 'position': 0}, {'id': 'b', 'position': 1}]
"""

from dataclasses import dataclass, field
import logging
import math
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from section_toolkit.core.records import get_field, record_id, with_fields

__all__ = [
    "ITEM_POSITION_KEY",
    "SECTION_ORDER_KEY",
    "PositionValidationResult",
    "PositionConflict",
    "PositionConflictReport",
    "SectionFixResult",
    "is_numeric_position",
    "is_valid_position",
    "validate_positions",
    "reindex_item_positions",
    "reindex_section_positions",
    "normalize_positions",
    "auto_correct_positions",
    "detect_position_conflicts",
    "validate_and_fix_sections",
    "next_position",
]

logger = logging.getLogger(__name__)

ITEM_POSITION_KEY = "position"
SECTION_ORDER_KEY = "order"


@dataclass(frozen=True)
class PositionValidationResult:
    """Outcome of :func:`validate_positions`.

    Attributes
    ----------
    is_valid
        True when no invalid and no duplicated positions were found.
    errors
        Human-readable messages, usable directly in logs or notifications.
    duplicates
        Position values that occur more than once.
    invalid
        Distinct position values that are negative, non-integer or non-numeric.
    """

    is_valid: bool = True
    errors: List[str] = field(default_factory=list)
    duplicates: List[Any] = field(default_factory=list)
    invalid: List[Any] = field(default_factory=list)


@dataclass(frozen=True)
class PositionConflict:
    position: Any
    ids: List[str]


@dataclass(frozen=True)
class PositionConflictReport:
    has_conflicts: bool
    conflicts: List[PositionConflict] = field(default_factory=list)


@dataclass(frozen=True)
class SectionFixResult:
    """Validation errors found in a section collection plus its repaired form."""

    is_valid: bool
    errors: List[str]
    fixed_sections: List[Any]


def is_numeric_position(value: Any) -> bool:
    """Return True if *value* is a real number usable as a sort key (not bool, not NaN)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not math.isnan(value)


def is_valid_position(value: Any) -> bool:
    """Return True if *value* is a non-negative integer (``2.0`` counts, ``True`` does not)."""
    if not is_numeric_position(value):
        return False
    if isinstance(value, float) and not value.is_integer():
        return False
    return value >= 0


def _sort_key(record: Any, key: str) -> Tuple[int, float, str]:
    # Non-numeric positions sort after every numeric one instead of raising.
    value = get_field(record, key)
    if is_numeric_position(value):
        return (0, value, record_id(record))
    return (1, 0, record_id(record))


def _count_key(value: Any) -> Tuple[Any, ...]:
    # Untrusted values may be unhashable, and True must not collide with 1.
    if is_numeric_position(value):
        return (0, value)
    return (1, type(value).__name__, repr(value))


def _reindex(records: Optional[Iterable[Any]], key: str) -> List[Any]:
    records = list(records or [])
    if not records:
        return []

    if len(records) == 1:
        only = records[0]
        current = get_field(only, key)
        if type(current) is int and current == 0:
            return [only]
        return [with_fields(only, **{key: 0})]

    ordered = sorted(records, key=lambda r: _sort_key(r, key))
    logger.debug("Reindexed %d records on '%s'", len(ordered), key)
    return [with_fields(record, **{key: index}) for index, record in enumerate(ordered)]


def validate_positions(items: Optional[Sequence[Any]], key: str = ITEM_POSITION_KEY) -> PositionValidationResult:
    """Check a collection's positions for invalid values and duplicates.

    Only ``id`` and the position field (``key``) of each record are read.
    Empty input is trivially valid. Nothing is modified.

    Parameters
    ----------
    items
        Records to inspect.
    key
        Name of the position field; use ``"order"`` for sections.

    Returns
    -------
    PositionValidationResult
    """
    if not items:
        return PositionValidationResult()

    errors: List[str] = []
    invalid: List[Any] = []
    # count key -> (first value seen, occurrences)
    counts: Dict[Tuple[Any, ...], Tuple[Any, int]] = {}

    for item in items:
        pos = get_field(item, key)
        if not is_valid_position(pos) and pos not in invalid:
            invalid.append(pos)
            errors.append(f"Invalid position: {pos} (must be non-negative integer)")
        count_key = _count_key(pos)
        first, count = counts.get(count_key, (pos, 0))
        counts[count_key] = (first, count + 1)

    duplicates: List[Any] = []
    for pos, count in counts.values():
        if count > 1:
            duplicates.append(pos)
            errors.append(f"Duplicate position: {pos} (used {count} times)")

    is_valid = not invalid and not duplicates
    if not is_valid:
        logger.debug("Position validation failed: %s", "; ".join(errors))
    return PositionValidationResult(is_valid=is_valid, errors=errors, duplicates=duplicates, invalid=invalid)


def reindex_item_positions(items: Optional[Iterable[Any]]) -> List[Any]:
    """Return *items* sorted by position (ties by id) with positions ``0..n-1``.

    Output records are shallow copies; the input list and its records are
    never modified.
    """
    return _reindex(items, ITEM_POSITION_KEY)


def reindex_section_positions(sections: Optional[Iterable[Any]]) -> List[Any]:
    """Return *sections* sorted by ``order`` (ties by id) with orders ``0..n-1``.

    Only the section-level ``order`` is rewritten. Items inside each section
    are left as they are; reindex them with :func:`reindex_item_positions`.
    """
    return _reindex(sections, SECTION_ORDER_KEY)


def normalize_positions(items: Optional[Iterable[Any]]) -> List[Any]:
    """Flatten arbitrary positions to canonical ``0..n-1`` form.

    Alias of :func:`reindex_item_positions` for call sites that express
    "canonicalize" rather than "reorder" intent, e.g. after a bulk import.
    """
    return reindex_item_positions(items)


def auto_correct_positions(items: Optional[Sequence[Any]]) -> List[Any]:
    """Give items without a numeric position their array index, then reindex."""
    if not items:
        return []
    with_positions = [
        item if is_numeric_position(get_field(item, ITEM_POSITION_KEY)) else with_fields(item, position=index)
        for index, item in enumerate(items)
    ]
    return reindex_item_positions(with_positions)


def detect_position_conflicts(items: Optional[Sequence[Any]]) -> PositionConflictReport:
    """Group item ids by shared numeric position and report every clash."""
    by_position: Dict[Any, List[str]] = {}
    for item in items or []:
        pos = get_field(item, ITEM_POSITION_KEY)
        if is_numeric_position(pos):
            by_position.setdefault(pos, []).append(record_id(item))

    conflicts = [PositionConflict(position=pos, ids=ids) for pos, ids in by_position.items() if len(ids) > 1]
    return PositionConflictReport(has_conflicts=bool(conflicts), conflicts=conflicts)


def validate_and_fix_sections(sections: Optional[Sequence[Any]]) -> SectionFixResult:
    """Validate section orders and item positions, and return the repaired sections.

    Errors for items are prefixed with ``Section {index} ({id}):`` so they can
    be traced back. The repaired collection has every section's items and the
    section orders reindexed.
    """
    if not sections:
        return SectionFixResult(is_valid=True, errors=[], fixed_sections=[])

    errors: List[str] = list(validate_positions(sections, key=SECTION_ORDER_KEY).errors)
    for index, section in enumerate(sections):
        item_check = validate_positions(get_field(section, "items") or [])
        for error in item_check.errors:
            errors.append(f"Section {index} ({record_id(section)}): {error}")

    fixed = reindex_section_positions(
        [with_fields(s, items=reindex_item_positions(get_field(s, "items"))) for s in sections]
    )
    if errors:
        logger.info("Fixed %d position problem(s) across %d section(s)", len(errors), len(sections))
    return SectionFixResult(is_valid=not errors, errors=errors, fixed_sections=fixed)


def next_position(items: Optional[Sequence[Any]]) -> int:
    """Return the position a newly appended item should receive.

    0 for an empty list, otherwise the largest valid position plus one.
    """
    valid = [int(get_field(i, ITEM_POSITION_KEY)) for i in items or [] if is_valid_position(get_field(i, ITEM_POSITION_KEY))]
    if not valid:
        return 0
    return max(valid) + 1
