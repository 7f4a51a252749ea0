from __future__ import annotations

"""Data-integrity checks for ids and section names.

Like the position validator, these checks never raise; they collect
human-readable messages for the caller to log, auto-correct or display.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from section_toolkit.core.records import get_field

__all__ = ["IntegrityReport", "validate_item_data", "validate_section_data"]


@dataclass(frozen=True)
class IntegrityReport:
    is_valid: bool
    errors: List[str] = field(default_factory=list)


def _id_errors(records: Sequence[Any], label: str) -> List[str]:
    errors: List[str] = []
    first_seen: Dict[str, int] = {}
    for index, record in enumerate(records):
        value = get_field(record, "id")
        if value in (None, ""):
            errors.append(f"{label} at index {index} is missing an ID")
            continue
        key = str(value)
        if key in first_seen:
            errors.append(f"Duplicate {label.lower()} ID found: {key} at indices {first_seen[key]} and {index}")
        else:
            first_seen[key] = index
    return errors


def validate_item_data(items: Optional[Sequence[Any]]) -> IntegrityReport:
    """Report items with missing or duplicated ids."""
    errors = _id_errors(list(items or []), "Item")
    return IntegrityReport(is_valid=not errors, errors=errors)


def validate_section_data(sections: Optional[Sequence[Any]]) -> IntegrityReport:
    """Report sections with missing/duplicated ids or blank names, and their item problems."""
    sections = list(sections or [])
    errors = _id_errors(sections, "Section")

    for index, section in enumerate(sections):
        name = get_field(section, "name")
        if not isinstance(name, str) or not name.strip():
            errors.append(f"Section at index {index} has empty name")

        item_report = validate_item_data(get_field(section, "items"))
        for error in item_report.errors:
            errors.append(f"Section \"{name or ''}\" (index {index}): {error}")

    return IntegrityReport(is_valid=not errors, errors=errors)
