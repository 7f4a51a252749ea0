from __future__ import annotations

"""Service layer for section and item edits.

This module provides a UI-agnostic, testable service that wraps the pure
ordering primitives for a presentation layer (drag-and-drop handlers, add /
rename / delete buttons) and for the save path of an API boundary.

Scope and guarantees:
- Operates purely in-memory; every call takes the current sections and
  returns an :class:`OperationResult` carrying the new sections. Inputs are
  never modified.
- Expected invalid actions (unknown section, bad drop target, blank name)
  return ``OperationResult(success=False, ...)`` with clear messaging.
- Drag moves are snapshotted first; a structural failure during the move
  restores the latest snapshot wholesale.
- Every successful result is validated; problems are logged and reported in
  ``details["validation_errors"]``.

Examples
--------
Basic usage:

    service = SectionEditingService()
    result = service.add_section(sections, "Sauce")
    if result.success:
        sections = result.sections
"""

from dataclasses import dataclass, field
import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from section_toolkit.config.settings import EditingSettings, load_editing_settings
from section_toolkit.core import sections as lifecycle
from section_toolkit.core.conflicts import resolve_section_conflicts
from section_toolkit.core.drag import (
    DropTarget,
    execute_drag_safely,
    recover_from_drag_error,
    validate_drag_destination,
)
from section_toolkit.core.exceptions import EmptySourceError, PositionIndexError
from section_toolkit.core.integrity import validate_section_data
from section_toolkit.core.normalizer import NormalizationResult, normalize_recipe_data
from section_toolkit.core.positions import SECTION_ORDER_KEY, validate_and_fix_sections, validate_positions
from section_toolkit.core.records import get_field, record_id, with_fields
from section_toolkit.core.reorder import move_between_sections, reorder_sections, reorder_within_section
from section_toolkit.core.sections import EmptySectionPolicy, find_section
from section_toolkit.core.services.snapshot_service import Snapshot, SnapshotService


__all__ = ["OperationResult", "SectionEditingService"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OperationResult:
    """Result of a section editing operation.

    Attributes
    ----------
    success
        Whether the operation completed successfully.
    message
        Human-readable summary suitable for logs or UI display.
    details
        Optional structured details for diagnostics or caller logic.
    sections
        The sections after the operation. On failure these are the input
        sections, or the restored snapshot when a move was reverted.
    """
    success: bool
    message: str
    details: Optional[Dict[str, Any]] = None
    sections: List[Any] = field(default_factory=list)


class SectionEditingService:
    """Encapsulates section and item edit operations.

    Parameters
    ----------
    settings
        Editing defaults; loaded from :class:`~section_toolkit.config.ConfigManager`
        when omitted.
    snapshots
        Snapshot history used to revert failed moves; a new one sized by
        ``settings.snapshot_history`` is created when omitted.
    """

    def __init__(self, settings: Optional[EditingSettings] = None,
                 snapshots: Optional[SnapshotService] = None) -> None:
        self._settings = settings if settings is not None else load_editing_settings()
        self._snapshots = snapshots if snapshots is not None else SnapshotService(self._settings.snapshot_history)

    @property
    def settings(self) -> EditingSettings:
        return self._settings

    @property
    def snapshots(self) -> SnapshotService:
        return self._snapshots

    # -------------------------------------------------------------------------
    # Section lifecycle
    # -------------------------------------------------------------------------

    def add_section(self, sections: Sequence[Any], name: Optional[str] = None,
                    section_id: Optional[str] = None) -> OperationResult:
        """Append a new empty section at the end."""
        name = name if name is not None else self._settings.default_section_name
        logger.info("Edit: add_section name=%s", name)
        if not name.strip():
            logger.warning("Edit FAIL: add_section blank_name")
            return OperationResult(False, "Section name cannot be empty.", {"reason": "blank_name"}, list(sections))

        updated = lifecycle.add_section(sections, name=name, section_id=section_id)
        new_section = updated[-1]
        logger.info("Edit OK: add_section id=%s order=%s", record_id(new_section), get_field(new_section, "order"))
        return self._finish(
            updated,
            f"Added section '{name}'.",
            {"section_id": record_id(new_section), "order": get_field(new_section, "order")},
        )

    def rename_section(self, sections: Sequence[Any], section_id: str, new_name: str) -> OperationResult:
        """Rename a section. An unknown id is a no-op, not a failure.

        Leading and trailing whitespace is stripped; the rest of the name is
        kept as given.
        """
        logger.info("Edit: rename_section section=%s", section_id)
        cleaned = (new_name or "").strip()
        if not cleaned:
            logger.warning("Edit FAIL: rename_section blank_name section=%s", section_id)
            return OperationResult(False, "Section name cannot be empty.", {"section_id": section_id}, list(sections))

        if find_section(sections, section_id) is None:
            logger.info("Edit noop: rename_section section_not_found section=%s", section_id)
            return OperationResult(True, "Section no longer exists; nothing renamed.",
                                   {"section_id": section_id, "changed": False}, list(sections))

        updated = lifecycle.rename_section(sections, section_id, cleaned)
        logger.info("Edit OK: rename_section section=%s", section_id)
        return self._finish(updated, f"Renamed section to '{cleaned}'.",
                            {"section_id": section_id, "new_name": cleaned, "changed": True})

    def delete_section(self, sections: Sequence[Any], section_id: str) -> OperationResult:
        """Delete a section and renumber the remaining ones."""
        logger.info("Edit: delete_section section=%s", section_id)
        if find_section(sections, section_id) is None:
            logger.warning("Edit FAIL: delete_section section_not_found section=%s", section_id)
            return OperationResult(False, f"Section not found for id '{section_id}'.",
                                   {"section_id": section_id}, list(sections))

        updated = lifecycle.delete_section(sections, section_id)
        logger.info("Edit OK: delete_section section=%s remaining=%d", section_id, len(updated))
        return self._finish(updated, "Deleted section.", {"section_id": section_id, "remaining": len(updated)})

    def reorder_sections(self, sections: Sequence[Any], source_index: int, destination_index: int) -> OperationResult:
        """Move a whole section from one index to another."""
        logger.info("Edit: reorder_sections from=%s to=%s", source_index, destination_index)
        try:
            updated = reorder_sections(sections, source_index, destination_index)
        except PositionIndexError as exc:
            logger.warning("Edit FAIL: reorder_sections %s", exc)
            return OperationResult(False, str(exc), {"length": exc.length}, list(sections))
        logger.info("Edit OK: reorder_sections from=%s to=%s", source_index, destination_index)
        return self._finish(updated, "Reordered sections.",
                            {"source_index": source_index, "destination_index": destination_index})

    # -------------------------------------------------------------------------
    # Items
    # -------------------------------------------------------------------------

    def add_item(self, sections: Sequence[Any], section_id: str, item: Any) -> OperationResult:
        """Append *item* to a section at the next free position."""
        logger.info("Edit: add_item section=%s item=%s", section_id, record_id(item))
        if find_section(sections, section_id) is None:
            logger.warning("Edit FAIL: add_item section_not_found section=%s", section_id)
            return OperationResult(False, f"Section not found for id '{section_id}'.",
                                   {"section_id": section_id}, list(sections))

        if record_id(item) == "":
            item = with_fields(item, id=lifecycle.new_id())
        updated = lifecycle.add_item(sections, section_id, item)
        logger.info("Edit OK: add_item section=%s item=%s", section_id, record_id(item))
        return self._finish(updated, "Added item.", {"section_id": section_id, "item_id": record_id(item)})

    def remove_item(self, sections: Sequence[Any], section_id: str, item_id: str) -> OperationResult:
        """Remove an item from a section and renumber the rest."""
        logger.info("Edit: remove_item section=%s item=%s", section_id, item_id)
        section = find_section(sections, section_id)
        if section is None or all(record_id(i) != str(item_id) for i in get_field(section, "items") or []):
            logger.warning("Edit FAIL: remove_item not_found section=%s item=%s", section_id, item_id)
            return OperationResult(False, "Item not found.", {"section_id": section_id, "item_id": item_id},
                                   list(sections))

        updated = lifecycle.remove_item(sections, section_id, item_id)
        logger.info("Edit OK: remove_item section=%s item=%s", section_id, item_id)
        return self._finish(updated, "Removed item.", {"section_id": section_id, "item_id": item_id})

    def reorder_item(self, sections: Sequence[Any], section_id: str,
                     source_index: int, destination_index: int) -> OperationResult:
        """Move an item within one section."""
        logger.info("Edit: reorder_item section=%s from=%s to=%s", section_id, source_index, destination_index)
        section = find_section(sections, section_id)
        if section is None:
            logger.warning("Edit FAIL: reorder_item section_not_found section=%s", section_id)
            return OperationResult(False, f"Section not found for id '{section_id}'.",
                                   {"section_id": section_id}, list(sections))
        try:
            items = reorder_within_section(get_field(section, "items"), source_index, destination_index)
        except PositionIndexError as exc:
            logger.warning("Edit FAIL: reorder_item %s", exc)
            return OperationResult(False, str(exc), {"section_id": section_id, "length": exc.length}, list(sections))

        updated = self._replace_items(sections, {str(section_id): items})
        logger.info("Edit OK: reorder_item section=%s", section_id)
        return self._finish(updated, "Reordered item.",
                            {"section_id": section_id, "source_index": source_index,
                             "destination_index": destination_index})

    def move_item(self, sections: Sequence[Any], from_section_id: str, source_index: int,
                  destination: Optional[Any]) -> OperationResult:
        """Handle a drop of the item at *source_index* of *from_section_id*.

        *destination* is a :class:`~section_toolkit.core.drag.DropTarget`
        (or mapping) naming ``<prefix><section id>`` and an index; None means
        the item was dropped outside any list. Dropping into the same section
        reorders within it. The state is snapshotted before the move and
        restored if the move fails. An emptied source section is handled
        according to ``settings.empty_section_policy``.
        """
        sections = list(sections)
        logger.info("Edit: move_item from=%s index=%s", from_section_id, source_index)

        check = validate_drag_destination(
            destination,
            sections,
            section_prefix=self._settings.section_droppable_prefix,
            flat_list_id=self._settings.flat_droppable_id,
        )
        if not check.is_valid:
            error = check.error
            logger.warning("Edit FAIL: move_item %s context=%s", error.type.value, error.context)
            return OperationResult(False, error.message, {"error_type": error.type.value, **error.context}, sections)

        if isinstance(destination, Mapping):
            destination = DropTarget.from_mapping(destination)
        prefix = self._settings.section_droppable_prefix
        if not destination.droppable_id.startswith(prefix):
            logger.warning("Edit FAIL: move_item not_a_section droppable=%s", destination.droppable_id)
            return OperationResult(
                False,
                "Items can only be dropped into a section",
                {"error_type": "INVALID_DESTINATION", "droppable_id": destination.droppable_id},
                sections,
            )
        to_section_id = destination.droppable_id[len(prefix):]

        if find_section(sections, from_section_id) is None:
            logger.warning("Edit FAIL: move_item source_section_not_found section=%s", from_section_id)
            return OperationResult(False, f"Section not found for id '{from_section_id}'.",
                                   {"section_id": from_section_id}, sections)

        self._snapshots.push(sections=sections, mode="sectioned")
        outcome = execute_drag_safely(
            lambda: self._apply_move(sections, str(from_section_id), to_section_id, source_index, destination.index),
            self._snapshots,
        )
        if not outcome.success:
            restored: List[Any] = []

            def _revert(snapshot: Snapshot) -> None:
                restored.extend(snapshot.restore_sections() or [])

            reverted = recover_from_drag_error(outcome.error, self._snapshots.latest(), _revert)
            logger.warning("Edit FAIL: move_item %s reverted=%s", outcome.error.type.value, reverted)
            return OperationResult(
                False,
                outcome.error.message,
                {"error_type": outcome.error.type.value, "reverted": reverted, **outcome.error.context},
                restored if reverted else sections,
            )

        updated = outcome.result
        details: Dict[str, Any] = {
            "from_section_id": from_section_id,
            "to_section_id": to_section_id,
            "destination_index": destination.index,
            "removed_empty_section": False,
        }
        source_after = find_section(updated, from_section_id)
        if (source_after is not None and not get_field(source_after, "items")
                and self._settings.empty_section_policy is EmptySectionPolicy.REMOVE):
            updated = lifecycle.delete_section(updated, from_section_id)
            details["removed_empty_section"] = True
            logger.info("Edit: move_item removed emptied section=%s", from_section_id)

        logger.info("Edit OK: move_item from=%s to=%s index=%s", from_section_id, to_section_id, destination.index)
        return self._finish(updated, "Moved item.", details)

    # -------------------------------------------------------------------------
    # Integrity, saving and import
    # -------------------------------------------------------------------------

    def check_integrity(self, sections: Sequence[Any]) -> OperationResult:
        """Validate positions, ids and names; auto-correct positions.

        Never blocks the caller: the result is always successful and carries
        the repaired sections plus a one-line summary of what was fixed.
        """
        fix = validate_and_fix_sections(sections)
        data_report = validate_section_data(fix.fixed_sections)
        fixed_count = len(fix.errors)
        if fixed_count:
            message = f"Fixed {fixed_count} position problem{'s' if fixed_count > 1 else ''}."
            logger.info("Integrity: %s", message)
        else:
            message = "No changes needed."
        if not data_report.is_valid:
            logger.warning("Integrity: %d data problem(s): %s", len(data_report.errors), "; ".join(data_report.errors))
        return self._finish(
            fix.fixed_sections,
            message,
            {"position_errors": fix.errors, "data_errors": data_report.errors, "fixed": fixed_count},
        )

    def resolve_save(self, existing_sections: Optional[Sequence[Any]],
                     incoming_sections: Optional[Sequence[Any]]) -> OperationResult:
        """Merge a save request into the stored sections (incoming wins when submitted)."""
        logger.info(
            "Edit: resolve_save existing=%d incoming=%s",
            len(existing_sections or []),
            "none" if incoming_sections is None else len(incoming_sections),
        )
        merged = resolve_section_conflicts(existing_sections, incoming_sections)
        return self._finish(merged, "Resolved sections.", {"used_incoming": incoming_sections is not None})

    def normalize(self, raw: Mapping) -> NormalizationResult:
        """Normalize imported or legacy data with the configured names and lists."""
        return normalize_recipe_data(
            raw,
            imported_section_name=self._settings.imported_section_name,
            list_specs=self._settings.list_specs,
        )

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _apply_move(self, sections: List[Any], from_section_id: str, to_section_id: str,
                    source_index: int, destination_index: int) -> List[Any]:
        source = find_section(sections, from_section_id)
        source_items = get_field(source, "items") or []

        if from_section_id == to_section_id:
            if not source_items:
                raise EmptySourceError(f"Section '{from_section_id}' has no items to move")
            # Appending to the list the item came from lands on its last index.
            target = min(destination_index, len(source_items) - 1)
            items = reorder_within_section(source_items, source_index, target)
            return self._replace_items(sections, {from_section_id: items})

        dest = find_section(sections, to_section_id)
        moved = move_between_sections(source_items, get_field(dest, "items"), source_index, destination_index)
        return self._replace_items(
            sections,
            {from_section_id: moved.source_items, to_section_id: moved.dest_items},
        )

    @staticmethod
    def _replace_items(sections: Sequence[Any], items_by_section: Dict[str, List[Any]]) -> List[Any]:
        return [
            with_fields(s, items=items_by_section[record_id(s)]) if record_id(s) in items_by_section else s
            for s in sections
        ]

    def _finish(self, sections: List[Any], message: str, details: Dict[str, Any]) -> OperationResult:
        errors: List[str] = list(validate_positions(sections, key=SECTION_ORDER_KEY).errors)
        for section in sections:
            for error in validate_positions(get_field(section, "items") or []).errors:
                errors.append(f"Section {record_id(section)}: {error}")
        if errors:
            logger.warning("Validation after edit found %d problem(s): %s", len(errors), "; ".join(errors))
            details = {**details, "validation_errors": errors}
        return OperationResult(True, message, details, sections)
