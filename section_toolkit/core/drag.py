from __future__ import annotations

"""Drop-target validation and recovery for drag-and-drop gestures.

Gesture data comes from the UI and is untrusted, so drop targets are checked
here before any reorder/move primitive runs. Failures are classified with
:class:`~section_toolkit.core.exceptions.DragErrorType` and carry enough
context (attempted index, section id, collection length) for precise
messaging. A failed operation is recovered by reverting to the latest
snapshot taken before it.
"""

from collections.abc import Mapping
from dataclasses import dataclass
import logging
from typing import TYPE_CHECKING, Any, Callable, Dict, Generic, Optional, Sequence, Tuple, TypeVar

from section_toolkit.core.exceptions import DragErrorType, DragOperationError, SectionToolkitError
from section_toolkit.core.records import get_field
from section_toolkit.core.sections import find_section

if TYPE_CHECKING:
    # Import only for type checking to avoid a circular import with the services package
    from section_toolkit.core.services.snapshot_service import Snapshot, SnapshotService

__all__ = [
    "SECTION_DROPPABLE_PREFIX",
    "FLAT_DROPPABLE_ID",
    "DropTarget",
    "DragValidationResult",
    "DragOutcome",
    "validate_drag_destination",
    "describe_drag_error",
    "execute_drag_safely",
    "recover_from_drag_error",
]

logger = logging.getLogger(__name__)

SECTION_DROPPABLE_PREFIX = "section-"
FLAT_DROPPABLE_ID = "flat-items"

T = TypeVar("T")

_ERROR_MESSAGES: Dict[DragErrorType, Tuple[str, str]] = {
    DragErrorType.INVALID_DESTINATION: (
        "Invalid Drop Location",
        "Please drop the item in a valid area.",
    ),
    DragErrorType.POSITION_CONFLICT: (
        "Position Conflict Detected",
        "Item positions have been automatically corrected.",
    ),
    DragErrorType.MISSING_SECTION: (
        "Section Not Found",
        "The target section could not be found. Please try again.",
    ),
    DragErrorType.INVALID_INDEX: (
        "Invalid Position",
        "The drop position is invalid. Please try again.",
    ),
    DragErrorType.DATA_CORRUPTION: (
        "Data Error",
        "An error occurred with the item data. Changes have been reverted.",
    ),
    DragErrorType.SAVE_FAILURE: (
        "Save Failed",
        "Failed to save changes. Please try again.",
    ),
}


@dataclass(frozen=True)
class DropTarget:
    """Where a dragged item was released: a droppable list id and an index in it."""

    droppable_id: str
    index: int

    @classmethod
    def from_mapping(cls, data: Mapping) -> "DropTarget":
        droppable_id = data.get("droppable_id", data.get("droppableId", ""))
        return cls(droppable_id=str(droppable_id), index=data.get("index"))

    @classmethod
    def for_section(cls, section_id: str, index: int,
                    prefix: str = SECTION_DROPPABLE_PREFIX) -> "DropTarget":
        return cls(droppable_id=f"{prefix}{section_id}", index=index)


@dataclass(frozen=True)
class DragValidationResult:
    is_valid: bool
    error: Optional[DragOperationError] = None


@dataclass(frozen=True)
class DragOutcome(Generic[T]):
    success: bool
    result: Optional[T] = None
    error: Optional[DragOperationError] = None


def _invalid(type: DragErrorType, message: str, **context: Any) -> DragValidationResult:
    return DragValidationResult(is_valid=False, error=DragOperationError(type, message, context))


def validate_drag_destination(
    destination: Optional[Any],
    sections: Optional[Sequence[Any]] = None,
    flat_items: Optional[Sequence[Any]] = None,
    *,
    section_prefix: str = SECTION_DROPPABLE_PREFIX,
    flat_list_id: str = FLAT_DROPPABLE_ID,
) -> DragValidationResult:
    """Check that a drop target exists and that its index is in range.

    Parameters
    ----------
    destination
        A :class:`DropTarget`, a mapping with ``droppable_id``/``index``, or
        None when the item was released outside any drop zone.
    sections
        Current sections; enables the checks for ``section-<id>`` targets.
    flat_items
        Current flat list; enables the check for the flat list target.

    Returns
    -------
    DragValidationResult
        ``is_valid`` plus a classified :class:`DragOperationError` on failure.
        An index equal to the target length is valid (append).
    """
    if destination is None:
        return _invalid(
            DragErrorType.INVALID_DESTINATION,
            "Item was dropped outside a valid drop zone",
            destination=None,
        )
    if isinstance(destination, Mapping):
        destination = DropTarget.from_mapping(destination)

    index = destination.index
    if not isinstance(index, int) or isinstance(index, bool) or index < 0:
        return _invalid(DragErrorType.INVALID_INDEX, "Invalid drop index", index=index)

    droppable_id = destination.droppable_id or ""
    if sections is not None and droppable_id.startswith(section_prefix):
        section_id = droppable_id[len(section_prefix):]
        section = find_section(sections, section_id)
        if section is None:
            return _invalid(
                DragErrorType.MISSING_SECTION,
                "Target section not found",
                section_id=section_id,
                droppable_id=droppable_id,
            )
        section_length = len(get_field(section, "items") or [])
        if index > section_length:
            return _invalid(
                DragErrorType.INVALID_INDEX,
                "Drop index exceeds section length",
                index=index,
                section_length=section_length,
                section_id=section_id,
            )

    if flat_items is not None and droppable_id == flat_list_id and index > len(flat_items):
        return _invalid(
            DragErrorType.INVALID_INDEX,
            "Drop index exceeds list length",
            index=index,
            list_length=len(flat_items),
        )

    return DragValidationResult(is_valid=True)


def describe_drag_error(error: DragOperationError) -> Tuple[str, str]:
    """Return a (title, description) pair suitable for a user notification."""
    return _ERROR_MESSAGES.get(
        error.type,
        ("Operation Failed", error.message or "An unexpected error occurred."),
    )


def execute_drag_safely(
    operation: Callable[[], T],
    snapshots: SnapshotService,
    on_error: Optional[Callable[[DragOperationError], None]] = None,
) -> DragOutcome[T]:
    """Run *operation* and turn its failure into a classified :class:`DragOutcome`.

    Toolkit errors and lookup/type/value errors raised by the operation are
    wrapped as ``DATA_CORRUPTION`` unless they already are drag errors. The
    error is logged and passed to *on_error*; reverting is left to the handler
    (see :func:`recover_from_drag_error` and ``snapshots.latest()``).
    """
    try:
        return DragOutcome(success=True, result=operation())
    except DragOperationError as exc:
        error = exc
    except (SectionToolkitError, LookupError, TypeError, ValueError) as exc:
        error = DragOperationError(
            DragErrorType.DATA_CORRUPTION,
            str(exc) or "Unknown error occurred",
            {"original_error": type(exc).__name__},
            cause=exc,
        )

    logger.error(
        "Drag operation error: type=%s message=%s context=%s snapshots=%d",
        error.type.value, error.message, error.context, snapshots.count(),
    )
    if on_error is not None:
        on_error(error)
    return DragOutcome(success=False, error=error)


def recover_from_drag_error(
    error: DragOperationError,
    snapshot: Optional[Snapshot],
    on_revert: Callable[[Snapshot], None],
) -> bool:
    """Report *error* and revert to *snapshot* when there is one.

    Returns True if the revert callback was invoked.
    """
    title, description = describe_drag_error(error)
    logger.warning("%s: %s (%s)", title, description, error.message)

    if snapshot is None:
        logger.warning("No snapshot available for recovery")
        return False

    on_revert(snapshot)
    logger.info("Reverted to snapshot taken at %.3f", snapshot.timestamp)
    return True
