from __future__ import annotations

"""Exception classes for section and item ordering operations.

Two families are raised by this package:

- Structural errors: precondition violations such as out-of-range indices or
  an empty source list. These are programmer errors and are never retried.
- Drag errors: failures classified from untrusted drag-and-drop gesture data
  (missing drop target, unknown section, out-of-range drop index).

Data-integrity problems (duplicate positions, empty names, missing ids) are
never raised; they are reported by the validators as structured results.
"""

from enum import Enum
from typing import Any, Dict, Optional

__all__ = [
    "SectionToolkitError",
    "StructuralError",
    "PositionIndexError",
    "EmptySourceError",
    "DragErrorType",
    "DragOperationError",
]


class SectionToolkitError(Exception):
    """Base exception for all section toolkit errors."""

    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause


class StructuralError(SectionToolkitError, ValueError):
    """Raised when an operation is called with arguments that break its preconditions."""
    pass


class PositionIndexError(StructuralError, IndexError):
    """Raised when a source or destination index is outside the allowed range.

    Attributes
    ----------
    source_index
        Index the item was taken from, if relevant.
    destination_index
        Index the item was going to, if relevant.
    length
        Length of the collection the offending index refers to.
    """

    def __init__(self, message: str, source_index: Optional[int] = None,
                 destination_index: Optional[int] = None,
                 length: Optional[int] = None) -> None:
        super().__init__(message)
        self.source_index = source_index
        self.destination_index = destination_index
        self.length = length


class EmptySourceError(StructuralError):
    """Raised when an item must be taken from a list that has none."""
    pass


class DragErrorType(str, Enum):
    """Classification of drag-and-drop failures."""

    INVALID_DESTINATION = "INVALID_DESTINATION"
    POSITION_CONFLICT = "POSITION_CONFLICT"
    MISSING_SECTION = "MISSING_SECTION"
    INVALID_INDEX = "INVALID_INDEX"
    DATA_CORRUPTION = "DATA_CORRUPTION"
    SAVE_FAILURE = "SAVE_FAILURE"


class DragOperationError(SectionToolkitError):
    """Drag operation failure with the context needed for messaging and logs."""

    def __init__(self, type: DragErrorType, message: str,
                 context: Optional[Dict[str, Any]] = None,
                 cause: Optional[Exception] = None) -> None:
        super().__init__(message, cause)
        self.type = type
        self.context = dict(context or {})

    def __str__(self) -> str:
        return f"[{self.type.value}] {super().__str__()}"
