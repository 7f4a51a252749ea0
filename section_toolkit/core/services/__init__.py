"""Service layer for Section Toolkit.

Services wrap the pure ordering functions with snapshotting, logging and
user-facing result objects. They hold no UI state.
"""

from .snapshot_service import Snapshot, SnapshotService  # noqa: F401
from .section_editing_service import OperationResult, SectionEditingService  # noqa: F401

__all__ = [
    "Snapshot",
    "SnapshotService",
    "OperationResult",
    "SectionEditingService",
]
