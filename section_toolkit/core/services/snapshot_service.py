from __future__ import annotations

"""Point-in-time snapshots used to revert a failed drag gesture.

This service is UI-agnostic and performs pure in-memory history tracking.
Before a risky mutation the caller pushes a snapshot of the collection; if
the mutation fails, the latest snapshot is restored wholesale instead of
attempting a partial rollback.

Design principles
-----------------
- No UI imports and no I/O.
- Snapshots are deep copies taken at push time and are never mutated after.
- Memory usage is bounded: the history is a fixed-capacity deque and the
  oldest snapshot is discarded first.
- Only push, latest, lookup by relative index, clear and count are exposed.
  This is not a general undo stack.
"""

from collections import deque
import copy
from dataclasses import dataclass
import logging
import time
from typing import Any, Deque, List, Literal, Optional, Sequence

from section_toolkit.core.exceptions import StructuralError

__all__ = ["Snapshot", "SnapshotService", "DEFAULT_MAX_SNAPSHOTS"]

logger = logging.getLogger(__name__)

DEFAULT_MAX_SNAPSHOTS = 10

SnapshotMode = Literal["flat", "sectioned"]


@dataclass(frozen=True)
class Snapshot:
    """Immutable copy of the editing state at one point in time.

    Attributes
    ----------
    timestamp
        Unix epoch seconds when the snapshot was taken.
    mode
        ``"flat"`` when the editor works on a single item list,
        ``"sectioned"`` when it works on sections.
    items
        Deep copy of the flat item list, or None.
    sections
        Deep copy of the section list, or None.
    """

    timestamp: float
    mode: SnapshotMode
    items: Optional[List[Any]] = None
    sections: Optional[List[Any]] = None

    def restore_items(self) -> Optional[List[Any]]:
        """Return a fresh copy of the stored items (the snapshot stays reusable)."""
        return copy.deepcopy(self.items) if self.items is not None else None

    def restore_sections(self) -> Optional[List[Any]]:
        """Return a fresh copy of the stored sections."""
        return copy.deepcopy(self.sections) if self.sections is not None else None


class SnapshotService:
    """Bounded history of :class:`Snapshot` records.

    Parameters
    ----------
    max_snapshots : int, default=10
        Capacity of the history. Values below 1 are coerced to 1.

    Examples
    --------
    >>> svc = SnapshotService(max_snapshots=2)
    >>> _ = svc.push(items=[{"id": "a", "position": 0}])
    >>> svc.count()
    1
    """

    def __init__(self, max_snapshots: int = DEFAULT_MAX_SNAPSHOTS) -> None:
        self._max_snapshots: int = max(1, int(max_snapshots))
        self._snapshots: Deque[Snapshot] = deque(maxlen=self._max_snapshots)

    @property
    def max_snapshots(self) -> int:
        return self._max_snapshots

    # --------------------------------------------------------------------- API

    def push(
        self,
        items: Optional[Sequence[Any]] = None,
        sections: Optional[Sequence[Any]] = None,
        mode: SnapshotMode = "flat",
    ) -> Snapshot:
        """Deep-copy the given state and append it to the history.

        When the history is full the oldest snapshot is discarded.
        """
        if mode not in ("flat", "sectioned"):
            raise StructuralError(f"Unsupported snapshot mode '{mode}'")

        snapshot = Snapshot(
            timestamp=time.time(),
            mode=mode,
            items=copy.deepcopy(list(items)) if items is not None else None,
            sections=copy.deepcopy(list(sections)) if sections is not None else None,
        )
        if len(self._snapshots) == self._max_snapshots:
            logger.debug("Snapshot history full (%d); discarding oldest", self._max_snapshots)
        self._snapshots.append(snapshot)
        return snapshot

    def latest(self) -> Optional[Snapshot]:
        """Return the most recent snapshot, or None when the history is empty."""
        return self._snapshots[-1] if self._snapshots else None

    def get(self, index: int) -> Optional[Snapshot]:
        """Return a snapshot by index (0 = oldest, -1 = newest), or None if out of range."""
        if index < 0:
            index = len(self._snapshots) + index
        if 0 <= index < len(self._snapshots):
            return self._snapshots[index]
        return None

    def clear(self) -> None:
        """Forget every stored snapshot."""
        self._snapshots.clear()

    def count(self) -> int:
        """Return the number of stored snapshots."""
        return len(self._snapshots)

    def __len__(self) -> int:
        return len(self._snapshots)
