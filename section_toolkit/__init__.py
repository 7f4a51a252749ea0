"""Top-level package for Section Toolkit.

Ordering and consistency rules for sections of positioned items: position
validation and reindexing, reordering and cross-section moves, last-write-wins
merging, section lifecycle, import normalization and drag error recovery.

Front-ends (UI handlers, API endpoints) should only depend on the public API
exposed here rather than importing internal modules directly.
"""

from .core.exceptions import (  # re-export for convenience
    DragErrorType,
    DragOperationError,
    EmptySourceError,
    PositionIndexError,
    SectionToolkitError,
    StructuralError,
)
from .core.models import Item, Section
from .core.positions import (
    auto_correct_positions,
    detect_position_conflicts,
    normalize_positions,
    reindex_item_positions,
    reindex_section_positions,
    validate_and_fix_sections,
    validate_positions,
)
from .core.reorder import MoveResult, move_between_sections, reorder_sections, reorder_within_section
from .core.conflicts import resolve_position_conflicts, resolve_section_conflicts
from .core.sections import EmptySectionPolicy, add_section, delete_section, rename_section
from .core.transform import flat_to_sections, sections_to_flat
from .core.normalizer import (
    NormalizationResult,
    NormalizationSummary,
    normalize_existing_recipe,
    normalize_recipe_data,
)
from .core.integrity import validate_item_data, validate_section_data
from .core.drag import DropTarget, execute_drag_safely, recover_from_drag_error, validate_drag_destination
from .core.services import OperationResult, SectionEditingService, Snapshot, SnapshotService

__all__: list[str] = [
    "SectionToolkitError",
    "StructuralError",
    "PositionIndexError",
    "EmptySourceError",
    "DragErrorType",
    "DragOperationError",
    "Item",
    "Section",
    "validate_positions",
    "reindex_item_positions",
    "reindex_section_positions",
    "normalize_positions",
    "auto_correct_positions",
    "detect_position_conflicts",
    "validate_and_fix_sections",
    "MoveResult",
    "reorder_within_section",
    "reorder_sections",
    "move_between_sections",
    "resolve_position_conflicts",
    "resolve_section_conflicts",
    "EmptySectionPolicy",
    "add_section",
    "rename_section",
    "delete_section",
    "sections_to_flat",
    "flat_to_sections",
    "NormalizationSummary",
    "NormalizationResult",
    "normalize_recipe_data",
    "normalize_existing_recipe",
    "validate_item_data",
    "validate_section_data",
    "DropTarget",
    "validate_drag_destination",
    "execute_drag_safely",
    "recover_from_drag_error",
    "Snapshot",
    "SnapshotService",
    "OperationResult",
    "SectionEditingService",
]
