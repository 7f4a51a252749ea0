from __future__ import annotations

"""Normalization of imported and legacy recipe-like data.

Data scraped from third-party sites and data persisted by older versions go
through the same pass, so there are exactly two states: normalized and not yet
normalized. The pass is idempotent; running it on normalized data reports no
changes and returns an equal structure.

Rules, applied to each configured list pair independently:

1. Missing or blank section names become ``"Imported Section"``.
2. Sections left without items are dropped.
3. Surviving sections are numbered ``0..n-1`` in array order.
4. Items whose text field is blank are dropped.
5. Items and sections without an id get a generated one.
6. Items without a numeric position get their index, then the list is
   sorted and reindexed so no gaps remain.
7. The flat view is kept alongside the sections: an explicit empty flat list
   next to sections means "sections only" and is preserved; a missing flat
   key is rebuilt from the sections.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from section_toolkit.core.positions import is_numeric_position, reindex_item_positions
from section_toolkit.core.sections import new_id
from section_toolkit.core.transform import sections_to_flat

__all__ = [
    "IMPORTED_SECTION_NAME",
    "ListSpec",
    "INGREDIENT_LISTS",
    "INSTRUCTION_LISTS",
    "DEFAULT_LIST_SPECS",
    "NormalizationSummary",
    "NormalizationResult",
    "normalize_recipe_data",
    "normalize_existing_recipe",
]

logger = logging.getLogger(__name__)

IMPORTED_SECTION_NAME = "Imported Section"


@dataclass(frozen=True)
class ListSpec:
    """Where a flat list and its sectioned counterpart live in a record.

    Attributes
    ----------
    flat_key
        Key of the flat (denormalized) item list.
    sections_key
        Key of the section list.
    text_field
        Item field that must be non-blank for the item to be kept.
    """

    flat_key: str
    sections_key: str
    text_field: str

    @classmethod
    def from_config(cls, data: Mapping) -> "ListSpec":
        return cls(
            flat_key=str(data["flat_key"]),
            sections_key=str(data["sections_key"]),
            text_field=str(data["text_field"]),
        )


INGREDIENT_LISTS = ListSpec(flat_key="ingredients", sections_key="ingredient_sections", text_field="name")
INSTRUCTION_LISTS = ListSpec(flat_key="instructions", sections_key="instruction_sections", text_field="content")
DEFAULT_LIST_SPECS: Tuple[ListSpec, ...] = (INGREDIENT_LISTS, INSTRUCTION_LISTS)


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'s' if count > 1 else ''}"


@dataclass
class NormalizationSummary:
    """Counts of every change made during normalization."""

    sections_renamed: int = 0
    sections_flattened: int = 0
    items_dropped: int = 0
    ids_generated: int = 0
    positions_assigned: int = 0

    @property
    def total(self) -> int:
        return (
            self.sections_renamed
            + self.sections_flattened
            + self.items_dropped
            + self.ids_generated
            + self.positions_assigned
        )

    @property
    def has_changes(self) -> bool:
        return self.total > 0

    def format(self) -> str:
        """Return a one-line, user-facing description of the fixes.

        >>> NormalizationSummary(sections_flattened=2, items_dropped=1).format()
        'Fixed: removed 2 empty sections, dropped 1 empty item'
        """
        messages: List[str] = []
        if self.sections_flattened:
            messages.append(f"removed {_plural(self.sections_flattened, 'empty section')}")
        if self.sections_renamed:
            messages.append(f"renamed {_plural(self.sections_renamed, 'section')}")
        if self.items_dropped:
            messages.append(f"dropped {_plural(self.items_dropped, 'empty item')}")
        if self.ids_generated:
            messages.append(f"generated {_plural(self.ids_generated, 'ID')}")
        if self.positions_assigned:
            messages.append(f"assigned {_plural(self.positions_assigned, 'position')}")
        if not messages:
            return "No changes needed"
        return f"Fixed: {', '.join(messages)}"


@dataclass(frozen=True)
class NormalizationResult:
    data: Dict[str, Any]
    summary: NormalizationSummary = field(default_factory=NormalizationSummary)


class _NormalizationPass:
    """State shared by one normalization run (counters and id generation)."""

    def __init__(self, summary: NormalizationSummary, id_factory: Callable[[], str],
                 imported_section_name: str) -> None:
        self.summary = summary
        self.id_factory = id_factory
        self.imported_section_name = imported_section_name

    def _ensure_id(self, record: Dict[str, Any]) -> None:
        if record.get("id") in (None, ""):
            record["id"] = self.id_factory()
            self.summary.ids_generated += 1

    def items(self, items: Any, text_field: str) -> List[Dict[str, Any]]:
        kept: List[Dict[str, Any]] = []
        for item in items if isinstance(items, list) else []:
            text = item.get(text_field) if isinstance(item, Mapping) else None
            text = text.strip() if isinstance(text, str) else ""
            if not text:
                self.summary.items_dropped += 1
                continue

            record = dict(item)
            record[text_field] = text
            self._ensure_id(record)
            if not is_numeric_position(record.get("position")):
                record["position"] = len(kept)
                self.summary.positions_assigned += 1
            kept.append(record)
        return reindex_item_positions(kept)

    def sections(self, sections: Any, text_field: str) -> List[Dict[str, Any]]:
        normalized: List[Dict[str, Any]] = []
        for section in sections if isinstance(sections, list) else []:
            if not isinstance(section, Mapping):
                self.summary.sections_flattened += 1
                continue

            items = self.items(section.get("items"), text_field)
            if not items:
                self.summary.sections_flattened += 1
                continue

            record = dict(section)
            name = record.get("name")
            name = name.strip() if isinstance(name, str) else ""
            if not name:
                name = self.imported_section_name
                self.summary.sections_renamed += 1
            record["name"] = name
            record["items"] = items
            self._ensure_id(record)
            if not is_numeric_position(record.get("order")):
                self.summary.positions_assigned += 1
            normalized.append(record)

        return [{**section, "order": index} for index, section in enumerate(normalized)]

    def list_pair(self, raw: Mapping, spec: ListSpec) -> Tuple[List[Dict[str, Any]], List[Any]]:
        raw_sections = raw.get(spec.sections_key)
        has_raw_sections = isinstance(raw_sections, list) and len(raw_sections) > 0
        flat_provided = isinstance(raw.get(spec.flat_key), list)

        sections = self.sections(raw_sections, spec.text_field)

        if has_raw_sections and flat_provided:
            # Explicit flat list next to sections: an empty one means sections-only mode.
            flat = self.items(raw[spec.flat_key], spec.text_field)
        elif sections:
            flat = sections_to_flat(sections)
        elif flat_provided:
            flat = self.items(raw[spec.flat_key], spec.text_field)
        else:
            flat = []
        return sections, flat


def normalize_recipe_data(
    raw: Mapping,
    summary: Optional[NormalizationSummary] = None,
    *,
    id_factory: Optional[Callable[[], str]] = None,
    imported_section_name: str = IMPORTED_SECTION_NAME,
    list_specs: Sequence[ListSpec] = DEFAULT_LIST_SPECS,
) -> NormalizationResult:
    """Normalize recipe-like data from an import or from storage.

    Parameters
    ----------
    raw
        Untrusted record. Keys other than the configured list keys pass
        through untouched; the input is never modified.
    summary
        Optional summary to accumulate into (useful across several records).
    id_factory
        Callable producing new ids; defaults to UUID4 strings.
    imported_section_name
        Name given to sections whose name is missing or blank.
    list_specs
        Which flat/sectioned list pairs to normalize.

    Returns
    -------
    NormalizationResult
        The normalized record and the change counts.
    """
    summary = summary if summary is not None else NormalizationSummary()
    run = _NormalizationPass(summary, id_factory or new_id, imported_section_name)

    data: Dict[str, Any] = dict(raw)
    for spec in list_specs:
        sections, flat = run.list_pair(raw, spec)
        data[spec.sections_key] = sections
        data[spec.flat_key] = flat

    if summary.has_changes:
        logger.info("Normalized recipe data: %s", summary.format())
    else:
        logger.debug("Normalized recipe data: no changes needed")
    return NormalizationResult(data=data, summary=summary)


def normalize_existing_recipe(
    raw: Mapping,
    summary: Optional[NormalizationSummary] = None,
    **options: Any,
) -> NormalizationResult:
    """Normalize a persisted record with exactly the rules used for imports."""
    return normalize_recipe_data(raw, summary, **options)
