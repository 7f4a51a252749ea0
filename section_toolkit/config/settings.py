from __future__ import annotations

"""Typed view over the ``editing`` configuration section."""

from dataclasses import dataclass, field
import logging
from typing import Any, Mapping, Optional, Tuple

from section_toolkit.config.manager import ConfigManager
from section_toolkit.core.drag import FLAT_DROPPABLE_ID, SECTION_DROPPABLE_PREFIX
from section_toolkit.core.normalizer import DEFAULT_LIST_SPECS, IMPORTED_SECTION_NAME, ListSpec
from section_toolkit.core.sections import DEFAULT_SECTION_NAME, EmptySectionPolicy

__all__ = ["EditingSettings", "load_editing_settings"]

logger = logging.getLogger(__name__)

DEFAULT_SNAPSHOT_HISTORY = 10


@dataclass(frozen=True)
class EditingSettings:
    """Editing defaults; every field falls back to the built-in value when unset."""

    snapshot_history: int = DEFAULT_SNAPSHOT_HISTORY
    default_section_name: str = DEFAULT_SECTION_NAME
    imported_section_name: str = IMPORTED_SECTION_NAME
    empty_section_policy: EmptySectionPolicy = EmptySectionPolicy.KEEP
    section_droppable_prefix: str = SECTION_DROPPABLE_PREFIX
    flat_droppable_id: str = FLAT_DROPPABLE_ID
    list_specs: Tuple[ListSpec, ...] = field(default=DEFAULT_LIST_SPECS)

    @classmethod
    def from_config(cls, data: Optional[Mapping[str, Any]]) -> "EditingSettings":
        data = data or {}
        droppable = data.get("droppable") or {}
        lists = (data.get("normalizer") or {}).get("lists")

        policy_value = str(data.get("empty_section_policy", EmptySectionPolicy.KEEP.value)).lower()
        try:
            policy = EmptySectionPolicy(policy_value)
        except ValueError:
            logger.warning("Unknown empty_section_policy '%s'; using 'keep'", policy_value)
            policy = EmptySectionPolicy.KEEP

        return cls(
            snapshot_history=int(data.get("snapshot_history", DEFAULT_SNAPSHOT_HISTORY)),
            default_section_name=str(data.get("default_section_name", DEFAULT_SECTION_NAME)),
            imported_section_name=str(data.get("imported_section_name", IMPORTED_SECTION_NAME)),
            empty_section_policy=policy,
            section_droppable_prefix=str(droppable.get("section_prefix", SECTION_DROPPABLE_PREFIX)),
            flat_droppable_id=str(droppable.get("flat_list_id", FLAT_DROPPABLE_ID)),
            list_specs=tuple(ListSpec.from_config(spec) for spec in lists) if lists else DEFAULT_LIST_SPECS,
        )


def load_editing_settings() -> EditingSettings:
    """Build :class:`EditingSettings` from the ``editing`` section of :class:`ConfigManager`."""
    return EditingSettings.from_config(ConfigManager().get_editing_config())
