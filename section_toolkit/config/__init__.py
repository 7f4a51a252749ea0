"""Configuration package for Section Toolkit.

Exposes :class:`ConfigManager`, which loads the packaged YAML defaults and
merges user overrides, plus the typed :class:`EditingSettings` view.
"""

from .manager import ConfigManager  # noqa: F401
from .settings import EditingSettings, load_editing_settings  # noqa: F401

__all__ = ["ConfigManager", "EditingSettings", "load_editing_settings"]
