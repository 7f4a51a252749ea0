"""Shared fixtures for Section Toolkit tests.

Every test runs against a fresh :class:`ConfigManager` whose user override
directory points to an empty temporary folder, so results never depend on
``~/.section_toolkit`` of the machine running them.
"""

import logging
import sys
from pathlib import Path

import pytest

# Add project root (package) and this directory (helpers) to path
sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent))

from section_toolkit.config import ConfigManager
from helpers import make_section


logging.basicConfig(
    level=logging.DEBUG,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


@pytest.fixture
def user_config_dir(tmp_path):
    """Empty user override directory."""
    path = tmp_path / "config"
    path.mkdir()
    return path


@pytest.fixture(autouse=True)
def isolated_config(user_config_dir, monkeypatch):
    monkeypatch.setenv("SECTION_TOOLKIT_CONFIG_DIR", str(user_config_dir))
    ConfigManager.reset_instance()
    yield
    ConfigManager.reset_instance()


@pytest.fixture
def two_sections():
    """Section A holds a, b, c and section B holds x, y."""
    return [
        make_section("A", 0, ["a", "b", "c"]),
        make_section("B", 1, ["x", "y"]),
    ]
