"""Shared fixtures for config module tests.

- config_dir: Temporary configuration directory
- config_manager: ConfigManager instance for testing
- write_settings: Helper writing a settings file into config_dir
"""

from pathlib import Path

import pytest

from kubeschema.config import ConfigManager


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    """Provide a temporary config directory for ConfigManager."""
    config_dir = tmp_path / "settings"
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def config_manager(config_dir: Path) -> ConfigManager:
    """Provide a ConfigManager reading from the temporary directory."""
    return ConfigManager(config_dir)


@pytest.fixture
def write_settings(config_manager: ConfigManager):
    """Return a function writing INI content to the settings file."""

    def _write(content: str) -> Path:
        config_manager.settings_file.write_text(content, encoding="utf-8")
        return config_manager.settings_file

    return _write
