"""Configuration management - settings, INI file and path utilities.

This package provides:
- Settings: Immutable runtime settings passed into the validator
- ConfigManager: INI settings file loader (from manager.py)
- Paths: Path constants and utilities (from paths.py)
"""

from kubeschema.config.manager import ConfigManager
from kubeschema.config.paths import Paths
from kubeschema.config.settings import CacheSettings, NetworkSettings, Settings

__all__ = [
    "CacheSettings",
    "ConfigManager",
    "NetworkSettings",
    "Paths",
    "Settings",
]
