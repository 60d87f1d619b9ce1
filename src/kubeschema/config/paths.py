"""Path constants and utilities for kubeschema configuration."""

import os
from pathlib import Path

from kubeschema.constants import ENV_CONFIG_DIR, SETTINGS_FILENAME


class Paths:
    """Application paths and directory structure."""

    HOME_DIR = Path.home()
    CONFIG_DIR = HOME_DIR / ".config" / "kubeschema"
    CACHE_DIR = HOME_DIR / ".cache" / "kubeschema" / "schemas"
    LOGS_DIR = CONFIG_DIR / "logs"

    @classmethod
    def config_dir(cls) -> Path:
        """Return the configuration directory.

        ``KUBESCHEMA_CONFIG_DIR`` overrides the default location.
        """
        env_dir = os.getenv(ENV_CONFIG_DIR)
        if env_dir:
            return cls.expand_path(env_dir)
        return cls.CONFIG_DIR

    @classmethod
    def settings_file(cls, config_dir: Path | None = None) -> Path:
        """Return the path of the INI settings file."""
        return (config_dir or cls.config_dir()) / SETTINGS_FILENAME

    @classmethod
    def expand_path(cls, path_str: str | Path) -> Path:
        """Expand ``~`` and environment variables, resolve to absolute.

        Args:
            path_str: Path string from configuration

        Returns:
            Absolute path

        """
        expanded = os.path.expandvars(str(path_str))
        return Path(expanded).expanduser().resolve()
