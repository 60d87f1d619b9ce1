"""INI settings file management.

The settings file is optional. Values it holds sit between built-in
defaults and command-line flags; environment variables are applied last
by ``Settings.resolve_base_url`` and ``Settings.resolve_kubernetes_version``.
"""

import configparser
from datetime import UTC, datetime
from pathlib import Path

from kubeschema.config.paths import Paths
from kubeschema.config.settings import CacheSettings, NetworkSettings, Settings
from kubeschema.constants import (
    DEFAULT_CACHE_TTL_HOURS,
    DEFAULT_CONSOLE_LOG_LEVEL,
    DEFAULT_KUBERNETES_VERSION,
    DEFAULT_MAX_CONCURRENCY,
    DEFAULT_RETRY_ATTEMPTS,
    DEFAULT_SCHEMA_LOCATION,
    DEFAULT_TIMEOUT_SECONDS,
    KEY_CONSOLE_LOG_LEVEL,
    KEY_KUBERNETES_VERSION,
    KEY_MAX_CONCURRENCY,
    KEY_SCHEMA_LOCATION,
    SECTION_CACHE,
    SECTION_DEFAULT,
    SECTION_NETWORK,
)
from kubeschema.exceptions import ConfigurationError
from kubeschema.logger import get_logger

logger = get_logger(__name__)

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _strip_inline_comment(value: str) -> str:
    """Strip inline comments from configuration values.

    Args:
        value: Configuration value that may contain inline comment

    Returns:
        Value with inline comment removed (anything after '  #')

    """
    if "  #" in value:
        return value.split("  #")[0].strip()
    return value.strip()


class ConfigManager:
    """Loads and writes the kubeschema INI settings file."""

    def __init__(self, config_dir: Path | None = None) -> None:
        """Initialize config manager.

        Args:
            config_dir: Configuration directory path
                (defaults to ``Paths.config_dir()``)

        """
        self.config_dir = config_dir or Paths.config_dir()
        self.settings_file = Paths.settings_file(self.config_dir)

    def _read_parser(self) -> configparser.ConfigParser:
        parser = configparser.ConfigParser(
            inline_comment_prefixes=("#", ";"),
            interpolation=None,
        )
        if not self.settings_file.exists():
            logger.debug("No settings file at %s", self.settings_file)
            return parser
        try:
            parser.read(self.settings_file, encoding="utf-8")
        except configparser.Error as e:
            msg = f"Cannot parse {self.settings_file}: {e}"
            raise ConfigurationError(msg) from e
        return parser

    @staticmethod
    def _get_int(
        parser: configparser.ConfigParser,
        section: str,
        key: str,
        default: int,
    ) -> int:
        raw = parser.get(section, key, fallback=None)
        if raw is None or not _strip_inline_comment(raw):
            return default
        try:
            value = int(_strip_inline_comment(raw))
        except ValueError as e:
            msg = f"'{key}' must be an integer, got '{raw}'"
            raise ConfigurationError(msg, target=section) from e
        if value < 1:
            msg = f"'{key}' must be positive, got {value}"
            raise ConfigurationError(msg, target=section)
        return value

    @staticmethod
    def _get_str(
        parser: configparser.ConfigParser,
        section: str,
        key: str,
        default: str | None,
    ) -> str | None:
        raw = parser.get(section, key, fallback=None)
        if raw is None:
            return default
        return _strip_inline_comment(raw) or default

    def load_settings(self) -> Settings:
        """Load settings from the INI file, falling back to defaults.

        Returns:
            Settings built from the file and built-in defaults

        Raises:
            ConfigurationError: If the file holds invalid values

        """
        parser = self._read_parser()

        console_level = (
            self._get_str(
                parser,
                SECTION_DEFAULT,
                KEY_CONSOLE_LOG_LEVEL,
                DEFAULT_CONSOLE_LOG_LEVEL,
            )
            or DEFAULT_CONSOLE_LOG_LEVEL
        ).upper()
        if console_level not in VALID_LOG_LEVELS:
            msg = f"Unknown console_log_level '{console_level}'"
            raise ConfigurationError(msg, target=SECTION_DEFAULT)

        cache_enabled = True
        if parser.has_option(SECTION_CACHE, "enabled"):
            try:
                cache_enabled = parser.getboolean(SECTION_CACHE, "enabled")
            except ValueError as e:
                msg = "'enabled' must be a boolean"
                raise ConfigurationError(msg, target=SECTION_CACHE) from e

        cache_dir = self._get_str(parser, SECTION_CACHE, "directory", None)

        settings = Settings(
            kubernetes_version=self._get_str(
                parser,
                SECTION_DEFAULT,
                KEY_KUBERNETES_VERSION,
                DEFAULT_KUBERNETES_VERSION,
            )
            or DEFAULT_KUBERNETES_VERSION,
            schema_location=self._get_str(
                parser, SECTION_DEFAULT, KEY_SCHEMA_LOCATION, None
            ),
            max_concurrency=self._get_int(
                parser,
                SECTION_DEFAULT,
                KEY_MAX_CONCURRENCY,
                DEFAULT_MAX_CONCURRENCY,
            ),
            console_log_level=console_level,
            cache=CacheSettings(
                enabled=cache_enabled,
                ttl_hours=self._get_int(
                    parser, SECTION_CACHE, "ttl_hours", DEFAULT_CACHE_TTL_HOURS
                ),
                directory=Paths.expand_path(cache_dir)
                if cache_dir
                else Paths.CACHE_DIR,
            ),
            network=NetworkSettings(
                retry_attempts=self._get_int(
                    parser,
                    SECTION_NETWORK,
                    "retry_attempts",
                    DEFAULT_RETRY_ATTEMPTS,
                ),
                timeout_seconds=self._get_int(
                    parser,
                    SECTION_NETWORK,
                    "timeout_seconds",
                    DEFAULT_TIMEOUT_SECONDS,
                ),
            ),
        )
        logger.debug("Loaded settings: %s", settings)
        return settings

    def save_default_config(self) -> Path:
        """Write a commented settings file holding the defaults.

        Returns:
            Path of the written file

        """
        self.config_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now(tz=UTC).strftime("%Y-%m-%d %H:%M:%S %Z")
        content = f"""# kubeschema configuration
# Generated: {timestamp}
#
# Environment variables override these values:
#   KUBESCHEMA_SCHEMA_LOCATION, KUBESCHEMA_KUBERNETES_VERSION

[{SECTION_DEFAULT}]
{KEY_KUBERNETES_VERSION} = {DEFAULT_KUBERNETES_VERSION}  # e.g. 1.18.0 or master
{KEY_SCHEMA_LOCATION} = {DEFAULT_SCHEMA_LOCATION}  # URL, file:// URL or directory
{KEY_MAX_CONCURRENCY} = {DEFAULT_MAX_CONCURRENCY}  # documents validated at once
{KEY_CONSOLE_LOG_LEVEL} = {DEFAULT_CONSOLE_LOG_LEVEL}  # DEBUG, INFO, WARNING, ERROR

[{SECTION_CACHE}]
enabled = true  # keep downloaded schemas on disk
ttl_hours = {DEFAULT_CACHE_TTL_HOURS}  # refetch after this many hours
directory = {Paths.CACHE_DIR}

[{SECTION_NETWORK}]
retry_attempts = {DEFAULT_RETRY_ATTEMPTS}  # attempts per schema download
timeout_seconds = {DEFAULT_TIMEOUT_SECONDS}  # connect timeout in seconds
"""
        self.settings_file.write_text(content, encoding="utf-8")
        logger.info("Wrote default settings to %s", self.settings_file)
        return self.settings_file
