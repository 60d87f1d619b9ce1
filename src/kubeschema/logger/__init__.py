"""Logging utilities for kubeschema.

Architecture:
    Application -> QueueHandler -> Queue -> QueueListener Thread
                                                 |
                                      Console (+ File) Handlers

Usage:
    >>> from kubeschema.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Validating %s", file_name)  # Use %-style formatting

Environment Variables:
    KUBESCHEMA_LOG_DIR: Enables file logging into this directory

Rules:
    1. Always use: logger = get_logger(__name__)
    2. Never call logging.basicConfig()
    3. Never use f-strings in log calls
"""

from kubeschema.logger.config import set_console_level as _set_console_level
from kubeschema.logger.formatters import (
    ColoredConsoleFormatter,
    HybridConsoleFormatter,
)
from kubeschema.logger.logger import (
    clear_logger_state,
    flush_all_handlers,
    get_logger,
    setup_logging,
)
from kubeschema.logger.state import get_state

__all__ = [
    "ColoredConsoleFormatter",
    "HybridConsoleFormatter",
    "clear_logger_state",
    "flush_all_handlers",
    "get_logger",
    "set_console_level",
    "setup_logging",
]


def set_console_level(level: str) -> None:
    """Change the console log level, e.g. for ``--verbose``."""
    _set_console_level(get_state(), level)
