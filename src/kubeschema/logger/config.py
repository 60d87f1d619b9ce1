"""Log level loading and runtime updates."""

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

from kubeschema.constants import (
    DEFAULT_CONSOLE_LOG_LEVEL,
    DEFAULT_LOG_LEVEL,
    ENV_LOG_DIR,
    LOG_FILENAME,
)

if TYPE_CHECKING:
    from kubeschema.logger.state import _LoggerState


def load_log_settings() -> tuple[str, str, Path | None]:
    """Load bootstrap console level, file level, and file path.

    File logging is off unless ``KUBESCHEMA_LOG_DIR`` names a directory,
    in which case records go to ``$KUBESCHEMA_LOG_DIR/kubeschema.log``.

    Returns:
        Tuple of (console_level, file_level, log_path or None)

    """
    env_log_dir = os.getenv(ENV_LOG_DIR)
    log_path = (
        Path(env_log_dir).expanduser() / LOG_FILENAME if env_log_dir else None
    )
    return DEFAULT_CONSOLE_LOG_LEVEL, DEFAULT_LOG_LEVEL, log_path


def set_console_level(state: "_LoggerState", level: str) -> None:
    """Change the console handler level of a running listener.

    Args:
        state: Logger state object
        level: Level name such as "DEBUG" or "ERROR"

    """
    console_level = getattr(logging, level.upper(), logging.WARNING)
    if state.queue_listener is None:
        return
    for handler in state.queue_listener.handlers:
        if isinstance(handler, logging.StreamHandler) and not isinstance(
            handler, RotatingFileHandler
        ):
            handler.setLevel(console_level)
