"""Constants shared across kubeschema modules."""

from typing import Final

# Schema host
DEFAULT_SCHEMA_LOCATION: Final = "https://kubernetesjsonschema.dev"
DEFAULT_KUBERNETES_VERSION: Final = "master"
SCHEMA_VARIANT_SUFFIX: Final = "-standalone-strict"

# Formats used by the Kubernetes schemas that carry no checkable semantics
KUBERNETES_FORMATS: Final = ("int64", "int32", "byte", "int-or-string")

# Environment
ENV_PREFIX: Final = "KUBESCHEMA"
ENV_SCHEMA_LOCATION: Final = f"{ENV_PREFIX}_SCHEMA_LOCATION"
ENV_KUBERNETES_VERSION: Final = f"{ENV_PREFIX}_KUBERNETES_VERSION"
ENV_FILENAME: Final = f"{ENV_PREFIX}_FILENAME"
ENV_CONFIG_DIR: Final = f"{ENV_PREFIX}_CONFIG_DIR"
ENV_LOG_DIR: Final = f"{ENV_PREFIX}_LOG_DIR"

# Configuration file
SETTINGS_FILENAME: Final = "settings.conf"
SECTION_DEFAULT: Final = "DEFAULT"
SECTION_CACHE: Final = "cache"
SECTION_NETWORK: Final = "network"
KEY_KUBERNETES_VERSION: Final = "kubernetes_version"
KEY_SCHEMA_LOCATION: Final = "schema_location"
KEY_MAX_CONCURRENCY: Final = "max_concurrency"
KEY_CONSOLE_LOG_LEVEL: Final = "console_log_level"

DEFAULT_MAX_CONCURRENCY: Final = 4
DEFAULT_CACHE_TTL_HOURS: Final = 24
DEFAULT_RETRY_ATTEMPTS: Final = 3
DEFAULT_TIMEOUT_SECONDS: Final = 10
DEFAULT_CONSOLE_LOG_LEVEL: Final = "WARNING"
DEFAULT_LOG_LEVEL: Final = "INFO"
DEFAULT_STDIN_FILENAME: Final = "from stdin"

# Logging
LOG_CONSOLE_FORMAT: Final = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_CONSOLE_DATE_FORMAT: Final = "%H:%M:%S"
LOG_FILE_FORMAT: Final = (
    "%(asctime)s - %(name)s - %(levelname)s - "
    "[%(funcName)s:%(lineno)d] - %(message)s"
)
LOG_FILE_DATE_FORMAT: Final = "%Y-%m-%d %H:%M:%S"
LOG_FILENAME: Final = "kubeschema.log"
LOG_ROTATION_THRESHOLD_BYTES: Final = 10 * 1024 * 1024
LOG_BACKUP_COUNT: Final = 5

LOG_COLORS: Final = {
    "DEBUG": "\033[36m",  # Cyan
    "INFO": "\033[32m",  # Green
    "WARNING": "\033[33m",  # Yellow
    "ERROR": "\033[31m",  # Red
    "CRITICAL": "\033[35m",  # Magenta
    "RESET": "\033[0m",
}

# Result rendering
RESULT_COLORS: Final = {
    "valid": "\033[92;40m",  # Bright green on black
    "empty": "\033[93;40m",  # Bright yellow on black
    "invalid": "\033[91;40m",  # Bright red on black
    "RESET": "\033[0m",
}

# HTTP
HTTP_NOT_FOUND: Final = 404
