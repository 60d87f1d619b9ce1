"""Typed runtime settings.

Settings are built once at startup and passed explicitly to the
validator; nothing reads process-wide mutable state during a run.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from kubeschema.config.paths import Paths
from kubeschema.constants import (
    DEFAULT_CACHE_TTL_HOURS,
    DEFAULT_CONSOLE_LOG_LEVEL,
    DEFAULT_KUBERNETES_VERSION,
    DEFAULT_MAX_CONCURRENCY,
    DEFAULT_RETRY_ATTEMPTS,
    DEFAULT_SCHEMA_LOCATION,
    DEFAULT_TIMEOUT_SECONDS,
    ENV_KUBERNETES_VERSION,
    ENV_SCHEMA_LOCATION,
)


@dataclass(frozen=True, slots=True)
class NetworkSettings:
    """Retry and timeout settings for schema downloads."""

    retry_attempts: int = DEFAULT_RETRY_ATTEMPTS
    timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS


@dataclass(frozen=True, slots=True)
class CacheSettings:
    """On-disk schema cache settings."""

    enabled: bool = True
    ttl_hours: int = DEFAULT_CACHE_TTL_HOURS
    directory: Path = Paths.CACHE_DIR


@dataclass(frozen=True, slots=True)
class Settings:
    """Schema location and runtime settings for one run.

    Attributes:
        kubernetes_version: Kubernetes version schemas are taken from
        schema_location: Explicitly configured schema host, if any
        default_schema_location: Built-in schema host
        max_concurrency: Documents validated at the same time
        console_log_level: Console log level name
        cache: On-disk schema cache settings
        network: Schema download settings

    """

    kubernetes_version: str = DEFAULT_KUBERNETES_VERSION
    schema_location: str | None = None
    default_schema_location: str = DEFAULT_SCHEMA_LOCATION
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY
    console_log_level: str = DEFAULT_CONSOLE_LOG_LEVEL
    cache: CacheSettings = field(default_factory=CacheSettings)
    network: NetworkSettings = field(default_factory=NetworkSettings)

    def resolve_base_url(
        self, environ: Mapping[str, str] | None = None
    ) -> str:
        """Return the schema host to use.

        The ``KUBESCHEMA_SCHEMA_LOCATION`` environment variable wins over
        ``schema_location``, which wins over the built-in default.

        Args:
            environ: Environment mapping, defaults to ``os.environ``

        Returns:
            Schema base URL without a trailing slash

        """
        env = os.environ if environ is None else environ
        location = (
            env.get(ENV_SCHEMA_LOCATION)
            or self.schema_location
            or self.default_schema_location
        )
        return location.rstrip("/")

    def resolve_kubernetes_version(
        self, environ: Mapping[str, str] | None = None
    ) -> str:
        """Return the Kubernetes version to validate against.

        ``KUBESCHEMA_KUBERNETES_VERSION`` wins over ``kubernetes_version``.
        """
        env = os.environ if environ is None else environ
        return (
            env.get(ENV_KUBERNETES_VERSION)
            or self.kubernetes_version
            or DEFAULT_KUBERNETES_VERSION
        )
