"""Persistent on-disk cache for downloaded schemas.

Schemas for a released Kubernetes version never change, so keeping them
on disk avoids one HTTP request per kind on every run. Entries carry a
``cached_at`` timestamp and expire after ``ttl_hours`` so the moving
``master`` schemas are still refreshed.
"""

import contextlib
import hashlib
import os
import tempfile
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

import orjson

from kubeschema.logger import get_logger
from kubeschema.schema.fetcher import SchemaDocument, SchemaFetcher

logger = get_logger(__name__)


class SchemaCache:
    """Stores schema documents as JSON files keyed by URL."""

    def __init__(self, cache_dir: Path, ttl_hours: int = 24) -> None:
        """Initialize the cache.

        Args:
            cache_dir: Directory holding cache files
            ttl_hours: Hours before an entry is considered stale

        """
        self.cache_dir = cache_dir
        self.ttl_hours = ttl_hours

    def _get_cache_file_path(self, url: str) -> Path:
        digest = hashlib.sha256(url.encode("utf-8")).hexdigest()
        return self.cache_dir / f"{digest}.json"

    def _parse_cached_at(self, entry: dict[str, Any]) -> datetime | None:
        """Return the entry's timezone-aware timestamp, None if unusable."""
        try:
            cached_at = datetime.fromisoformat(entry["cached_at"])
        except (KeyError, TypeError, ValueError) as e:
            logger.debug("Invalid cache timestamp: %s", e)
            return None
        if cached_at.tzinfo is None:
            logger.debug("Cache timestamp has no timezone: %s", cached_at)
            return None
        return cached_at

    def _remove(self, cache_file: Path, reason: object) -> None:
        logger.warning("Removing corrupted cache file %s: %s", cache_file, reason)
        with contextlib.suppress(OSError):
            cache_file.unlink()

    def get(self, url: str) -> SchemaDocument | None:
        """Return the cached schema for a URL if present and fresh."""
        cache_file = self._get_cache_file_path(url)
        if not cache_file.exists():
            return None

        try:
            entry = orjson.loads(cache_file.read_bytes())
        except (OSError, orjson.JSONDecodeError) as e:
            self._remove(cache_file, e)
            return None

        if not isinstance(entry, dict) or entry.get("url") != url:
            return None
        cached_at = self._parse_cached_at(entry)
        if cached_at is None:
            self._remove(cache_file, "invalid cached_at timestamp")
            return None
        if datetime.now(tz=UTC) >= cached_at + timedelta(hours=self.ttl_hours):
            logger.debug("Cache expired for %s", url)
            return None

        schema = entry.get("schema")
        return schema if isinstance(schema, dict) else None

    def put(self, url: str, schema: SchemaDocument) -> None:
        """Store a schema, writing atomically via a temporary file."""
        entry = {
            "url": url,
            "cached_at": datetime.now(tz=UTC).isoformat(),
            "schema": schema,
        }
        cache_file = self._get_cache_file_path(url)
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.cache_dir, prefix=".tmp-", suffix=".json"
            )
            with os.fdopen(fd, "wb") as handle:
                handle.write(orjson.dumps(entry))
            Path(tmp_name).replace(cache_file)
        except OSError as e:
            logger.warning("Failed to write schema cache for %s: %s", url, e)

    def clear(self) -> int:
        """Delete every cache entry.

        Returns:
            Number of removed files

        """
        if not self.cache_dir.exists():
            return 0
        removed = 0
        for cache_file in self.cache_dir.glob("*.json"):
            with contextlib.suppress(OSError):
                cache_file.unlink()
                removed += 1
        return removed


class CachedSchemaFetcher:
    """Consults a ``SchemaCache`` before delegating to another fetcher."""

    def __init__(self, inner: SchemaFetcher, cache: SchemaCache) -> None:
        self.inner = inner
        self.cache = cache

    async def fetch(self, url: str) -> SchemaDocument:
        """Return the cached schema or fetch and store it.

        Raises:
            SchemaError: If the inner fetcher fails

        """
        schema = self.cache.get(url)
        if schema is not None:
            logger.debug("Schema cache hit for %s", url)
            return schema
        schema = await self.inner.fetch(url)
        self.cache.put(url, schema)
        return schema
