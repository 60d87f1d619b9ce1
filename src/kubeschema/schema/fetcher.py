"""Schema fetchers.

A fetcher turns a schema URL into a parsed schema document. The
validator only depends on the ``SchemaFetcher`` protocol, so tests and
offline runs can plug in local or bundled schema sets.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Protocol, runtime_checkable
from urllib.parse import unquote, urlparse

import aiohttp
import orjson

from kubeschema.config.settings import NetworkSettings
from kubeschema.constants import HTTP_NOT_FOUND
from kubeschema.exceptions import SchemaError
from kubeschema.logger import get_logger

logger = get_logger(__name__)

SchemaDocument = dict[str, Any]


@runtime_checkable
class SchemaFetcher(Protocol):
    """Loads a schema document for a URL."""

    async def fetch(self, url: str) -> SchemaDocument:
        """Return the parsed schema.

        Raises:
            SchemaError: If the schema cannot be loaded or parsed

        """
        ...


def parse_schema(payload: bytes, url: str) -> SchemaDocument:
    """Decode a schema payload.

    Args:
        payload: Raw JSON bytes
        url: Source URL, used in error messages

    Returns:
        Parsed schema mapping

    Raises:
        SchemaError: If the payload is not a JSON object

    """
    try:
        schema = orjson.loads(payload)
    except orjson.JSONDecodeError as e:
        msg = f"Invalid JSON in schema: {e}"
        raise SchemaError(msg, url=url) from e
    if not isinstance(schema, dict):
        msg = f"Schema must be a JSON object, got {type(schema).__name__}"
        raise SchemaError(msg, url=url)
    return schema


def is_local_location(location: str) -> bool:
    """Whether a schema location refers to the local filesystem."""
    scheme = urlparse(location).scheme
    # Single-letter schemes are Windows drive letters
    return scheme in ("", "file") or len(scheme) == 1


class FileSchemaFetcher:
    """Reads schemas from ``file://`` URLs or plain paths."""

    @staticmethod
    def _to_path(url: str) -> Path:
        parsed = urlparse(url)
        if parsed.scheme == "file":
            return Path(unquote(parsed.netloc + parsed.path))
        return Path(url)

    async def fetch(self, url: str) -> SchemaDocument:
        """Read and parse the schema file."""
        path = self._to_path(url)
        try:
            payload = await asyncio.to_thread(path.read_bytes)
        except FileNotFoundError as e:
            msg = "Schema file not found"
            raise SchemaError(msg, url=url) from e
        except OSError as e:
            msg = f"Cannot read schema file: {e}"
            raise SchemaError(msg, url=url) from e
        logger.debug("Loaded schema from %s", path)
        return parse_schema(payload, url)


class HTTPSchemaFetcher:
    """Downloads schemas over HTTP(S) with retry and memoization.

    Each URL is downloaded at most once per fetcher; concurrent requests
    for the same URL wait for the first download. A failed download is
    remembered too, so later requests for that URL fail without retrying.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        network: NetworkSettings | None = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            session: aiohttp session for making requests
            network: Retry and timeout settings

        """
        self.session = session
        self.network = network or NetworkSettings()
        self._schemas: dict[str, SchemaDocument] = {}
        self._failures: dict[str, SchemaError] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    async def fetch(self, url: str) -> SchemaDocument:
        """Return the schema for a URL, downloading it on first use."""
        lock = self._locks.setdefault(url, asyncio.Lock())
        async with lock:
            if url in self._failures:
                raise SchemaError(self._failures[url].message, url=url)
            if url not in self._schemas:
                try:
                    self._schemas[url] = await self._download(url)
                except SchemaError as e:
                    self._failures[url] = e
                    raise
            return self._schemas[url]

    async def _download(self, url: str) -> SchemaDocument:
        """Download one schema.

        Transient network errors are retried with exponential backoff;
        a 404 is reported at once since the kind or version is unknown to
        the schema host.

        Raises:
            SchemaError: If the schema cannot be downloaded or parsed

        """
        retry_attempts = max(1, self.network.retry_attempts)
        timeout_seconds = self.network.timeout_seconds
        timeout = aiohttp.ClientTimeout(
            total=timeout_seconds * 3,
            sock_read=timeout_seconds * 2,
            sock_connect=timeout_seconds,
        )

        for attempt in range(1, retry_attempts + 1):
            try:
                async with self.session.get(url, timeout=timeout) as response:
                    if response.status == HTTP_NOT_FOUND:
                        msg = "Schema not found (HTTP 404)"
                        raise SchemaError(msg, url=url)
                    response.raise_for_status()
                    payload = await response.read()
            except (aiohttp.ClientError, TimeoutError) as e:
                logger.warning(
                    "Attempt %d/%d for %s failed: %s",
                    attempt,
                    retry_attempts,
                    url,
                    e,
                )
                if attempt == retry_attempts:
                    msg = f"Failed to load schema after {attempt} attempts: {e}"
                    raise SchemaError(msg, url=url) from e
                await asyncio.sleep(2**attempt)
            else:
                logger.debug("Downloaded schema %s", url)
                return parse_schema(payload, url)

        msg = "Failed to load schema"
        raise SchemaError(msg, url=url)
