"""Schema loading for kubeschema.

Usage:
    async with create_http_session(settings.network) as session:
        fetcher = create_schema_fetcher(settings, session)
        schema = await fetcher.fetch(url)
"""

import aiohttp

from kubeschema.config.settings import Settings
from kubeschema.logger import get_logger
from kubeschema.schema.cache import CachedSchemaFetcher, SchemaCache
from kubeschema.schema.fetcher import (
    FileSchemaFetcher,
    HTTPSchemaFetcher,
    SchemaDocument,
    SchemaFetcher,
    is_local_location,
    parse_schema,
)
from kubeschema.schema.session import create_http_session

logger = get_logger(__name__)

__all__ = [
    "CachedSchemaFetcher",
    "FileSchemaFetcher",
    "HTTPSchemaFetcher",
    "SchemaCache",
    "SchemaDocument",
    "SchemaFetcher",
    "create_http_session",
    "create_schema_fetcher",
    "is_local_location",
    "parse_schema",
]


def create_schema_fetcher(
    settings: Settings,
    session: aiohttp.ClientSession | None = None,
) -> SchemaFetcher:
    """Pick the fetcher matching the resolved schema location.

    Local locations (paths and ``file://`` URLs) are read directly;
    remote ones are downloaded through ``session``, behind the on-disk
    cache when it is enabled.

    Args:
        settings: Runtime settings
        session: aiohttp session, required for remote locations

    Returns:
        Schema fetcher

    Raises:
        ValueError: If a remote location is configured without a session

    """
    base_url = settings.resolve_base_url()
    if is_local_location(base_url):
        logger.debug("Reading schemas from local location %s", base_url)
        return FileSchemaFetcher()

    if session is None:
        msg = f"An HTTP session is required to fetch schemas from {base_url}"
        raise ValueError(msg)

    fetcher: SchemaFetcher = HTTPSchemaFetcher(session, settings.network)
    if settings.cache.enabled:
        cache = SchemaCache(settings.cache.directory, settings.cache.ttl_hours)
        fetcher = CachedSchemaFetcher(fetcher, cache)
    return fetcher
