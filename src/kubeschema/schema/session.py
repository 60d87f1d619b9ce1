"""HTTP session utilities for schema downloads."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import aiohttp

from kubeschema import __version__
from kubeschema.config.settings import NetworkSettings


@asynccontextmanager
async def create_http_session(
    network: NetworkSettings,
    max_concurrency: int = 4,
) -> AsyncIterator[aiohttp.ClientSession]:
    """Create configured HTTP session.

    Args:
        network: Network settings
        max_concurrency: Maximum simultaneous connections to the schema host

    Yields:
        Configured aiohttp.ClientSession

    """
    timeout = aiohttp.ClientTimeout(
        total=network.timeout_seconds * 6,
        sock_read=network.timeout_seconds * 3,
        sock_connect=network.timeout_seconds,
    )
    connector = aiohttp.TCPConnector(
        limit=10,
        limit_per_host=max(1, max_concurrency),
    )

    async with aiohttp.ClientSession(
        timeout=timeout,
        connector=connector,
        headers={"User-Agent": f"kubeschema/{__version__}"},
    ) as session:
        yield session
