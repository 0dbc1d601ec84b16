"""
Shared HTTP Client Pool Service

One ``httpx.AsyncClient`` is shared by every provider call made while the
dataset is loaded at startup, so the World Bank requests (countries,
regions, region members, four paged indicator series) reuse connections.
"""

from __future__ import annotations

import logging
from typing import Optional, Dict, Any

import httpx

from ..config import get_settings

logger = logging.getLogger(__name__)


class HTTPClientPool:
    """
    Singleton HTTP client pool for all external API calls.

    Features:
    - Reuses TCP connections across requests
    - HTTP/2 support
    - Connection pooling with configurable limits
    """

    _instance: Optional[HTTPClientPool] = None
    _client: Optional[httpx.AsyncClient] = None

    def __new__(cls) -> HTTPClientPool:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if self._client is None:
            self._initialize_client()

    @staticmethod
    def _initialize_client() -> None:
        """Create a shared AsyncClient."""
        settings = get_settings()
        limits = httpx.Limits(
            max_connections=20,
            max_keepalive_connections=10,
            keepalive_expiry=5.0,
        )
        timeout = httpx.Timeout(
            timeout=settings.http_timeout,
            connect=10.0,
        )

        HTTPClientPool._client = httpx.AsyncClient(
            limits=limits,
            timeout=timeout,
            http2=True,
            verify=True,
            follow_redirects=True,
            headers={
                "User-Agent": "energy-stats/1.0",
                "Accept": "application/json, text/csv",
            },
        )

        logger.info(
            "HTTP Client Pool initialized: max_connections=20, timeout=%ss",
            settings.http_timeout,
        )

    @classmethod
    def get_client(cls) -> httpx.AsyncClient:
        """Get the shared HTTP client instance."""
        cls()
        if HTTPClientPool._client is None:
            HTTPClientPool._initialize_client()
        return HTTPClientPool._client

    @classmethod
    async def close(cls) -> None:
        """Close the shared HTTP client pool."""
        if HTTPClientPool._client:
            await HTTPClientPool._client.aclose()
            HTTPClientPool._client = None
            logger.info("HTTP Client Pool closed")

    @classmethod
    def get_stats(cls) -> Dict[str, Any]:
        """Get current pool statistics."""
        client = HTTPClientPool._client
        if client is None:
            return {"status": "not_initialized"}

        return {
            "status": "active",
            "is_closed": client.is_closed,
            "timeout": client.timeout.read,
        }


def get_http_client() -> httpx.AsyncClient:
    return HTTPClientPool.get_client()


async def close_http_pool() -> None:
    await HTTPClientPool.close()
