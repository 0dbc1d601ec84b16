"""Base provider class with common HTTP and error handling logic."""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx

from ..exceptions import DataNotAvailableError, ProviderTimeoutError

logger = logging.getLogger(__name__)


class BaseProvider(ABC):
    """Base class for the startup data providers.

    Provides common functionality:
    - Shared HTTP client with timeout
    - Mapping of transport and decoding failures onto the exception hierarchy
    - Standardized provider identification

    Requests are not retried: the dataset is loaded once at startup and a
    failed load stops the application.
    """

    DEFAULT_TIMEOUT = 30.0

    def __init__(self, client: httpx.AsyncClient, timeout: float = DEFAULT_TIMEOUT):
        """Initialize base provider.

        Args:
            client: Shared httpx AsyncClient
            timeout: Request timeout in seconds
        """
        self.client = client
        self.timeout = timeout

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the canonical provider name used in logs and errors."""
        pass

    async def _get(self, url: str, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        """GET a URL, converting failures into provider errors.

        Raises:
            ProviderTimeoutError: If the request timed out
            DataNotAvailableError: On connection failures or HTTP error statuses
        """
        try:
            response = await self.client.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            return response
        except httpx.TimeoutException as e:
            raise ProviderTimeoutError(
                f"Request to {url} timed out after {self.timeout}s",
                provider=self.provider_name,
            ) from e
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise DataNotAvailableError(
                f"API returned {status} for {url}",
                provider=self.provider_name,
                details={"status": status},
            ) from e
        except httpx.HTTPError as e:
            raise DataNotAvailableError(
                f"Request to {url} failed: {e}",
                provider=self.provider_name,
            ) from e

    async def _get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        response = await self._get(url, params=params)
        return self._parse_json_safe(response)

    def _parse_json_safe(self, response: httpx.Response) -> Any:
        """Parse a JSON body.

        Raises:
            DataNotAvailableError: If JSON parsing fails
        """
        try:
            return response.json()
        except ValueError as e:
            raise DataNotAvailableError(
                f"Failed to parse response: {e}",
                provider=self.provider_name,
            ) from e
