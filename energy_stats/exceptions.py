"""Exception hierarchy for energy-stats.

Exception Hierarchy:
    EnergyStatsError (base)
    ├── ConfigurationError
    └── DataProviderError
        ├── ProviderTimeoutError
        └── DataNotAvailableError

Missing indicator data, failed ISO code lookups and searches without a
match are not errors: they produce absent reports or empty result lists.
These exceptions are reserved for invalid settings and failures to load
the dataset, both fatal at startup.
"""
from __future__ import annotations

from typing import Optional, Dict, Any


class EnergyStatsError(Exception):
    """Base exception for all energy-stats errors.

    Attributes:
        message: Human-readable error message
        code: Error code for programmatic handling
        details: Additional error context
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(EnergyStatsError):
    """Raised when the application is started with an unusable configuration."""
    pass


class DataProviderError(EnergyStatsError):
    """Base class for data provider errors.

    Attributes:
        provider: Name of the provider that failed
    """

    def __init__(
        self,
        message: str,
        provider: Optional[str] = None,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.provider = provider
        details = details or {}
        if provider:
            details["provider"] = provider
        super().__init__(message, code, details)


class ProviderTimeoutError(DataProviderError):
    """Raised when provider request times out."""
    pass


class DataNotAvailableError(DataProviderError):
    """Raised when a provider answers with an error or an unreadable payload.

    This can mean:
        - HTTP error status from the provider
        - Connection failure
        - Response body is not the expected JSON/CSV shape
        - World Bank API returned a ``message`` error payload
    """
    pass


def get_error_response(error: Exception) -> Dict[str, Any]:
    """Convert any exception to an API error response.

    Args:
        error: The exception to convert

    Returns:
        Dictionary suitable for API error response
    """
    if isinstance(error, EnergyStatsError):
        return error.to_dict()

    return {
        "error": "InternalError",
        "message": str(error),
        "details": {},
    }
