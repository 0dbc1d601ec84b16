"""Data providers for the World Bank dataset and the ISO code table."""
from .base import BaseProvider
from .iso_codes import IsoCodeProvider
from .worldbank import WorldBankProvider

__all__ = [
    "BaseProvider",
    "IsoCodeProvider",
    "WorldBankProvider",
]
