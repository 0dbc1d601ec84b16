"""ISO 3166 alpha-3 to alpha-2 reference table."""
from __future__ import annotations

import csv
import io
import logging
from typing import Dict, Mapping, Optional

import httpx

from ..exceptions import DataNotAvailableError
from .base import BaseProvider

logger = logging.getLogger(__name__)

ALPHA2_COLUMN = "alpha-2"
ALPHA3_COLUMN = "alpha-3"


class IsoCodeTable:
    """Read-only alpha-3 → alpha-2 lookup."""

    def __init__(self, mapping: Mapping[str, str]) -> None:
        self._mapping: Dict[str, str] = {k.upper(): v.upper() for k, v in mapping.items()}

    def __len__(self) -> int:
        return len(self._mapping)

    def lookup_alpha2(self, alpha3: Optional[str]) -> Optional[str]:
        if not alpha3:
            return None
        return self._mapping.get(alpha3.strip().upper())

    @classmethod
    def from_csv(cls, text: str) -> "IsoCodeTable":
        """Build the table from CSV text with ``alpha-2`` and ``alpha-3`` columns.

        Raises:
            DataNotAvailableError: If either column is missing
        """
        reader = csv.DictReader(io.StringIO(text))
        fields = reader.fieldnames or []
        if ALPHA2_COLUMN not in fields or ALPHA3_COLUMN not in fields:
            raise DataNotAvailableError(
                f"ISO code table must have {ALPHA2_COLUMN!r} and {ALPHA3_COLUMN!r} columns, got {fields}",
                provider="ISO3166",
            )

        mapping: Dict[str, str] = {}
        for row in reader:
            alpha2 = (row.get(ALPHA2_COLUMN) or "").strip()
            alpha3 = (row.get(ALPHA3_COLUMN) or "").strip()
            if len(alpha2) == 2 and len(alpha3) == 3:
                mapping[alpha3] = alpha2
        return cls(mapping)


class IsoCodeProvider(BaseProvider):
    """Downloads the ISO 3166 reference table once at startup."""

    def __init__(self, client: httpx.AsyncClient, url: str, timeout: float = BaseProvider.DEFAULT_TIMEOUT) -> None:
        super().__init__(client, timeout=timeout)
        self.url = url

    @property
    def provider_name(self) -> str:
        return "ISO3166"

    async def fetch_table(self) -> IsoCodeTable:
        response = await self._get(self.url)
        table = IsoCodeTable.from_csv(response.text)
        if not len(table):
            raise DataNotAvailableError(f"ISO code table at {self.url} is empty", provider=self.provider_name)
        logger.info(f"Loaded {len(table)} ISO 3166 codes")
        return table
