from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import httpx

from ..exceptions import DataNotAvailableError
from ..models import Indicator, Observation
from .base import BaseProvider

logger = logging.getLogger(__name__)

# Value of ``region.value`` on country entries that are really aggregates
AGGREGATES_REGION = "Aggregates"


@dataclass(frozen=True)
class CountryEntry:
    """One row of the World Bank ``/country`` listing."""

    code: str
    name: str
    iso2_code: Optional[str]
    is_aggregate: bool


@dataclass(frozen=True)
class RegionEntry:
    """One row of the World Bank ``/region`` listing."""

    code: str
    name: str


class WorldBankProvider(BaseProvider):
    """World Bank Indicators API (v2) client.

    Every listing endpoint of the API is paged and answers with a two
    element array ``[page_info, rows]``; a request the API rejects answers
    with ``[{"message": [...]}]`` instead.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str = "https://api.worldbank.org/v2",
        page_size: int = 20000,
        timeout: float = BaseProvider.DEFAULT_TIMEOUT,
    ) -> None:
        super().__init__(client, timeout=timeout)
        self.base_url = base_url.rstrip("/")
        self.page_size = page_size

    @property
    def provider_name(self) -> str:
        return "WorldBank"

    @staticmethod
    def _error_message(payload: Any) -> Optional[str]:
        """Return the API error text if the payload is a ``message`` response."""
        if isinstance(payload, list) and payload and isinstance(payload[0], dict) and "message" in payload[0]:
            messages = payload[0]["message"]
            if isinstance(messages, list) and messages:
                return str(messages[0].get("value", "Unknown error"))
            return "Unknown error"
        return None

    async def _get_pages(self, path: str, allow_missing: bool = False) -> List[Dict[str, Any]]:
        """Fetch every page of a listing endpoint and concatenate the rows.

        Args:
            path: Endpoint path relative to the base URL
            allow_missing: Return no rows instead of raising when the API
                answers with an error message

        Raises:
            DataNotAvailableError: On error payloads or unexpected shapes
        """
        url = f"{self.base_url}/{path.lstrip('/')}"
        rows: List[Dict[str, Any]] = []
        page = 1
        pages = 1

        while page <= pages:
            params = {"format": "json", "per_page": self.page_size, "page": page}
            payload = await self._get_json(url, params=params)

            error = self._error_message(payload)
            if error is not None:
                if allow_missing:
                    logger.warning(f"World Bank API error for {path}: {error}")
                    return []
                raise DataNotAvailableError(
                    f"World Bank API error for {path}: {error}",
                    provider=self.provider_name,
                )

            if not isinstance(payload, list) or not payload or not isinstance(payload[0], dict):
                raise DataNotAvailableError(
                    f"Unexpected World Bank response shape for {path}",
                    provider=self.provider_name,
                )

            try:
                pages = int(payload[0].get("pages") or 1)
            except (TypeError, ValueError):
                pages = 1

            if len(payload) > 1 and payload[1]:
                rows.extend(row for row in payload[1] if isinstance(row, dict))
            page += 1

        return rows

    async def fetch_countries(self) -> List[CountryEntry]:
        """List every country (and aggregate) known to the API, in API order."""
        rows = await self._get_pages("country")
        entries: List[CountryEntry] = []
        for row in rows:
            code = (row.get("id") or "").strip()
            name = row.get("name")
            if not code or not name:
                logger.debug(f"Skipping country row without id or name: {row!r}")
                continue
            region = row.get("region") or {}
            iso2 = (row.get("iso2Code") or "").strip() or None
            entries.append(
                CountryEntry(
                    code=code,
                    name=name,
                    iso2_code=iso2,
                    is_aggregate=(region.get("value") or "").strip() == AGGREGATES_REGION,
                )
            )
        logger.info(f"World Bank listed {len(entries)} countries")
        return entries

    async def fetch_regions(self) -> List[RegionEntry]:
        rows = await self._get_pages("region")
        entries = [
            RegionEntry(code=row["code"].strip(), name=row["name"])
            for row in rows
            if row.get("code") and row.get("name")
        ]
        logger.info(f"World Bank listed {len(entries)} regions")
        return entries

    async def fetch_region_members(self, region_code: str) -> List[str]:
        """Return the country codes belonging to a region, in API order.

        Regions the API refuses to expand yield an empty list.
        """
        rows = await self._get_pages(f"region/{region_code}/country", allow_missing=True)
        return [row["id"].strip() for row in rows if row.get("id")]

    async def fetch_indicator_series(self, indicator: Indicator) -> Dict[str, Tuple[Observation, ...]]:
        """Fetch one indicator for all countries.

        Returns:
            Mapping of country code to observations sorted by ascending year.
            Null values are dropped, so a series may be empty or absent.
        """
        rows = await self._get_pages(f"country/all/indicator/{indicator.value}")
        series: Dict[str, List[Observation]] = defaultdict(list)

        for row in rows:
            code = (row.get("countryiso3code") or "").strip()
            value = row.get("value")
            if not code or value is None:
                continue
            try:
                year = int(str(row.get("date", ""))[:4])
                series[code].append(Observation(year=year, value=float(value)))
            except (TypeError, ValueError):
                logger.debug(f"Skipping malformed {indicator.value} row for {code}: {row!r}")

        logger.info(f"World Bank returned {indicator.value} for {len(series)} countries")
        return {
            code: tuple(sorted(observations, key=lambda o: o.year))
            for code, observations in series.items()
        }
