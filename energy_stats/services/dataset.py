"""
Process-wide dataset snapshot.

The countries, regions and ISO code table are fetched once when the
application starts and wrapped in an immutable ``DataContext`` that every
request reads. Any failure while loading propagates to the caller, so the
application never serves a partial dataset.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import httpx

from ..config import Settings
from ..models import Country, Indicator, Observation, Region
from ..providers.iso_codes import IsoCodeProvider, IsoCodeTable
from ..providers.worldbank import CountryEntry, RegionEntry, WorldBankProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DataContext:
    """Read-only snapshot of everything the search engine needs."""

    countries: Tuple[Country, ...]
    regions: Tuple[Region, ...]
    code_lookup: Optional[IsoCodeTable] = None


def build_countries(
    entries: Sequence[CountryEntry],
    series: Dict[Indicator, Dict[str, Tuple[Observation, ...]]],
    include_aggregates: bool = False,
) -> Tuple[Country, ...]:
    countries = []
    for entry in entries:
        if entry.is_aggregate and not include_aggregates:
            continue
        countries.append(
            Country(
                code=entry.code,
                name=entry.name,
                iso2_code=entry.iso2_code,
                indicators={
                    indicator: by_country.get(entry.code, ())
                    for indicator, by_country in series.items()
                },
            )
        )
    return tuple(countries)


def build_regions(
    entries: Sequence[RegionEntry],
    members: Sequence[List[str]],
    countries: Tuple[Country, ...],
) -> Tuple[Region, ...]:
    """Attach member countries to regions by code.

    Member codes with no matching country (aggregates when they are
    excluded) are skipped.
    """
    by_code = {country.code: country for country in countries}
    regions = []
    for entry, codes in zip(entries, members):
        member_countries = tuple(by_code[code] for code in codes if code in by_code)
        regions.append(Region(code=entry.code, name=entry.name, countries=member_countries))
    return tuple(regions)


async def load_data_context(settings: Settings, client: httpx.AsyncClient) -> DataContext:
    """Fetch the full dataset.

    Raises:
        DataProviderError: If any provider request fails
    """
    worldbank = WorldBankProvider(
        client,
        base_url=settings.worldbank_base_url,
        page_size=settings.worldbank_page_size,
        timeout=settings.http_timeout,
    )
    indicators = list(Indicator)

    async def fetch_code_table() -> Optional[IsoCodeTable]:
        if not settings.enable_iso_code_lookup:
            return None
        provider = IsoCodeProvider(client, settings.iso_codes_url, timeout=settings.http_timeout)
        return await provider.fetch_table()

    country_entries, region_entries, code_table, *series_list = await asyncio.gather(
        worldbank.fetch_countries(),
        worldbank.fetch_regions(),
        fetch_code_table(),
        *(worldbank.fetch_indicator_series(indicator) for indicator in indicators),
    )
    members = await asyncio.gather(
        *(worldbank.fetch_region_members(region.code) for region in region_entries)
    )

    countries = build_countries(
        country_entries,
        dict(zip(indicators, series_list)),
        include_aggregates=settings.include_aggregates,
    )
    regions = build_regions(region_entries, list(members), countries)

    logger.info(
        f"Dataset loaded: {len(countries)} countries, {len(regions)} regions, "
        f"{len(code_table) if code_table is not None else 0} ISO codes"
    )
    return DataContext(countries=countries, regions=regions, code_lookup=code_table)
