"""
Shared pytest fixtures for energy-stats tests.

The dataset fixtures describe a tiny World Bank snapshot: France and
Germany have all four indicators, Spain lacks fossil fuel data, and
Ireland is listed with surrounding whitespace in its name.
"""
from __future__ import annotations

import os
from typing import Dict, List, Tuple

import pytest

# Set test environment before importing application modules
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("ENABLE_ISO_CODE_LOOKUP", "false")

from energy_stats.models import Country, Indicator, Observation, Region  # noqa: E402
from energy_stats.providers.iso_codes import IsoCodeTable  # noqa: E402
from energy_stats.services.dataset import DataContext  # noqa: E402


def make_series(*pairs: Tuple[int, float]) -> Tuple[Observation, ...]:
    return tuple(Observation(year=year, value=value) for year, value in pairs)


def make_country(
    code: str,
    name: str,
    iso2_code: str | None = None,
    nuclear: Tuple[Tuple[int, float], ...] = ((2014, 10.0),),
    imports: Tuple[Tuple[int, float], ...] = ((2014, 20.0),),
    renewables: Tuple[Tuple[int, float], ...] = ((2014, 30.0),),
    fossils: Tuple[Tuple[int, float], ...] = ((2014, 40.0),),
) -> Country:
    return Country(
        code=code,
        name=name,
        iso2_code=iso2_code,
        indicators={
            Indicator.NUCLEAR: make_series(*nuclear),
            Indicator.ENERGY_IMPORTS: make_series(*imports),
            Indicator.RENEWABLES: make_series(*renewables),
            Indicator.FOSSIL_FUELS: make_series(*fossils),
        },
    )


# ============================================================================
# Dataset Fixtures
# ============================================================================

@pytest.fixture
def france() -> Country:
    return make_country(
        "FRA",
        "France",
        "FR",
        nuclear=((2013, 47.0), (2014, 48.5)),
        imports=((2013, 47.9), (2014, 46.1)),
        renewables=((2013, 13.9), (2015, 14.6)),
        fossils=((2014, 46.3),),
    )


@pytest.fixture
def germany() -> Country:
    return make_country(
        "DEU",
        "Germany",
        "DE",
        nuclear=((2014, 11.2),),
        imports=((2014, 61.4),),
        renewables=((2014, 13.8), (2015, 14.2)),
        fossils=((2014, 79.6),),
    )


@pytest.fixture
def spain() -> Country:
    return make_country("ESP", "Spain", "ES", fossils=())


@pytest.fixture
def ireland() -> Country:
    return make_country(
        "IRL",
        "  Ireland ",
        "IE",
        nuclear=((2014, 2.3),),
        imports=((2014, 85.3),),
        renewables=((2014, 8.9),),
        fossils=((2014, 85.0),),
    )


@pytest.fixture
def countries(france, germany, spain, ireland) -> List[Country]:
    return [france, germany, spain, ireland]


@pytest.fixture
def europe(france, germany, spain) -> Region:
    return Region(code="ECS", name="Europe", countries=(france, germany, spain))


@pytest.fixture
def regions(europe) -> List[Region]:
    return [europe, Region(code="SAS", name=" South Asia ", countries=())]


@pytest.fixture
def data_context(countries, regions) -> DataContext:
    return DataContext(countries=tuple(countries), regions=tuple(regions))


@pytest.fixture
def iso_table() -> IsoCodeTable:
    return IsoCodeTable({"FRA": "FR", "DEU": "DE", "ESP": "ES"})


@pytest.fixture
def many_countries() -> List[Country]:
    """Twelve countries with complete data, named Country 01 .. Country 12."""
    return [make_country(f"C{i:02d}", f"Country {i:02d}") for i in range(1, 13)]


# ============================================================================
# Provider Fixtures
# ============================================================================

@pytest.fixture
def worldbank_countries_response() -> List:
    """Sample World Bank ``/country`` response."""
    return [
        {"page": 1, "pages": 1, "per_page": "20000", "total": 3},
        [
            {
                "id": "AFE",
                "iso2Code": "ZH",
                "name": "Africa Eastern and Southern",
                "region": {"id": "NA", "iso2code": "NA", "value": "Aggregates"},
            },
            {
                "id": "FRA",
                "iso2Code": "FR",
                "name": "France",
                "region": {"id": "ECS", "iso2code": "Z7", "value": "Europe & Central Asia"},
            },
            {
                "id": "DEU",
                "iso2Code": "DE",
                "name": "Germany",
                "region": {"id": "ECS", "iso2code": "Z7", "value": "Europe & Central Asia"},
            },
        ],
    ]


@pytest.fixture
def worldbank_regions_response() -> List:
    return [
        {"page": 1, "pages": 1, "per_page": "20000", "total": 1},
        [{"id": "", "code": "ECS", "iso2code": "Z7", "name": "Europe & Central Asia"}],
    ]


@pytest.fixture
def worldbank_error_response() -> List:
    return [
        {
            "message": [
                {"id": "120", "key": "Invalid value", "value": "The provided parameter value is not valid"}
            ]
        }
    ]


def indicator_response(indicator: Indicator, values: Dict[str, List[Tuple[str, float | None]]]) -> List:
    """Build a World Bank ``/country/all/indicator`` response, newest year first."""
    rows = []
    for code, observations in values.items():
        for date, value in observations:
            rows.append(
                {
                    "indicator": {"id": indicator.value, "value": indicator.name},
                    "country": {"id": code[:2], "value": code},
                    "countryiso3code": code,
                    "date": date,
                    "value": value,
                }
            )
    return [{"page": 1, "pages": 1, "per_page": "20000", "total": len(rows)}, rows]


# ============================================================================
# Cleanup Fixtures
# ============================================================================

@pytest.fixture(autouse=True)
def reset_http_pool():
    """Drop the shared HTTP client between tests."""
    yield
    from energy_stats.services.http_pool import HTTPClientPool
    HTTPClientPool._client = None
    HTTPClientPool._instance = None
