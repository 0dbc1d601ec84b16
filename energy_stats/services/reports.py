"""Build country reports from the latest indicator observations."""
from __future__ import annotations

from typing import Optional, Protocol

from ..models import Country, CountryReport, Indicator
from .cache import ReportCache


class CodeLookup(Protocol):
    def lookup_alpha2(self, alpha3: Optional[str]) -> Optional[str]: ...


def flag_code(country: Country, code_lookup: Optional[CodeLookup] = None) -> Optional[str]:
    """Lowercase two-letter code used for the flag icon, if one is known."""
    if code_lookup is not None:
        code = code_lookup.lookup_alpha2(country.code)
        if code:
            return code.lower()
    iso2 = country.iso2_code
    if iso2 and len(iso2) == 2 and iso2.isalpha():
        return iso2.lower()
    return None


def _build_report(country: Country, code_lookup: Optional[CodeLookup]) -> Optional[CountryReport]:
    nuclear = country.latest(Indicator.NUCLEAR)
    imports = country.latest(Indicator.ENERGY_IMPORTS)
    renewables = country.latest(Indicator.RENEWABLES)
    fossils = country.latest(Indicator.FOSSIL_FUELS)
    if nuclear is None or imports is None or renewables is None or fossils is None:
        return None

    return CountryReport(
        country=country.name,
        code=flag_code(country, code_lookup),
        nuclear=nuclear.value,
        energy_imports=imports.value,
        renewable_energy_consumption=renewables.value,
        fossil_fuel_energy_consumption=fossils.value,
    )


def try_build_report(
    country: Country,
    code_lookup: Optional[CodeLookup] = None,
    cache: Optional[ReportCache] = None,
) -> Optional[CountryReport]:
    """Report on a country's most recent figures.

    Returns None when any of the four indicator series has no observations.
    With a cache the result, including None, is memoised by country code.
    """
    if cache is None:
        return _build_report(country, code_lookup)
    return cache.get_or_create(country.code, lambda: _build_report(country, code_lookup))
