from __future__ import annotations

from enum import Enum
from typing import Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class Indicator(str, Enum):
    """World Bank indicator series needed for a country report."""

    NUCLEAR = "EG.USE.COMM.CL.ZS"  # Alternative and nuclear energy (% of total energy use)
    ENERGY_IMPORTS = "EG.IMP.CONS.ZS"  # Energy imports, net (% of energy use)
    RENEWABLES = "EG.FEC.RNEW.ZS"  # Renewable energy consumption (% of total final energy consumption)
    FOSSIL_FUELS = "EG.USE.COMM.FO.ZS"  # Fossil fuel energy consumption (% of total)


class Observation(BaseModel):
    model_config = ConfigDict(frozen=True)

    year: int
    value: float


class Country(BaseModel):
    """A country as supplied by the World Bank, with its indicator series.

    Each series is ordered by ascending year and holds only non-null values.
    """

    model_config = ConfigDict(frozen=True)

    code: str
    name: str
    iso2_code: Optional[str] = None
    indicators: Dict[Indicator, Tuple[Observation, ...]] = Field(default_factory=dict)

    def series(self, indicator: Indicator) -> Tuple[Observation, ...]:
        return self.indicators.get(indicator, ())

    def latest(self, indicator: Indicator) -> Optional[Observation]:
        """Return the most recent observation for an indicator, if any."""
        values = self.series(indicator)
        return values[-1] if values else None


class Region(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: str
    name: str
    countries: Tuple[Country, ...] = ()


class CountryReport(BaseModel):
    """Latest energy figures for one country."""

    model_config = ConfigDict(frozen=True)

    country: str
    code: Optional[str] = None
    nuclear: float
    energy_imports: float
    renewable_energy_consumption: float
    fossil_fuel_energy_consumption: float


class SortColumn(str, Enum):
    COUNTRY = "Country"
    IMPORTS = "Imports"
    RENEWABLES = "Renewables"
    FOSSIL = "Fossil"
    NUCLEAR = "Nuclear"

    @classmethod
    def try_parse(cls, value: Optional[str]) -> Optional["SortColumn"]:
        """Parse the request encoding of a column; unknown values give None."""
        for column in cls:
            if column.value == value:
                return column
        return None

    @property
    def is_numeric(self) -> bool:
        return self is not SortColumn.COUNTRY

    @property
    def report_field(self) -> str:
        """Name of the CountryReport attribute this column sorts on."""
        return _REPORT_FIELDS[self]


_REPORT_FIELDS: Dict[SortColumn, str] = {
    SortColumn.COUNTRY: "country",
    SortColumn.IMPORTS: "energy_imports",
    SortColumn.RENEWABLES: "renewable_energy_consumption",
    SortColumn.FOSSIL: "fossil_fuel_energy_consumption",
    SortColumn.NUCLEAR: "nuclear",
}


class SortDirection(str, Enum):
    ASCENDING = "Ascending"
    DESCENDING = "Descending"

    @classmethod
    def try_parse(cls, value: Optional[str]) -> Optional["SortDirection"]:
        for direction in cls:
            if direction.value == value:
                return direction
        return None

    def toggled(self) -> "SortDirection":
        if self is SortDirection.ASCENDING:
            return SortDirection.DESCENDING
        return SortDirection.ASCENDING


Sort = Tuple[SortColumn, SortDirection]


class RawSearchRequest(BaseModel):
    """Form fields posted by the search page, exactly as received."""

    model_config = ConfigDict(populate_by_name=True)

    search_input: Optional[str] = Field(default=None, alias="searchinput")
    sort_column: Optional[str] = Field(default=None, alias="sortColumn")
    sort_direction: Optional[str] = Field(default=None, alias="sortDirection")


class SearchRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    search_input: Optional[str] = None
    sort: Optional[Sort] = None

    @classmethod
    def from_raw(cls, raw: RawSearchRequest, default_sort: Optional[Sort] = None) -> "SearchRequest":
        """Validate raw form values.

        A sort is only taken from the request when both the column and the
        direction are recognised; anything else falls back to ``default_sort``.
        """
        column = SortColumn.try_parse(raw.sort_column)
        direction = SortDirection.try_parse(raw.sort_direction)
        sort = (column, direction) if column is not None and direction is not None else default_sort
        return cls(search_input=raw.search_input, sort=sort)
