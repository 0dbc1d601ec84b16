"""
Search over countries and regions.

Matching ignores surrounding whitespace on both the query and the
candidate names, and compares case-insensitively with ``str.casefold``.
Exact matches take priority over substring matches: a query naming a
country returns that country alone, a query naming a region returns all of
its members, and anything else falls back to a substring search over
country names.
"""
from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from ..models import Country, CountryReport, Sort
from .cache import ReportCache
from .dataset import DataContext
from .reports import try_build_report
from .sorting import sort_reports

logger = logging.getLogger(__name__)

DEFAULT_SUGGESTION_LIMIT = 10


def _normalise(value: str) -> str:
    return value.strip().casefold()


def contains_text(text: str, value: str) -> bool:
    return _normalise(text) in _normalise(value)


def matches(text: str, value: str) -> bool:
    return _normalise(text) == _normalise(value)


class SearchService:
    """Resolves free-text input against a ``DataContext``."""

    def __init__(
        self,
        context: DataContext,
        cache: Optional[ReportCache] = None,
        suggestion_limit: int = DEFAULT_SUGGESTION_LIMIT,
    ) -> None:
        self.context = context
        self.cache = cache
        self.suggestion_limit = suggestion_limit
        self._destinations: List[str] = [c.name.strip() for c in context.countries] + [
            r.name.strip() for r in context.regions
        ]

    def _reports(self, countries: Iterable[Country]) -> List[CountryReport]:
        reports = []
        for country in countries:
            report = try_build_report(country, self.context.code_lookup, self.cache)
            if report is not None:
                reports.append(report)
        return reports

    def find_destinations(self, text: Optional[str] = None) -> List[str]:
        """Suggest up to ``suggestion_limit`` country or region names containing the text."""
        if text is None:
            candidates = self._destinations
        else:
            candidates = [d for d in self._destinations if contains_text(text, d)]
        return candidates[: self.suggestion_limit]

    def find_reports_by_countries(self, text: str) -> List[CountryReport]:
        """Reports for every country whose name contains the text."""
        return self._reports(c for c in self.context.countries if contains_text(text, c.name))

    def try_exact_match_reports(self, text: str) -> Optional[List[CountryReport]]:
        """Reports for a country or region named exactly by the text.

        A country match wins over a region match. Returns None when neither
        matches, and an empty list when a country matches but has no report.
        """
        country = next((c for c in self.context.countries if matches(text, c.name)), None)
        if country is not None:
            return self._reports([country])

        region = next((r for r in self.context.regions if matches(text, r.name)), None)
        if region is not None:
            logger.debug(f"Query {text!r} matched region {region.code} ({len(region.countries)} countries)")
            return self._reports(region.countries)
        return None

    def resolve_reports(self, sort: Optional[Sort], text: Optional[str]) -> List[CountryReport]:
        """Resolve search text to sorted reports.

        Absent text runs the substring search with an empty string, which
        matches every country.
        """
        reports = None
        if text is not None:
            reports = self.try_exact_match_reports(text)
        if reports is None:
            reports = self.find_reports_by_countries(text or "")
        return sort_reports(sort, reports)
