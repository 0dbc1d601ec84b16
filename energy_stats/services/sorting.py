from __future__ import annotations

from operator import attrgetter
from typing import Iterable, List, Optional

from ..models import CountryReport, Sort, SortDirection


def sort_reports(sort: Optional[Sort], reports: Iterable[CountryReport]) -> List[CountryReport]:
    """Order reports by a column and direction.

    The sort is stable in both directions, so ties keep their input order.
    Without a sort the reports are returned in the order given.
    """
    if sort is None:
        return list(reports)

    column, direction = sort
    return sorted(
        reports,
        key=attrgetter(column.report_field),
        reverse=direction is SortDirection.DESCENDING,
    )
