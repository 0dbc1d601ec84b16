"""HTML rendering for the page shell and the htmx fragments."""
from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

from fastapi.templating import Jinja2Templates

from .models import CountryReport, Sort, SortColumn, SortDirection

TEMPLATES_DIR = Path(__file__).parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

# (success, warning) thresholds; anything else is "danger"
Thresholds = Tuple[Callable[[float], bool], Callable[[float], bool]]
HIGHER_IS_BETTER: Thresholds = (lambda x: x > 40.0, lambda x: x > 10.0)
LOWER_IS_BETTER: Thresholds = (lambda x: x < 25.0, lambda x: x < 50.0)

COLUMNS: List[Tuple[str, SortColumn, Optional[Thresholds]]] = [
    ("Country", SortColumn.COUNTRY, None),
    ("Energy Imports (% of total)", SortColumn.IMPORTS, LOWER_IS_BETTER),
    ("Renewables (% of total)", SortColumn.RENEWABLES, HIGHER_IS_BETTER),
    ("Fossil Fuels (% of total)", SortColumn.FOSSIL, LOWER_IS_BETTER),
    ("Nuclear & Other (% of total)", SortColumn.NUCLEAR, HIGHER_IS_BETTER),
]


@dataclass(frozen=True)
class Header:
    title: str
    css_class: str
    hx_vals: str


@dataclass(frozen=True)
class Cell:
    text: str
    colour: str
    width: float


def pick_cell_colour(thresholds: Thresholds, value: float) -> str:
    success, warning = thresholds
    if success(value):
        return "bg-success"
    if warning(value):
        return "bg-warning"
    return "bg-danger"


def build_header(title: str, column: SortColumn, sort: Optional[Sort]) -> Header:
    """Header button for a column; clicking it re-sorts by that column.

    Clicking the active column flips its direction, any other column sorts
    ascending.
    """
    if sort is not None and sort[0] is column:
        current = sort[1]
        next_direction = current.toggled()
        indicator = "asc" if current is SortDirection.ASCENDING else "desc"
    else:
        next_direction = SortDirection.ASCENDING
        indicator = ""

    hx_vals = json.dumps({"sortColumn": column.value, "sortDirection": next_direction.value})
    return Header(title=title, css_class=f"table-sort {indicator}".strip(), hx_vals=hx_vals)


def build_cell(value: float, thresholds: Thresholds) -> Cell:
    return Cell(
        text=f"{value:.2f}%",
        colour=pick_cell_colour(thresholds, value),
        width=min(max(value, 0.0), 100.0),
    )


def build_row(report: CountryReport) -> List[Cell]:
    return [
        build_cell(getattr(report, column.report_field), thresholds)
        for _, column, thresholds in COLUMNS
        if column.is_numeric
    ]


def render_index() -> str:
    return templates.get_template("index.html").render()


def render_suggestions(destinations: Sequence[str]) -> str:
    return templates.get_template("suggestions.html").render(destinations=destinations)


def render_reports_table(sort: Optional[Sort], reports: Sequence[CountryReport]) -> str:
    headers = [build_header(title, column, sort) for title, column, _ in COLUMNS]
    rows = [(report, build_row(report)) for report in reports]
    return templates.get_template("reports_table.html").render(headers=headers, rows=rows)
