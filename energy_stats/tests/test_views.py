from __future__ import annotations

import json

import pytest

from energy_stats import views
from energy_stats.models import CountryReport, SortColumn, SortDirection


def make_report(name: str = "France", code: str | None = "fr", **values) -> CountryReport:
    fields = {
        "nuclear": 48.5,
        "energy_imports": 46.1,
        "renewable_energy_consumption": 14.6,
        "fossil_fuel_energy_consumption": 46.3,
    }
    fields.update(values)
    return CountryReport(country=name, code=code, **fields)


class TestCellColour:
    @pytest.mark.parametrize("value, colour", [(41.0, "bg-success"), (40.0, "bg-warning"), (10.5, "bg-warning"), (10.0, "bg-danger")])
    def test_higher_is_better(self, value, colour):
        assert views.pick_cell_colour(views.HIGHER_IS_BETTER, value) == colour

    @pytest.mark.parametrize("value, colour", [(24.9, "bg-success"), (25.0, "bg-warning"), (49.9, "bg-warning"), (50.0, "bg-danger")])
    def test_lower_is_better(self, value, colour):
        assert views.pick_cell_colour(views.LOWER_IS_BETTER, value) == colour

    def test_width_is_clamped(self):
        assert views.build_cell(-120.0, views.LOWER_IS_BETTER).width == 0.0
        assert views.build_cell(130.0, views.LOWER_IS_BETTER).width == 100.0
        assert views.build_cell(-120.0, views.LOWER_IS_BETTER).text == "-120.00%"


class TestHeaders:
    def test_inactive_column_sorts_ascending(self):
        header = views.build_header("Country", SortColumn.COUNTRY, None)
        assert header.css_class == "table-sort"
        assert json.loads(header.hx_vals) == {"sortColumn": "Country", "sortDirection": "Ascending"}

    def test_active_ascending_column_toggles(self):
        header = views.build_header("Imports", SortColumn.IMPORTS, (SortColumn.IMPORTS, SortDirection.ASCENDING))
        assert header.css_class == "table-sort asc"
        assert json.loads(header.hx_vals)["sortDirection"] == "Descending"

    def test_active_descending_column_toggles(self):
        header = views.build_header("Imports", SortColumn.IMPORTS, (SortColumn.IMPORTS, SortDirection.DESCENDING))
        assert header.css_class == "table-sort desc"
        assert json.loads(header.hx_vals)["sortDirection"] == "Ascending"

    def test_other_column_active(self):
        header = views.build_header("Nuclear", SortColumn.NUCLEAR, (SortColumn.IMPORTS, SortDirection.DESCENDING))
        assert header.css_class == "table-sort"
        assert json.loads(header.hx_vals)["sortDirection"] == "Ascending"


def test_row_cells_follow_column_order():
    cells = views.build_row(make_report())
    assert [c.text for c in cells] == ["46.10%", "14.60%", "46.30%", "48.50%"]


def test_numeric_columns_get_threshold_cells():
    numeric = [column for _, column, _ in views.COLUMNS if column.is_numeric]
    assert SortColumn.COUNTRY not in numeric
    assert all(thresholds is not None for _, column, thresholds in views.COLUMNS if column.is_numeric)
    assert len(views.build_row(make_report())) == len(numeric) == 4


def test_render_suggestions_escapes_names():
    html = views.render_suggestions(["France", "Bosnia & Herzegovina"])
    assert 'id="search-suggestions"' in html
    assert '<option value="France"></option>' in html
    assert "Bosnia &amp; Herzegovina" in html


def test_render_empty_suggestions():
    html = views.render_suggestions([])
    assert "<option" not in html


def test_render_reports_table():
    html = views.render_reports_table(
        (SortColumn.COUNTRY, SortDirection.ASCENDING),
        [make_report(), make_report("Atlantis", code=None, nuclear=5.0)],
    )
    assert "flag flag-country-fr" in html
    assert "Atlantis" in html
    assert html.count("flag-country-") == 1
    assert "48.50%" in html and "5.00%" in html
    assert "table-sort asc" in html
    assert 'hx-post="/do-search"' in html


def test_render_empty_table():
    html = views.render_reports_table(None, [])
    assert "<tbody" in html
    assert "<td" not in html


def test_render_index():
    html = views.render_index()
    assert 'name="searchinput"' in html
    assert 'hx-post="/search-suggestions"' in html
    assert 'id="search-results"' in html
    assert "htmx" in html
