import datetime

import pytest

from core.formatting import format_euro, format_euro_compact, format_percent
from core.utils import (
    add_months,
    excel_round,
    floor_series_to_zero,
    inclusive_month_count,
    term_months_from_years,
)


@pytest.mark.parametrize(
    "value, decimals, expected",
    [(1.005, 2, 1.01), (2.5, 0, 3.0), (-2.5, 0, -3.0), (1234.5678, 2, 1234.57)],
)
def test_excel_round_half_away_from_zero(value, decimals, expected):
    assert float(excel_round(value, decimals)) == expected


def test_format_euro():
    assert format_euro(1234.4) == "€1,234"
    assert format_euro(-1234) == "-€1,234"
    assert format_euro(-0.4) == "€0"
    assert format_euro(1234.5, 2) == "€1,234.50"
    assert format_euro(float("nan")) == "€0"


@pytest.mark.parametrize(
    "value, expected",
    [(2_200_000, "€2.2m"), (2_800_000, "€2.8m"), (950_000, "€950,000"), (float("inf"), "€0")],
)
def test_format_euro_compact(value, expected):
    assert format_euro_compact(value) == expected


def test_format_percent():
    assert format_percent(0.025) == "2.5%"
    assert format_percent(0.06, 2) == "6.00%"


def test_floor_series_to_zero():
    assert floor_series_to_zero([5.0, 1e-9, -3.0], tolerance=1e-6) == [5.0, 0.0, 0.0]


def test_month_helpers():
    start = datetime.date(2026, 11, 15)
    assert add_months(start, 2) == datetime.date(2027, 1, 1)
    assert inclusive_month_count(start, datetime.date(2026, 11, 1)) == 1
    assert inclusive_month_count(start, datetime.date(2026, 10, 31)) == 0


@pytest.mark.parametrize("years, months", [(30, 360), (0.04, 1), (1.54, 18), (0, 1)])
def test_term_months_from_years(years, months):
    assert term_months_from_years(years) == months
