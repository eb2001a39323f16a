from __future__ import annotations

import datetime
import math
from typing import List, Sequence

import numpy as np
from dateutil.relativedelta import relativedelta


def excel_round(x, decimals: int = 2):
    """
    Excel ROUND: half away from zero (vectorized).
    The 1e-9 nudge absorbs binary representation error (1.005 -> 1.01).
    """
    m = 10 ** decimals
    x = np.asarray(x, dtype=float)
    return np.sign(x) * (np.floor(np.abs(x) * m + 0.5 + 1e-9) / m)


def is_finite_number(value) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def finite_or(value: float, fallback: float) -> float:
    return float(value) if is_finite_number(value) else float(fallback)


def clamp_to_zero(value: float) -> float:
    return value if value > 0 else 0.0


def floor_series_to_zero(values: Sequence[float], tolerance: float = 1e-6) -> List[float]:
    """Negative values and values within `tolerance` of zero become exactly 0."""
    return [0.0 if abs(v) < tolerance else clamp_to_zero(float(v)) for v in values]


def age_range(start_age: int, end_age: int) -> List[int]:
    """Inclusive age labels."""
    return list(range(start_age, end_age + 1))


def month_start(d: datetime.date) -> datetime.date:
    return datetime.date(d.year, d.month, 1)


def add_months(d: datetime.date, months: int) -> datetime.date:
    return month_start(d) + relativedelta(months=months)


def inclusive_month_count(start: datetime.date, end: datetime.date) -> int:
    """
    Number of calendar months from start's month to end's month, both included.
    Day-of-month is ignored: 2026-03-15 .. 2027-02-20 spans 12 months.
    """
    return (end.year - start.year) * 12 + (end.month - start.month) + 1


def term_months_from_years(years: float) -> int:
    """years x 12 rounded half-up to whole months, never below one."""
    return max(1, int(math.floor(years * 12 + 0.5)))
