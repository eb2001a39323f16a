"""
Projection configuration.

Policy tables (relief bands, fund threshold schedule, minimum drawdown rates)
are plain data so another jurisdiction's figures can be dropped in without
touching the simulators.
"""

from __future__ import annotations

import bisect
from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass(frozen=True)
class ContributionLimits:
    """
    Age-banded personal contribution relief.

    age_bands: ordered (upper_age_exclusive, pct) pairs; the last band uses
    None as its upper bound and applies to every older age.
    earnings_cap: salary above this is ignored when applying the band pct.
    """

    age_bands: Tuple[Tuple[Optional[int], float], ...]
    earnings_cap: float

    def band_pct(self, age: int) -> float:
        for upper, pct in self.age_bands:
            if upper is None or age < upper:
                return pct
        return self.age_bands[-1][1]


@dataclass(frozen=True)
class ThresholdSchedule:
    """
    Fund threshold by retirement year.

    steps: ascending (year, value) pairs. Years before the first step use the
    first value; years after the last step hold the last value constant.
    """

    steps: Tuple[Tuple[int, float], ...]

    @property
    def last_year(self) -> int:
        return self.steps[-1][0]

    def lookup(self, year: int) -> Tuple[int, float]:
        years = [y for y, _ in self.steps]
        idx = bisect.bisect_right(years, year) - 1
        if idx < 0:
            idx = 0
        return self.steps[idx]


@dataclass(frozen=True)
class MinimumDrawdownRules:
    """Ordered (upper_age_exclusive, rate) pairs; None marks the open-ended band."""

    bands: Tuple[Tuple[Optional[int], float], ...]

    def rate_at(self, age: int) -> float:
        for upper, rate in self.bands:
            if upper is None or age < upper:
                return rate
        return self.bands[-1][1]


IRISH_CONTRIBUTION_LIMITS = ContributionLimits(
    age_bands=(
        (30, 0.15),
        (40, 0.20),
        (50, 0.25),
        (55, 0.30),
        (60, 0.35),
        (None, 0.40),
    ),
    earnings_cap=115_000.0,
)

# Standard Fund Threshold; indexation beyond the last step is not modelled.
IRISH_SFT_SCHEDULE = ThresholdSchedule(
    steps=(
        (2026, 2_200_000.0),
        (2027, 2_400_000.0),
        (2028, 2_600_000.0),
        (2029, 2_800_000.0),
    )
)

IRISH_MINIMUM_DRAWDOWN = MinimumDrawdownRules(bands=((70, 0.04), (None, 0.05)))


@dataclass(frozen=True)
class ProjectionConfig:
    contribution_limits: ContributionLimits = IRISH_CONTRIBUTION_LIMITS
    threshold_schedule: ThresholdSchedule = IRISH_SFT_SCHEDULE
    minimum_drawdown: MinimumDrawdownRules = IRISH_MINIMUM_DRAWDOWN

    # iteration guards
    max_projection_years: int = 150
    max_term_months: int = 1200

    # balance at age n below this share of age n-1 is reported as a drop
    monotonic_tolerance: float = 0.99

    # values closer to zero than this are treated as exactly zero
    zero_floor: float = field(default=1e-6)


DEFAULT_CONFIG = ProjectionConfig()

DEFAULT_HORIZON_END_AGE = 100
DEFAULT_INFLATION_RATE = 0.025
DEFAULT_WAGE_GROWTH_RATE = 0.025
