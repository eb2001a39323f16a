"""
MaxPersonalPolicy — contribute the most that still attracts tax relief.

The relief limit is an age-banded share of salary, applied to salary capped at
the earnings limit. Both come from ContributionLimits so the bands can be
replaced for another jurisdiction.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.config import IRISH_CONTRIBUTION_LIMITS, ContributionLimits

from .base import ContributionPolicy


@dataclass(frozen=True)
class MaxPersonalPolicy(ContributionPolicy):
    """personal = band_pct(age) x min(salary, earnings_cap)."""

    limits: ContributionLimits = IRISH_CONTRIBUTION_LIMITS
    name: str = "max_personal"

    def band_pct(self, age: int) -> float:
        return self.limits.band_pct(age)

    def capped_salary(self, salary: float) -> float:
        return min(salary, self.limits.earnings_cap)

    def personal_contribution(self, age: int, salary: float) -> float:
        return self.band_pct(age) * self.capped_salary(salary)
