"""
CurrentPathPolicy — the member keeps contributing the same share of salary.
"""

from __future__ import annotations

from dataclasses import dataclass

from .base import ContributionPolicy


@dataclass(frozen=True)
class CurrentPathPolicy(ContributionPolicy):
    """personal = personal_pct x salary, uncapped."""

    personal_pct: float
    name: str = "current"

    def personal_contribution(self, age: int, salary: float) -> float:
        return self.personal_pct * salary
