"""
Pension accumulation — year-by-year pot growth up to retirement.

Recurrence for each age a in [current_age, retirement_age):
    salary(a)   = current_salary x (1 + wage_growth)^(a - current_age)
    personal    = policy(a, salary(a))
    employer    = employer_pct x salary(a)
    balance    <- (balance + personal + employer) x (1 + growth)

Balances are read at the start of each age, so the series runs from
current_age to retirement_age inclusive and its last value is the pot at
retirement.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Tuple

import numpy as np

from core.utils import finite_or
from inputs.pension import PensionInputs

logger = logging.getLogger(__name__)

PersonalContributionFn = Callable[[int, float], float]


@dataclass(frozen=True)
class AccumulationSeries:
    """
    One accumulation path. Flow series (personal, employer, contributions,
    growth) are padded with a trailing 0 so every series matches `ages`.
    """

    ages: Tuple[int, ...]
    balances: Tuple[float, ...]
    salaries: Tuple[float, ...]
    personal: Tuple[float, ...]
    employer: Tuple[float, ...]
    contributions: Tuple[float, ...]
    growth: Tuple[float, ...]

    @property
    def retirement_pot(self) -> float:
        return self.balances[-1]


@dataclass(frozen=True)
class MonotonicDrop:
    """Balance at `age` fell below the tolerated share of the previous year."""

    age: int
    previous: float
    current: float
    drop_pct: float


def salary_path(inputs: PensionInputs) -> np.ndarray:
    """Salary at each age from current_age up to (not including) retirement_age."""
    years = np.arange(inputs.years_to_retirement, dtype=float)
    return inputs.current_salary * np.power(1.0 + inputs.wage_growth_rate, years)


def simulate_accumulation(
    inputs: PensionInputs,
    personal_contribution: PersonalContributionFn,
) -> AccumulationSeries:
    """Run the accumulation recurrence under a contribution policy."""
    salaries = salary_path(inputs)

    ages: List[int] = [inputs.current_age]
    balances: List[float] = [float(inputs.current_pot)]
    personal_series: List[float] = []
    employer_series: List[float] = []
    contrib_series: List[float] = []
    growth_series: List[float] = []

    balance = float(inputs.current_pot)
    for offset, salary in enumerate(salaries):
        age = inputs.current_age + offset
        salary = float(salary)

        personal = finite_or(personal_contribution(age, salary), 0.0)
        employer = finite_or(inputs.employer_pct * salary, 0.0)
        contributed = personal + employer
        pre_growth = balance + contributed
        end_balance = pre_growth * (1.0 + inputs.growth_rate)

        balance = finite_or(end_balance, pre_growth)
        personal_series.append(personal)
        employer_series.append(employer)
        contrib_series.append(contributed)
        growth_series.append(finite_or(end_balance - pre_growth, 0.0))

        ages.append(age + 1)
        balances.append(balance)

    pad = [0.0] * (len(ages) - len(personal_series))
    return AccumulationSeries(
        ages=tuple(ages),
        balances=tuple(balances),
        salaries=tuple(float(s) for s in salaries) + (0.0,),
        personal=tuple(personal_series + pad),
        employer=tuple(employer_series + pad),
        contributions=tuple(contrib_series + pad),
        growth=tuple(growth_series + pad),
    )


def find_monotonic_drops(
    series: AccumulationSeries,
    *,
    tolerance: float = 0.99,
) -> Tuple[MonotonicDrop, ...]:
    """
    Report every age whose balance fell below `tolerance` x the previous
    balance while the previous balance was positive.

    A drop here means the contribution policy misbehaved, not that the user
    typed something wrong, so it is logged and returned and never raised.
    """
    drops: List[MonotonicDrop] = []
    for idx in range(1, len(series.balances)):
        previous = series.balances[idx - 1]
        current = series.balances[idx]
        if previous > 0 and current < previous * tolerance:
            drop = MonotonicDrop(
                age=series.ages[idx],
                previous=previous,
                current=current,
                drop_pct=(previous - current) / previous * 100.0,
            )
            logger.warning(
                "Accumulation balance dropped %.2f%% at age %d (%.2f -> %.2f)",
                drop.drop_pct,
                drop.age,
                previous,
                current,
            )
            drops.append(drop)
    return tuple(drops)
