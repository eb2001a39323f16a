"""
Post-retirement drawdown simulations.

Three pure functions over the ages retirement_age..horizon_end_age:

  simulate_target_income_drawdown: withdraw the inflation-indexed target
      income each year until the pot runs dry; the pot never goes negative.
  simulate_minimum_drawdown: withdraw the statutory minimum share of
      the pot (4% before 70, 5% from 70 under the default rules) and compare
      it with the target income.
  compute_required_pot_at_retirement: solve backwards for the pot that
      exactly funds the target income to the horizon.

Withdrawals are taken at the start of each year, before growth. The horizon
age itself is a balance reading only: no withdrawal is taken at it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from core.config import IRISH_MINIMUM_DRAWDOWN, MinimumDrawdownRules
from core.utils import age_range, clamp_to_zero, finite_or, floor_series_to_zero
from inputs.pension import PensionInputs


@dataclass(frozen=True)
class RetirementSimulation:
    ages: Tuple[int, ...]
    balances: Tuple[float, ...]
    withdrawals: Tuple[float, ...]
    ending_balance: float
    depletion_age: Optional[int]


@dataclass(frozen=True)
class MinimumDrawdownSimulation:
    ages: Tuple[int, ...]
    balances: Tuple[float, ...]
    min_drawdowns: Tuple[float, ...]
    targets: Tuple[float, ...]
    ending_balance: float
    exhausted_age: Optional[int]

    @property
    def first_year_minimum_drawdown(self) -> float:
        return self.min_drawdowns[0] if self.min_drawdowns else 0.0

    @property
    def first_year_target_income(self) -> float:
        return self.targets[0] if self.targets else 0.0

    @property
    def first_year_meets_target(self) -> bool:
        return self.first_year_minimum_drawdown >= self.first_year_target_income


def target_income_at_age(inputs: PensionInputs, age: int) -> float:
    """Target income in money of the year the member reaches `age`."""
    years_indexed = max(0, age - inputs.retirement_age)
    nominal = inputs.target_income_today * (1.0 + inputs.inflation_rate) ** years_indexed
    return finite_or(nominal, 0.0)


def _withdrawal_at_age(inputs: PensionInputs, age: int) -> float:
    if age > inputs.horizon_end_age - 1:
        return 0.0
    return target_income_at_age(inputs, age)


def simulate_target_income_drawdown(
    inputs: PensionInputs,
    start_balance: float,
    *,
    zero_floor: float = 1e-6,
) -> RetirementSimulation:
    ages = age_range(inputs.retirement_age, inputs.horizon_end_age)
    balances: List[float] = []
    withdrawals: List[float] = []
    balance = clamp_to_zero(start_balance)

    for age in ages:
        current = clamp_to_zero(balance)
        balances.append(current)

        withdrawal = _withdrawal_at_age(inputs, age)
        withdrawals.append(withdrawal)

        remaining = current - withdrawal
        if remaining <= 0:
            balance = 0.0
            continue
        balance = clamp_to_zero(remaining * (1.0 + inputs.growth_rate))

    floored = floor_series_to_zero(balances, zero_floor)
    depletion_age = next((age for age, b in zip(ages, floored) if b == 0.0), None)

    return RetirementSimulation(
        ages=tuple(ages),
        balances=tuple(balances),
        withdrawals=tuple(withdrawals),
        ending_balance=clamp_to_zero(balance),
        depletion_age=depletion_age,
    )


def simulate_minimum_drawdown(
    inputs: PensionInputs,
    start_balance: float,
    *,
    rules: MinimumDrawdownRules = IRISH_MINIMUM_DRAWDOWN,
) -> MinimumDrawdownSimulation:
    ages = age_range(inputs.retirement_age, inputs.horizon_end_age)
    balances: List[float] = []
    min_drawdowns: List[float] = []
    targets: List[float] = []
    exhausted_age: Optional[int] = None
    balance = clamp_to_zero(start_balance)

    for age in ages:
        current = clamp_to_zero(balance)
        minimum = rules.rate_at(age) * current

        balances.append(current)
        min_drawdowns.append(minimum)
        targets.append(target_income_at_age(inputs, age))

        if current <= 0:
            balance = 0.0
            continue
        if minimum >= current:
            # pot fully paid out; the path stays at zero from here on
            balance = 0.0
            if exhausted_age is None:
                exhausted_age = age
            continue
        balance = clamp_to_zero((current - minimum) * (1.0 + inputs.growth_rate))

    return MinimumDrawdownSimulation(
        ages=tuple(ages),
        balances=tuple(balances),
        min_drawdowns=tuple(min_drawdowns),
        targets=tuple(targets),
        ending_balance=clamp_to_zero(balance),
        exhausted_age=exhausted_age,
    )


def compute_required_pot_at_retirement(inputs: PensionInputs) -> float:
    """
    Pot at retirement that exactly funds the target-income withdrawals from
    retirement_age to horizon_end_age - 1:
        required <- withdrawal(age) + required / (1 + growth)
    iterated from the horizon back to retirement.
    """
    required = 0.0
    for age in range(inputs.horizon_end_age - 1, inputs.retirement_age - 1, -1):
        required = target_income_at_age(inputs, age) + required / (1.0 + inputs.growth_rate)
    return clamp_to_zero(required)
