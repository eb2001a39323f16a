"""
Projection engine — pension accumulation/drawdown, fund threshold checks and
loan amortization. Every function is a pure transform of its arguments.
"""

from .accumulation import (
    AccumulationSeries,
    MonotonicDrop,
    find_monotonic_drops,
    simulate_accumulation,
)
from .amortization import (
    AmortizationSchedule,
    AnnualAmortizationRow,
    MonthlyAmortizationRow,
    compute_amortization_schedule,
    compute_monthly_payment,
    resolve_term,
)
from .drawdown import (
    MinimumDrawdownSimulation,
    RetirementSimulation,
    compute_required_pot_at_retirement,
    simulate_minimum_drawdown,
    simulate_target_income_drawdown,
    target_income_at_age,
)
from .threshold import (
    BreachFlags,
    ThresholdMeta,
    build_breach_sentence,
    classify_breaches,
    resolve_threshold,
)

__all__ = [
    "AccumulationSeries",
    "MonotonicDrop",
    "find_monotonic_drops",
    "simulate_accumulation",
    "AmortizationSchedule",
    "AnnualAmortizationRow",
    "MonthlyAmortizationRow",
    "compute_amortization_schedule",
    "compute_monthly_payment",
    "resolve_term",
    "MinimumDrawdownSimulation",
    "RetirementSimulation",
    "compute_required_pot_at_retirement",
    "simulate_minimum_drawdown",
    "simulate_target_income_drawdown",
    "target_income_at_age",
    "BreachFlags",
    "ThresholdMeta",
    "build_breach_sentence",
    "classify_breaches",
    "resolve_threshold",
]
