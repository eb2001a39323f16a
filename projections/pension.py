"""
Pension projection assembler.

Runs both accumulation policies, the drawdown simulations and the threshold
checks, then shapes the results into tables, charts, a narrative sentence and
a debug bag. All currency/percent formatting happens here, not in the engine.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Mapping, Tuple, Union

from core.config import DEFAULT_CONFIG, ProjectionConfig
from core.formatting import format_euro, format_euro_compact, format_percent
from core.schema import (
    PENSION_ASSUMPTION_COLUMNS,
    PENSION_OUTPUT_COLUMNS,
    Chart,
    ChartDataset,
    Table,
)
from core.utils import clamp_to_zero, floor_series_to_zero
from engine.accumulation import (
    AccumulationSeries,
    find_monotonic_drops,
    simulate_accumulation,
)
from engine.drawdown import (
    MinimumDrawdownSimulation,
    RetirementSimulation,
    compute_required_pot_at_retirement,
    simulate_minimum_drawdown,
    simulate_target_income_drawdown,
)
from engine.threshold import (
    BreachFlags,
    ThresholdMeta,
    build_breach_sentence,
    classify_breaches,
    resolve_threshold,
)
from inputs.pension import PensionInputs, normalize_pension_inputs
from policies import CurrentPathPolicy, MaxPersonalPolicy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PensionProjection:
    assumptions_table: Table
    outputs_table: Table
    charts: Tuple[Chart, ...]
    summary_text: str
    debug: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "assumptionsTable": self.assumptions_table.to_dict(),
            "outputsTable": self.outputs_table.to_dict(),
            "charts": [c.to_dict() for c in self.charts],
            "summaryText": self.summary_text,
            "debug": self.debug,
        }


def _breach_verdict(flags: BreachFlags) -> str:
    if not flags.any:
        return "No"
    return f"Yes ({', '.join(flags.labels())})"


def _depletion_text(sim: RetirementSimulation, horizon_end_age: int) -> str:
    if sim.depletion_age is None:
        return f"Not depleted by age {horizon_end_age}"
    return f"Age {sim.depletion_age}"


def _assumptions_table(inputs: PensionInputs, max_policy: MaxPersonalPolicy) -> Table:
    mode_label = "Minimum drawdowns" if inputs.min_drawdown_mode else "Target withdrawals"
    contribution_rates = (
        f"{format_percent(inputs.personal_pct)} / {format_percent(inputs.employer_pct)}"
    )
    return Table(
        columns=PENSION_ASSUMPTION_COLUMNS,
        rows=(
            ("Current age", str(inputs.current_age)),
            ("Retirement age", str(inputs.retirement_age)),
            ("Growth rate", format_percent(inputs.growth_rate)),
            ("Wage growth", format_percent(inputs.wage_growth_rate)),
            ("Inflation", format_percent(inputs.inflation_rate)),
            ("Salary used for cap", format_euro(max_policy.capped_salary(inputs.current_salary))),
            ("Current personal % and employer %", contribution_rates),
            (
                "Max personal age-band % at current age",
                f"{format_percent(max_policy.band_pct(inputs.current_age))} (steps with age)",
            ),
            ("Target income (today's money)", format_euro(inputs.target_income_today)),
            ("Mode", mode_label),
            ("Horizon end age", str(inputs.horizon_end_age)),
        ),
    )


def _outputs_table(
    inputs: PensionInputs,
    current: AccumulationSeries,
    maximised: AccumulationSeries,
    required_pot: float,
    sustainability: RetirementSimulation,
    min_drawdown: MinimumDrawdownSimulation,
    meta: ThresholdMeta,
    flags: BreachFlags,
) -> Table:
    held = f" (held beyond {meta.year_used})" if meta.held_constant else ""
    rows: List[Tuple[str, str]] = [
        ("Projected pot at retirement (current)", format_euro(current.retirement_pot)),
        ("Projected pot at retirement (max personal)", format_euro(maximised.retirement_pot)),
        ("Required pot at retirement (target income)", format_euro(required_pot)),
        (
            "Gap vs required (required - projected current)",
            format_euro(required_pot - current.retirement_pot),
        ),
        (
            "Pot depleted (current path, target income)",
            _depletion_text(sustainability, inputs.horizon_end_age),
        ),
        ("SFT threshold used", f"{format_euro_compact(meta.value)}{held}"),
        ("SFT breach?", _breach_verdict(flags)),
    ]
    if inputs.min_drawdown_mode:
        rows.append(
            ("First-year min drawdown amount", format_euro(min_drawdown.first_year_minimum_drawdown))
        )
        rows.append(
            (
                "First-year min drawdown >= target income",
                "Yes" if min_drawdown.first_year_meets_target else "No",
            )
        )
    return Table(columns=PENSION_OUTPUT_COLUMNS, rows=tuple(rows))


def _labels(ages) -> Tuple[str, ...]:
    return tuple(str(age) for age in ages)


def _charts(
    inputs: PensionInputs,
    current: AccumulationSeries,
    maximised: AccumulationSeries,
    sims: Dict[str, RetirementSimulation],
    min_drawdown: MinimumDrawdownSimulation,
    zero_floor: float,
) -> Tuple[Chart, ...]:
    accumulation = Chart(
        title="Pension Pot Growth to Retirement (Current vs Max Personal)",
        type="line",
        labels=_labels(current.ages),
        datasets=(
            ChartDataset("Pot (current)", current.balances),
            ChartDataset("Pot (max personal)", maximised.balances),
            ChartDataset("Personal (current)", current.personal),
            ChartDataset("Employer (current)", current.employer),
            ChartDataset("Growth (current)", current.growth),
            ChartDataset("Personal (max personal)", maximised.personal),
            ChartDataset("Employer (max personal)", maximised.employer),
            ChartDataset("Growth (max personal)", maximised.growth),
        ),
    )

    if inputs.min_drawdown_mode:
        retirement = Chart(
            title="Minimum Drawdown vs Target Income",
            type="bar",
            labels=_labels(min_drawdown.ages),
            datasets=(
                ChartDataset("Minimum drawdown", min_drawdown.min_drawdowns),
                ChartDataset("Target income", min_drawdown.targets),
            ),
        )
    else:
        projected = sims["projected"]
        retirement = Chart(
            title="Retirement Sustainability (Target Income)",
            type="line",
            labels=_labels(projected.ages),
            datasets=(
                ChartDataset(
                    "Balance (current)",
                    tuple(floor_series_to_zero(projected.balances, zero_floor)),
                ),
                ChartDataset(
                    "Balance (max)",
                    tuple(floor_series_to_zero(sims["projected_max"].balances, zero_floor)),
                ),
                ChartDataset(
                    "Required pot path",
                    tuple(floor_series_to_zero(sims["required"].balances, zero_floor)),
                ),
                ChartDataset(
                    "Withdrawals",
                    tuple(clamp_to_zero(w) for w in projected.withdrawals),
                ),
            ),
        )
    return (accumulation, retirement)


def compute_pension_projection(
    raw_or_inputs: Union[PensionInputs, Mapping[str, Any]],
    *,
    config: ProjectionConfig = DEFAULT_CONFIG,
) -> PensionProjection:
    """
    Full pension projection: accumulation under the current and max-personal
    policies, target-income and minimum drawdown, required pot, and SFT checks.
    """
    inputs = normalize_pension_inputs(raw_or_inputs)

    current_policy = CurrentPathPolicy(personal_pct=inputs.personal_pct)
    max_policy = MaxPersonalPolicy(limits=config.contribution_limits)

    current = simulate_accumulation(inputs, current_policy)
    maximised = simulate_accumulation(inputs, max_policy)
    monotonic_issues = find_monotonic_drops(maximised, tolerance=config.monotonic_tolerance)

    required_pot = compute_required_pot_at_retirement(inputs)
    sims = {
        "projected": simulate_target_income_drawdown(
            inputs, current.retirement_pot, zero_floor=config.zero_floor
        ),
        "projected_max": simulate_target_income_drawdown(
            inputs, maximised.retirement_pot, zero_floor=config.zero_floor
        ),
        "required": simulate_target_income_drawdown(
            inputs, required_pot, zero_floor=config.zero_floor
        ),
    }
    min_drawdown = simulate_minimum_drawdown(
        inputs, current.retirement_pot, rules=config.minimum_drawdown
    )

    meta = resolve_threshold(inputs.retirement_year, config.threshold_schedule)
    flags = classify_breaches(
        current_pot=current.retirement_pot,
        max_pot=maximised.retirement_pot,
        required_pot=required_pot,
        threshold=meta.value,
    )
    sentence = build_breach_sentence(flags, meta)

    logger.debug(
        "Pension projection: pot current=%.2f max=%.2f required=%.2f, SFT %s (%d)",
        current.retirement_pot,
        maximised.retirement_pot,
        required_pot,
        meta.value,
        meta.year_used,
    )

    debug: Dict[str, Any] = {
        "inputs": inputs.to_raw(),
        "projected_pot_current": current.retirement_pot,
        "projected_pot_max_personal": maximised.retirement_pot,
        "required_pot": required_pot,
        "retirement_year": inputs.retirement_year,
        "sft_value": meta.value,
        "sft_year_used": meta.year_used,
        "sft_held_constant": meta.held_constant,
        "sft_breaches": {**asdict(flags), "any": flags.any},
        "sft_sentence": sentence,
        "current_scenario": {
            "personal": list(current.personal),
            "employer": list(current.employer),
            "contributions": list(current.contributions),
            "growth": list(current.growth),
        },
        "max_scenario": {
            "personal": list(maximised.personal),
            "employer": list(maximised.employer),
            "contributions": list(maximised.contributions),
            "growth": list(maximised.growth),
        },
        "depletion_age_projected": sims["projected"].depletion_age,
        "depletion_age_projected_max": sims["projected_max"].depletion_age,
        "depletion_age_required": sims["required"].depletion_age,
        "max_series_monotonic_issues": [asdict(issue) for issue in monotonic_issues],
        "retirement_ending_balance_projected": sims["projected"].ending_balance,
        "retirement_ending_balance_projected_max": sims["projected_max"].ending_balance,
        "retirement_ending_balance_required": sims["required"].ending_balance,
        "min_drawdown_ending_balance": min_drawdown.ending_balance,
        "min_drawdown_exhausted_age": min_drawdown.exhausted_age,
    }

    return PensionProjection(
        assumptions_table=_assumptions_table(inputs, max_policy),
        outputs_table=_outputs_table(
            inputs,
            current,
            maximised,
            required_pot,
            sims["projected"],
            min_drawdown,
            meta,
            flags,
        ),
        charts=_charts(inputs, current, maximised, sims, min_drawdown, config.zero_floor),
        summary_text=sentence,
        debug=debug,
    )
