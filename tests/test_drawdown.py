import pytest

from core.config import MinimumDrawdownRules
from engine.drawdown import (
    compute_required_pot_at_retirement,
    simulate_minimum_drawdown,
    simulate_target_income_drawdown,
    target_income_at_age,
)
from inputs.pension import normalize_pension_inputs


@pytest.fixture
def inputs(pension_raw):
    return normalize_pension_inputs(pension_raw)


def test_sustainable_pot(inputs):
    sim = simulate_target_income_drawdown(inputs, 130_000)

    assert sim.ages == (62, 63, 64, 65)
    assert sim.balances == pytest.approx((130_000, 110_000, 90_000, 70_000))
    assert sim.withdrawals == pytest.approx((20_000, 20_000, 20_000, 0))
    assert sim.ending_balance == pytest.approx(70_000)
    assert sim.depletion_age is None


def test_pot_runs_out(inputs):
    sim = simulate_target_income_drawdown(inputs, 30_000)
    assert sim.balances == pytest.approx((30_000, 10_000, 0, 0))
    assert sim.depletion_age == 64
    assert sim.ending_balance == 0
    assert min(sim.balances) >= 0


def test_zero_start_depletes_immediately(inputs):
    assert simulate_target_income_drawdown(inputs, 0).depletion_age == 62


def test_withdrawal_indexed_from_retirement(pension_raw):
    inputs = normalize_pension_inputs({**pension_raw, "inflationRate": 0.02})
    assert target_income_at_age(inputs, 62) == pytest.approx(20_000)
    assert target_income_at_age(inputs, 64) == pytest.approx(20_000 * 1.02 ** 2)


def test_required_pot_without_growth(inputs):
    assert compute_required_pot_at_retirement(inputs) == pytest.approx(60_000)


def test_required_pot_exactly_funds_horizon(pension_raw):
    raw = {**pension_raw, "growthRate": 0.05, "inflationRate": 0.02, "horizonEndAge": 90}
    inputs = normalize_pension_inputs(raw)
    required = compute_required_pot_at_retirement(inputs)

    sim = simulate_target_income_drawdown(inputs, required)
    assert sim.depletion_age == 90
    assert sim.ending_balance == pytest.approx(0, abs=1e-6)

    short = simulate_target_income_drawdown(inputs, required * 0.9)
    assert short.depletion_age is not None and short.depletion_age < 90


def test_required_pot_zero_target(pension_raw):
    inputs = normalize_pension_inputs({**pension_raw, "targetIncomeToday": 0})
    assert compute_required_pot_at_retirement(inputs) == 0


def test_minimum_drawdown_before_seventy(inputs):
    sim = simulate_minimum_drawdown(inputs, 130_000)

    assert sim.min_drawdowns[0] == pytest.approx(5_200)
    assert sim.balances[1] == pytest.approx(124_800)
    assert sim.targets == pytest.approx((20_000,) * 4)
    assert sim.first_year_minimum_drawdown == pytest.approx(5_200)
    assert sim.first_year_meets_target is False
    assert sim.exhausted_age is None


def test_minimum_drawdown_rate_steps_at_seventy(pension_raw):
    raw = {**pension_raw, "currentAge": 68, "retirementAge": 69, "horizonEndAge": 71}
    inputs = normalize_pension_inputs(raw)
    sim = simulate_minimum_drawdown(inputs, 100_000)

    assert sim.min_drawdowns[0] == pytest.approx(4_000)
    assert sim.min_drawdowns[1] == pytest.approx(0.05 * 96_000)


def test_minimum_drawdown_meets_low_target(pension_raw):
    inputs = normalize_pension_inputs({**pension_raw, "targetIncomeToday": 4_000})
    assert simulate_minimum_drawdown(inputs, 130_000).first_year_meets_target is True


def test_full_drawdown_exhausts_pot(inputs):
    rules = MinimumDrawdownRules(bands=((None, 1.0),))
    sim = simulate_minimum_drawdown(inputs, 50_000, rules=rules)

    assert sim.exhausted_age == 62
    assert sim.balances == pytest.approx((50_000, 0, 0, 0))
    assert sim.ending_balance == 0
