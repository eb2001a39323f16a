import dataclasses
import datetime

import pytest

from core.config import DEFAULT_CONFIG
from core.errors import DomainError, NegativeAmortizationError, ValidationError
from engine.amortization import (
    compute_amortization_schedule,
    compute_monthly_payment,
    resolve_term,
)
from inputs.loan import normalize_loan_inputs


@pytest.mark.parametrize("principal, months", [(1_000, 1), (100_000, 360), (12_345.67, 7)])
def test_zero_rate_payment_is_straight_line(principal, months):
    assert compute_monthly_payment(principal, 0, months) == pytest.approx(principal / months)


def test_standard_annuity_payment():
    assert compute_monthly_payment(100_000, 0.06, 360) == pytest.approx(599.55, abs=0.05)


def test_zero_principal_payment():
    assert compute_monthly_payment(0, 0.05, 120) == 0


@pytest.mark.parametrize(
    "args, field",
    [
        ((-1, 0.05, 12), "principal"),
        ((float("nan"), 0.05, 12), "principal"),
        ((1_000, -0.01, 12), "annualRate"),
        ((1_000, 0.05, 0), "monthCount"),
        ((1_000, 0.05, 1.5), "monthCount"),
        ((1_000, 0.05, True), "monthCount"),
    ],
)
def test_payment_arguments_validated(args, field):
    with pytest.raises(ValidationError) as excinfo:
        compute_monthly_payment(*args)
    assert excinfo.value.field == field


def test_fixed_payment_below_interest_is_negative_amortization(loan_raw):
    raw = {**loan_raw, "fixedPaymentAmount": 100}
    with pytest.raises(NegativeAmortizationError, match="Negative amortization"):
        compute_amortization_schedule(raw)


def test_fixed_payment_just_below_interest_fails(loan_raw):
    raw = {**loan_raw, "fixedPaymentAmount": 499.99}
    with pytest.raises(DomainError):
        compute_amortization_schedule(raw)


def test_term_from_end_date_counts_months_inclusive(loan_raw):
    raw = {**loan_raw, "startDateIso": "2026-03-15", "endDateIso": "2027-02-20"}
    term = resolve_term(normalize_loan_inputs(raw))
    assert term.month_count == 12
    assert term.start_month == datetime.date(2026, 3, 1)
    assert term.end_month == datetime.date(2027, 2, 1)


def test_end_date_wins_over_term_years(loan_raw):
    raw = {**loan_raw, "endDateIso": "2026-12-31", "remainingTermYears": 30}
    assert resolve_term(normalize_loan_inputs(raw)).month_count == 12


@pytest.mark.parametrize("years, months", [(0.01, 1), (2.5, 30), (1 / 24, 1), (25, 300)])
def test_term_from_years_rounds_to_whole_months(loan_raw, years, months):
    term = resolve_term(normalize_loan_inputs({**loan_raw, "remainingTermYears": years}))
    assert term.month_count == months


def test_calculated_payment_clears_balance(loan_raw):
    schedule = compute_amortization_schedule(loan_raw)

    assert schedule.term.month_count == 360
    assert schedule.monthly_payment_used == pytest.approx(599.55, abs=0.05)
    assert schedule.payoff.paid_off
    assert schedule.payoff.year == 2055
    assert schedule.payoff.month == datetime.date(2055, 12, 1)
    assert schedule.payoff.months_simulated == 360
    assert schedule.payoff.balance_remaining == 0
    assert schedule.totals.principal == pytest.approx(100_000)
    assert schedule.totals.paid == pytest.approx(schedule.totals.principal + schedule.totals.interest)
    assert len(schedule.annual_schedule) == 30


def test_zero_rate_schedule(loan_raw):
    raw = {**loan_raw, "currentBalance": 12_000, "annualInterestRate": 0, "remainingTermYears": 1}
    schedule = compute_amortization_schedule(raw)
    assert schedule.monthly_payment_used == pytest.approx(1_000)
    assert schedule.totals.interest == 0
    assert [m.principal_paid for m in schedule.monthly_schedule] == pytest.approx([1_000] * 12)


def test_annual_overpayment_reduces_interest_and_months(loan_raw):
    base = compute_amortization_schedule(loan_raw)
    overpaid = compute_amortization_schedule({**loan_raw, "annualOverpayment": 2_000})

    assert overpaid.totals.interest < base.totals.interest
    assert overpaid.payoff.months_simulated <= base.payoff.months_simulated
    assert overpaid.monthly_payment_used == base.monthly_payment_used


def test_annual_overpayment_lands_in_december(loan_raw):
    schedule = compute_amortization_schedule({**loan_raw, "annualOverpayment": 1_000})
    first_year = schedule.monthly_schedule[:12]
    assert [m.annual_overpayment_applied for m in first_year] == [0] * 11 + [1_000]
    assert schedule.annual_schedule[0].annual_overpayment_applied == 1_000


def test_one_off_overpayment_reduces_opening_balance(loan_raw):
    schedule = compute_amortization_schedule({**loan_raw, "oneOffOverpayment": 20_000})
    assert schedule.opening_balance == 80_000
    assert schedule.monthly_payment_used == pytest.approx(compute_monthly_payment(80_000, 0.06, 360))


def test_one_off_overpayment_clearing_balance(loan_raw):
    schedule = compute_amortization_schedule({**loan_raw, "oneOffOverpayment": 150_000})
    assert schedule.opening_balance == 0
    assert schedule.monthly_payment_used == 0
    assert schedule.monthly_schedule == ()
    assert schedule.annual_schedule == ()
    assert schedule.payoff.paid_off is False


def test_large_fixed_payment_pays_off_early(loan_raw):
    schedule = compute_amortization_schedule({**loan_raw, "fixedPaymentAmount": 10_000})
    last = schedule.monthly_schedule[-1]

    assert schedule.payoff.paid_off
    assert schedule.payoff.months_simulated < 12
    assert last.balance_end == 0
    assert last.principal_paid == pytest.approx(last.balance_start)


def test_final_planned_month_counts_as_year_end(loan_raw):
    raw = {
        **loan_raw,
        "currentBalance": 6_000,
        "annualInterestRate": 0,
        "endDateIso": "2026-06-30",
        "fixedPaymentAmount": 500,
        "annualOverpayment": 500,
    }
    schedule = compute_amortization_schedule(raw)

    assert schedule.monthly_schedule[-1].annual_overpayment_applied == 500
    assert schedule.payoff.paid_off is False
    assert schedule.payoff.balance_remaining == pytest.approx(2_500)


def test_annual_rows_rounded_totals_unrounded(loan_raw):
    schedule = compute_amortization_schedule({**loan_raw, "startDateIso": "2026-07-10"})
    first = schedule.annual_schedule[0]

    assert first.year == 2026
    assert first.balance_start == 100_000
    assert first.interest_paid == round(first.interest_paid, 2)
    assert first.interest_paid == pytest.approx(first.interest_paid_raw, abs=0.005)
    assert first.total_paid == pytest.approx(first.principal_paid + first.interest_paid)

    raw_interest = sum(row.interest_paid_raw for row in schedule.annual_schedule)
    assert schedule.totals.interest == pytest.approx(raw_interest)


def test_monthly_frame(loan_raw):
    frame = compute_amortization_schedule({**loan_raw, "remainingTermYears": 2}).to_frame()
    assert len(frame) == 24
    assert list(frame.columns[:3]) == ["month_index", "month", "year"]
    assert frame["interest_paid"].sum() > 0


def test_annual_frame(loan_raw):
    schedule = compute_amortization_schedule({**loan_raw, "remainingTermYears": 2})
    frame = schedule.annual_frame()
    assert frame["year"].tolist() == [2026, 2027]
    assert frame["interest_paid_raw"].sum() == pytest.approx(schedule.totals.interest)


def test_monthly_principal_sums_to_opening_balance(loan_raw):
    schedule = compute_amortization_schedule({**loan_raw, "oneOffOverpayment": 12_345.67})
    repaid = sum(m.principal_paid for m in schedule.monthly_schedule)
    assert repaid == pytest.approx(schedule.opening_balance, abs=1e-6)
    assert schedule.totals.principal == pytest.approx(schedule.opening_balance, abs=1e-6)


def test_residue_below_zero_floor_settled_into_last_payment(loan_raw):
    raw = {
        **loan_raw,
        "currentBalance": 1_000.4,
        "annualInterestRate": 0,
        "remainingTermYears": 1,
        "fixedPaymentAmount": 100,
    }
    config = dataclasses.replace(DEFAULT_CONFIG, zero_floor=1.0)

    settled = compute_amortization_schedule(raw, config=config)
    last = settled.monthly_schedule[-1]
    assert settled.payoff.months_simulated == 10
    assert last.balance_end == 0
    assert last.principal_paid == pytest.approx(100.4)
    assert last.total_paid == pytest.approx(100.4)
    assert settled.totals.principal == pytest.approx(1_000.4)
    assert settled.totals.paid == pytest.approx(1_000.4)

    unsettled = compute_amortization_schedule(raw)
    assert unsettled.payoff.months_simulated == 11
    assert unsettled.monthly_schedule[-1].principal_paid == pytest.approx(0.4)
