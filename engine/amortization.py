"""
Month-by-month loan amortization.

Key rules:
  1. Term = inclusive month span start..end when an end date is given,
     otherwise remaining_term_years x 12 rounded half-up (minimum 1).
  2. The one-off overpayment comes off the balance before month 1.
  3. Payment = fixed amount when supplied, else the level annuity payment
     P x r / (1 - (1 + r)^-n) with r = annual_rate / 12.
  4. Each month: interest = balance x r, principal = payment - interest.
     principal <= 0 is negative amortization and fails the whole run.
  5. The annual overpayment is applied in the last month of each calendar
     year (or the final planned month).
  6. Full precision per month; rounding to cents only on the annual rows.
     Lifetime totals are summed from the unrounded months.
"""

from __future__ import annotations

import datetime
import logging
from dataclasses import asdict, dataclass, fields
from typing import Any, List, Mapping, Optional, Tuple, Union

import numpy as np
import pandas as pd

from core.config import DEFAULT_CONFIG, ProjectionConfig
from core.errors import NegativeAmortizationError, ValidationError
from core.utils import (
    add_months,
    excel_round,
    inclusive_month_count,
    is_finite_number,
    month_start,
    term_months_from_years,
)
from inputs.loan import LoanInputs, normalize_loan_inputs

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TermWindow:
    month_count: int
    start_month: datetime.date
    end_month: datetime.date


@dataclass(frozen=True)
class MonthlyAmortizationRow:
    month_index: int
    month: datetime.date
    year: int
    balance_start: float
    interest_paid: float
    principal_paid: float  # includes any annual overpayment applied this month
    total_paid: float
    annual_overpayment_applied: float
    balance_end: float


@dataclass(frozen=True)
class AnnualAmortizationRow:
    """Calendar-year sums; plain fields rounded to cents, *_raw unrounded."""

    year: int
    balance_start: float
    principal_paid: float
    interest_paid: float
    total_paid: float
    annual_overpayment_applied: float
    balance_end: float
    balance_start_raw: float
    principal_paid_raw: float
    interest_paid_raw: float
    total_paid_raw: float
    balance_end_raw: float


@dataclass(frozen=True)
class AmortizationTotals:
    interest: float
    principal: float
    paid: float


@dataclass(frozen=True)
class Payoff:
    month: Optional[datetime.date]
    year: Optional[int]
    months_simulated: int
    balance_remaining: float

    @property
    def paid_off(self) -> bool:
        return self.month is not None


@dataclass(frozen=True)
class AmortizationSchedule:
    inputs: LoanInputs
    term: TermWindow
    monthly_rate: float
    monthly_payment_used: float
    opening_balance: float
    monthly_schedule: Tuple[MonthlyAmortizationRow, ...]
    annual_schedule: Tuple[AnnualAmortizationRow, ...]
    totals: AmortizationTotals
    payoff: Payoff

    def to_frame(self) -> pd.DataFrame:
        return monthly_frame(self.monthly_schedule)

    def annual_frame(self) -> pd.DataFrame:
        return pd.DataFrame([asdict(row) for row in self.annual_schedule])


def compute_monthly_payment(principal: float, annual_rate: float, month_count: int) -> float:
    """Level payment that clears `principal` over `month_count` months."""
    if not is_finite_number(principal) or principal < 0:
        raise ValidationError(
            "principal must be a finite number greater than or equal to 0",
            field="principal",
        )
    if not is_finite_number(annual_rate) or annual_rate < 0:
        raise ValidationError(
            "annualRate must be a finite number greater than or equal to 0",
            field="annualRate",
        )
    if (
        isinstance(month_count, bool)
        or not isinstance(month_count, (int, np.integer))
        or month_count <= 0
    ):
        raise ValidationError("monthCount must be a positive integer", field="monthCount")

    if principal == 0:
        return 0.0
    monthly_rate = annual_rate / 12.0
    if monthly_rate == 0:
        return float(principal) / month_count
    return float(principal) * monthly_rate / (1.0 - (1.0 + monthly_rate) ** (-int(month_count)))


def resolve_term(inputs: LoanInputs) -> TermWindow:
    start = month_start(inputs.start_date_iso)
    if inputs.end_date_iso is not None:
        end = month_start(inputs.end_date_iso)
        count = inclusive_month_count(start, end)
        if count <= 0:
            raise ValidationError(
                "loanInputs.endDateIso must be in or after the startDateIso month",
                field="loanInputs.endDateIso",
            )
        return TermWindow(month_count=count, start_month=start, end_month=end)

    count = term_months_from_years(inputs.remaining_term_years)
    return TermWindow(month_count=count, start_month=start, end_month=add_months(start, count - 1))


def monthly_frame(rows) -> pd.DataFrame:
    columns = [f.name for f in fields(MonthlyAmortizationRow)]
    return pd.DataFrame([asdict(r) for r in rows], columns=columns)


def aggregate_annual_schedule(
    monthly_schedule: Tuple[MonthlyAmortizationRow, ...],
) -> Tuple[AnnualAmortizationRow, ...]:
    """Group months by calendar year; round each year's sums once."""
    if not monthly_schedule:
        return ()

    annual = (
        monthly_frame(monthly_schedule)
        .groupby("year", sort=True)
        .agg(
            balance_start=("balance_start", "first"),
            principal_paid=("principal_paid", "sum"),
            interest_paid=("interest_paid", "sum"),
            total_paid=("total_paid", "sum"),
            annual_overpayment_applied=("annual_overpayment_applied", "sum"),
            balance_end=("balance_end", "last"),
        )
        .reset_index()
    )

    principal_r = excel_round(annual["principal_paid"].to_numpy(), 2)
    interest_r = excel_round(annual["interest_paid"].to_numpy(), 2)
    total_r = excel_round(principal_r + interest_r, 2)
    overpay_r = excel_round(annual["annual_overpayment_applied"].to_numpy(), 2)
    start_r = excel_round(annual["balance_start"].to_numpy(), 2)
    end_r = excel_round(annual["balance_end"].to_numpy(), 2)

    rows: List[AnnualAmortizationRow] = []
    for i, rec in enumerate(annual.itertuples(index=False)):
        rows.append(
            AnnualAmortizationRow(
                year=int(rec.year),
                balance_start=float(start_r[i]),
                principal_paid=float(principal_r[i]),
                interest_paid=float(interest_r[i]),
                total_paid=float(total_r[i]),
                annual_overpayment_applied=float(overpay_r[i]),
                balance_end=float(end_r[i]),
                balance_start_raw=float(rec.balance_start),
                principal_paid_raw=float(rec.principal_paid),
                interest_paid_raw=float(rec.interest_paid),
                total_paid_raw=float(rec.total_paid),
                balance_end_raw=float(rec.balance_end),
            )
        )
    return tuple(rows)


def compute_amortization_schedule(
    raw_or_inputs: Union[LoanInputs, Mapping[str, Any]],
    *,
    default_loan_kind: str = "mortgage",
    config: ProjectionConfig = DEFAULT_CONFIG,
) -> AmortizationSchedule:
    inputs = normalize_loan_inputs(raw_or_inputs, default_loan_kind=default_loan_kind)
    term = resolve_term(inputs)
    monthly_rate = inputs.annual_interest_rate / 12.0

    opening_balance = max(0.0, inputs.current_balance - inputs.one_off_overpayment)
    if inputs.fixed_payment_amount is None:
        payment = compute_monthly_payment(
            opening_balance, inputs.annual_interest_rate, term.month_count
        )
    else:
        payment = inputs.fixed_payment_amount

    months: List[MonthlyAmortizationRow] = []
    balance = opening_balance
    month_index = 0
    while month_index < term.month_count and balance > 0:
        period = add_months(term.start_month, month_index)

        balance_start = balance
        interest = balance_start * monthly_rate
        principal = payment - interest
        if principal <= 0:
            raise NegativeAmortizationError(
                f"Negative amortization: a payment of {payment:.2f} does not cover "
                f"the {interest:.2f} interest charged in {period:%Y-%m}."
            )

        principal = min(principal, balance_start)
        total = interest + principal
        balance = balance_start - principal

        is_last_planned = month_index + 1 >= term.month_count
        is_year_end = is_last_planned or add_months(period, 1).year != period.year

        overpaid = 0.0
        if is_year_end and inputs.annual_overpayment > 0 and balance > 0:
            overpaid = min(inputs.annual_overpayment, balance)
            principal += overpaid
            total += overpaid
            balance -= overpaid
        if 0 < balance < config.zero_floor:
            # float residue of the annuity formula; settle it with this payment
            principal += balance
            total += balance
            balance = 0.0

        months.append(
            MonthlyAmortizationRow(
                month_index=month_index,
                month=period,
                year=period.year,
                balance_start=balance_start,
                interest_paid=interest,
                principal_paid=principal,
                total_paid=total,
                annual_overpayment_applied=overpaid,
                balance_end=balance,
            )
        )
        month_index += 1

    totals = AmortizationTotals(
        interest=sum(m.interest_paid for m in months),
        principal=sum(m.principal_paid for m in months),
        paid=sum(m.total_paid for m in months),
    )
    last = months[-1] if months else None
    paid_off = balance <= 0 and last is not None
    payoff = Payoff(
        month=last.month if paid_off else None,
        year=last.year if paid_off else None,
        months_simulated=len(months),
        balance_remaining=balance,
    )

    logger.debug(
        "Amortized %d of %d planned months at %.2f/month (interest %.2f, payoff %s)",
        payoff.months_simulated,
        term.month_count,
        payment,
        totals.interest,
        payoff.year,
    )

    return AmortizationSchedule(
        inputs=inputs,
        term=term,
        monthly_rate=monthly_rate,
        monthly_payment_used=payment,
        opening_balance=opening_balance,
        monthly_schedule=tuple(months),
        annual_schedule=aggregate_annual_schedule(tuple(months)),
        totals=totals,
        payoff=payoff,
    )
