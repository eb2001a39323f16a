"""
Mortgage / loan projection assembler.

Numbers come straight from the amortization schedule; only the wording
changes with the loan kind.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Mapping, Tuple, Union

from core.config import DEFAULT_CONFIG, ProjectionConfig
from core.formatting import format_euro, format_percent
from core.schema import LOAN_ASSUMPTION_COLUMNS, LOAN_OUTPUT_COLUMNS, Chart, ChartDataset, Table
from engine.amortization import AmortizationSchedule, compute_amortization_schedule
from inputs.loan import LoanInputs

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoanWording:
    noun: str
    title: str


def loan_wording(loan_kind: str) -> LoanWording:
    if loan_kind == "loan":
        return LoanWording(noun="loan", title="Loan")
    return LoanWording(noun="mortgage", title="Mortgage")


@dataclass(frozen=True)
class MortgageProjection:
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


def _euro(amount: float) -> str:
    return format_euro(amount, 2)


def _percent(rate: float) -> str:
    return format_percent(rate, 2)


def _assumptions_table(schedule: AmortizationSchedule, wording: LoanWording) -> Table:
    inputs = schedule.inputs
    term = schedule.term
    balance_label = "Current loan balance" if wording.noun == "loan" else "Current balance"
    payment_source = "Calculated" if inputs.fixed_payment_amount is None else "Fixed input"
    return Table(
        columns=LOAN_ASSUMPTION_COLUMNS,
        rows=(
            (balance_label, _euro(inputs.current_balance), "Balance before any overpayment"),
            ("One-off overpayment", _euro(inputs.one_off_overpayment), "Applied immediately at start"),
            (
                "Opening balance used",
                _euro(schedule.opening_balance),
                "Starting balance for amortisation maths",
            ),
            (
                "Annual interest rate",
                _percent(inputs.annual_interest_rate),
                "Monthly compounding used internally",
            ),
            (
                f"{wording.title} term",
                f"{term.month_count} months",
                f"{term.start_month.isoformat()} to {term.end_month.isoformat()}",
            ),
            ("Repayment type", inputs.repayment_type, "Amortising repayment only"),
            (
                "Annual overpayment",
                _euro(inputs.annual_overpayment),
                "Applied at each calendar year-end",
            ),
            ("Monthly payment source", payment_source, "Payment frequency fixed to monthly"),
        ),
    )


def _outputs_table(schedule: AmortizationSchedule, wording: LoanWording) -> Table:
    payoff = schedule.payoff
    fixed = schedule.inputs.fixed_payment_amount is not None
    remaining = payoff.balance_remaining
    term_end_label = (
        "Remaining loan balance at term end"
        if wording.noun == "loan"
        else "Remaining balance at term end"
    )
    return Table(
        columns=LOAN_OUTPUT_COLUMNS,
        rows=(
            (
                "Monthly payment used",
                _euro(schedule.monthly_payment_used),
                "Provided via fixedPaymentAmount" if fixed else "Derived from amortisation formula",
            ),
            (
                "Payoff year",
                str(payoff.year) if payoff.paid_off else "Not paid off within modelled term",
                "Based on modelled schedule"
                if payoff.paid_off
                else "Balance remains after final modelled month",
            ),
            (
                "Total interest (lifetime)",
                _euro(schedule.totals.interest),
                f"{payoff.months_simulated} simulated months",
            ),
            (
                "Total paid (lifetime)",
                _euro(schedule.totals.paid),
                "Principal + interest + annual overpayments",
            ),
            (
                term_end_label,
                _euro(remaining),
                "Outstanding after modelled term" if remaining > 0 else f"{wording.title} fully repaid",
            ),
        ),
    )


def _annual_chart(schedule: AmortizationSchedule, wording: LoanWording) -> Chart:
    rows = schedule.annual_schedule
    if rows:
        labels = tuple(str(row.year) for row in rows)
        balance = tuple(row.balance_end_raw for row in rows)
        principal = tuple(row.principal_paid_raw for row in rows)
        interest = tuple(row.interest_paid_raw for row in rows)
    else:
        # opening balance cleared by the one-off overpayment
        labels = (str(schedule.term.start_month.year),)
        balance = principal = interest = (0.0,)

    return Chart(
        title=f"{wording.title} Balance and Annual Repayment Split",
        type="bar",
        labels=labels,
        datasets=(
            ChartDataset("Remaining balance", balance),
            ChartDataset("Principal repaid (annual)", principal),
            ChartDataset("Interest paid (annual)", interest),
        ),
    )


def _summary(schedule: AmortizationSchedule, wording: LoanWording) -> str:
    inputs = schedule.inputs
    payoff = schedule.payoff
    if payoff.paid_off:
        outcome = f"On this path the {wording.noun} is projected to be fully repaid in {payoff.year}."
    else:
        outcome = (
            f"On this path the {wording.noun} is not fully repaid by "
            f"{schedule.term.end_month.isoformat()}, leaving "
            f"{_euro(payoff.balance_remaining)} outstanding."
        )
    sentences = (
        f"Monthly repayments are modelled from an opening {wording.noun} balance of "
        f"{_euro(schedule.opening_balance)} at {_percent(inputs.annual_interest_rate)} interest.",
        f"The payment used is {_euro(schedule.monthly_payment_used)} per month, with annual "
        f"overpayments of {_euro(inputs.annual_overpayment)} applied at each year-end.",
        outcome,
        f"Total lifetime interest is {_euro(schedule.totals.interest)} and total paid is "
        f"{_euro(schedule.totals.paid)}.",
    )
    return " ".join(sentences)


def compute_mortgage_projection(
    raw_or_inputs: Union[LoanInputs, Mapping[str, Any]],
    *,
    default_loan_kind: str = "mortgage",
    config: ProjectionConfig = DEFAULT_CONFIG,
) -> MortgageProjection:
    schedule = compute_amortization_schedule(
        raw_or_inputs, default_loan_kind=default_loan_kind, config=config
    )
    wording = loan_wording(schedule.inputs.loan_kind)

    logger.debug(
        "%s projection: %d planned months, %d simulated, payoff %s",
        wording.title,
        schedule.term.month_count,
        schedule.payoff.months_simulated,
        schedule.payoff.year,
    )

    debug: Dict[str, Any] = {
        "months_planned": schedule.term.month_count,
        "months_simulated": schedule.payoff.months_simulated,
        "payment_used_monthly": schedule.monthly_payment_used,
        "opening_balance": schedule.opening_balance,
        "payoff_year": schedule.payoff.year,
        "total_interest_lifetime": schedule.totals.interest,
        "total_paid_lifetime": schedule.totals.paid,
        "annual_schedule": [asdict(row) for row in schedule.annual_schedule],
    }

    return MortgageProjection(
        assumptions_table=_assumptions_table(schedule, wording),
        outputs_table=_outputs_table(schedule, wording),
        charts=(_annual_chart(schedule, wording),),
        summary_text=_summary(schedule, wording),
        debug=debug,
    )
