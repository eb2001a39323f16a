"""
Public projection API.

    from projections import compute_pension_projection, compute_mortgage_projection

    result = compute_pension_projection({"currentAge": 40, ...})
    result.outputs_table.rows
"""

from core.errors import (
    DomainError,
    NegativeAmortizationError,
    ProjectionError,
    UnsupportedRepaymentError,
    ValidationError,
)
from engine.amortization import compute_amortization_schedule, compute_monthly_payment
from inputs.loan import normalize_loan_inputs
from inputs.pension import normalize_pension_inputs

from .export import chart_to_csv, chart_to_frame, export_filename, table_to_frame
from .mortgage import MortgageProjection, compute_mortgage_projection
from .pension import PensionProjection, compute_pension_projection

__all__ = [
    "DomainError",
    "NegativeAmortizationError",
    "ProjectionError",
    "UnsupportedRepaymentError",
    "ValidationError",
    "compute_amortization_schedule",
    "compute_monthly_payment",
    "normalize_loan_inputs",
    "normalize_pension_inputs",
    "chart_to_csv",
    "chart_to_frame",
    "export_filename",
    "table_to_frame",
    "MortgageProjection",
    "compute_mortgage_projection",
    "PensionProjection",
    "compute_pension_projection",
]
