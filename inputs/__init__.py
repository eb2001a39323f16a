"""
Input normalization — raw assumption mappings to validated records.
"""

from .loan import LoanInputs, normalize_loan_inputs, parse_iso_date_strict
from .pension import PensionInputs, normalize_pension_inputs
from .validators import ValidationResult, collect_errors

__all__ = [
    "LoanInputs",
    "normalize_loan_inputs",
    "parse_iso_date_strict",
    "PensionInputs",
    "normalize_pension_inputs",
    "ValidationResult",
    "collect_errors",
]
