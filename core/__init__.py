"""
Core package — records, configuration, errors, and shared utilities.
No simulation logic lives here.
"""

from .config import (
    DEFAULT_CONFIG,
    ContributionLimits,
    MinimumDrawdownRules,
    ProjectionConfig,
    ThresholdSchedule,
)
from .errors import (
    DomainError,
    NegativeAmortizationError,
    ProjectionError,
    UnsupportedRepaymentError,
    ValidationError,
)
from .schema import Chart, ChartDataset, Table

__all__ = [
    "DEFAULT_CONFIG",
    "ContributionLimits",
    "MinimumDrawdownRules",
    "ProjectionConfig",
    "ThresholdSchedule",
    "DomainError",
    "NegativeAmortizationError",
    "ProjectionError",
    "UnsupportedRepaymentError",
    "ValidationError",
    "Chart",
    "ChartDataset",
    "Table",
]
