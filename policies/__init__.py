"""
Contribution policies — personal contribution amount per age and salary.
"""

from .base import ContributionPolicy
from .current import CurrentPathPolicy
from .max_personal import MaxPersonalPolicy

__all__ = [
    "ContributionPolicy",
    "CurrentPathPolicy",
    "MaxPersonalPolicy",
]
