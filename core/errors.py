"""
Error types raised by the projection engine.

Two families:
  ValidationError: a supplied input is missing, malformed or out of range.
      The message starts with the input path (e.g. "pensionInputs.growthRate
      ...") so callers can map it back to the field that produced it.
  DomainError: the inputs are well-formed but describe something the engine
      cannot model (interest-only repayment, a payment that never covers the
      interest).
"""

from __future__ import annotations

from typing import List, Optional


class ProjectionError(Exception):
    """Base class for every error the engine raises on purpose."""


class ValidationError(ProjectionError, ValueError):
    """Field-addressable input error."""

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        errors: Optional[List[str]] = None,
    ) -> None:
        super().__init__(message)
        self.field = field
        self.errors = list(errors) if errors else [message]


class DomainError(ProjectionError):
    """The request is valid but cannot be simulated."""


class UnsupportedRepaymentError(DomainError):
    """Repayment type is recognised but not modelled (interest-only)."""


class NegativeAmortizationError(DomainError):
    """The monthly payment does not cover the interest charged that month."""
