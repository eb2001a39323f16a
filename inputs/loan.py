"""
Loan / mortgage assumptions — canonical record and normalizer.

"mortgage" and "loan" share one record; the kind only changes the wording of
assembled output.
"""

from __future__ import annotations

import datetime
import re
from typing import Any, Literal, Mapping, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError as PydanticValidationError,
    ValidationInfo,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from core.config import DEFAULT_CONFIG
from core.errors import UnsupportedRepaymentError, ValidationError
from core.utils import inclusive_month_count, term_months_from_years

from .validators import collect_errors

LOAN_ROOT = "loanInputs"
LOAN_KINDS = ("mortgage", "loan")

LoanKind = Literal["mortgage", "loan"]
RepaymentType = Literal["repayment", "interestOnly"]

_ISO_DATE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")


def parse_iso_date_strict(value: Any) -> datetime.date:
    """YYYY-MM-DD only; non-existent days such as 2024-02-30 are rejected."""
    if isinstance(value, datetime.date) and not isinstance(value, datetime.datetime):
        return value
    if not isinstance(value, str):
        raise ValueError("must be a YYYY-MM-DD string")
    match = _ISO_DATE.match(value.strip())
    if not match:
        raise ValueError("must be a YYYY-MM-DD string")
    year, month, day = (int(part) for part in match.groups())
    try:
        return datetime.date(year, month, day)
    except ValueError:
        raise ValueError("is not a valid calendar date") from None


def resolve_loan_kind(raw_kind: Any, default_loan_kind: str = "mortgage") -> str:
    fallback = str(default_loan_kind or "mortgage").strip().lower() or "mortgage"
    if fallback not in LOAN_KINDS:
        raise ValidationError(
            'defaultLoanKind must be "mortgage" or "loan"', field="defaultLoanKind"
        )
    if raw_kind is None or str(raw_kind).strip() == "":
        return fallback
    return str(raw_kind).strip().lower()


class LoanInputs(BaseModel):
    """Validated loan assumptions. annual_interest_rate is a decimal (0.04 == 4%)."""

    model_config = ConfigDict(
        frozen=True,
        strict=True,
        allow_inf_nan=False,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    loan_kind: LoanKind = Field(default=None, validate_default=True)
    current_balance: float = Field(gt=0)
    annual_interest_rate: float = Field(ge=0)
    start_date_iso: datetime.date
    end_date_iso: Optional[datetime.date] = None
    remaining_term_years: Optional[float] = Field(default=None, gt=0)
    repayment_type: RepaymentType
    fixed_payment_amount: Optional[float] = Field(default=None, gt=0)
    one_off_overpayment: float = Field(default=0.0, ge=0)
    annual_overpayment: float = Field(default=0.0, ge=0)

    @field_validator("loan_kind", mode="before")
    @classmethod
    def _default_loan_kind(cls, value: Any, info: ValidationInfo) -> Any:
        default = (info.context or {}).get("default_loan_kind", "mortgage")
        return resolve_loan_kind(value, default)

    @field_validator("start_date_iso", mode="before")
    @classmethod
    def _parse_start(cls, value: Any) -> datetime.date:
        return parse_iso_date_strict(value)

    @field_validator("end_date_iso", mode="before")
    @classmethod
    def _parse_end(cls, value: Any) -> Optional[datetime.date]:
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        return parse_iso_date_strict(value)

    @field_validator("end_date_iso")
    @classmethod
    def _end_not_before_start(
        cls, value: Optional[datetime.date], info: ValidationInfo
    ) -> Optional[datetime.date]:
        start = info.data.get("start_date_iso")
        if value is None or start is None:
            return value
        months = inclusive_month_count(start, value)
        if months <= 0:
            raise ValueError("must be in or after the startDateIso month")
        if months > DEFAULT_CONFIG.max_term_months:
            raise ValueError(
                f"must be within {DEFAULT_CONFIG.max_term_months} months of startDateIso"
            )
        return value

    @field_validator("remaining_term_years")
    @classmethod
    def _term_within_limit(cls, value: Optional[float]) -> Optional[float]:
        if value is not None and term_months_from_years(value) > DEFAULT_CONFIG.max_term_months:
            raise ValueError(
                f"must not exceed {DEFAULT_CONFIG.max_term_months // 12} years"
            )
        return value

    @field_validator("repayment_type", mode="before")
    @classmethod
    def _strip_repayment_type(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @field_validator("one_off_overpayment", "annual_overpayment", mode="before")
    @classmethod
    def _missing_overpayment_is_zero(cls, value: Any) -> Any:
        return 0.0 if value is None else value

    @model_validator(mode="after")
    def _term_is_resolvable(self) -> "LoanInputs":
        if self.end_date_iso is None and self.remaining_term_years is None:
            raise ValueError("must include endDateIso or remainingTermYears")
        return self

    def to_raw(self) -> dict:
        return self.model_dump(by_alias=True)


def normalize_loan_inputs(
    raw: Union[LoanInputs, Mapping[str, Any]],
    *,
    default_loan_kind: str = "mortgage",
) -> LoanInputs:
    """
    Validate raw loan assumptions.

    Raises ValidationError ("loanInputs.<field> ...") for malformed input and
    UnsupportedRepaymentError when interest-only repayment is requested.
    """
    resolve_loan_kind(None, default_loan_kind)

    if isinstance(raw, LoanInputs):
        raw = raw.to_raw()
    if not isinstance(raw, Mapping):
        raise ValidationError(f"{LOAN_ROOT} must be an object", field=LOAN_ROOT)

    try:
        inputs = LoanInputs.model_validate(
            dict(raw), context={"default_loan_kind": default_loan_kind}
        )
    except PydanticValidationError as exc:
        collect_errors(exc, LOAN_ROOT).raise_if_invalid()
        raise

    if inputs.repayment_type == "interestOnly":
        raise UnsupportedRepaymentError("Interest-only repayment is not supported.")
    return inputs
