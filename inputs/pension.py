"""
Pension assumptions — canonical record and normalizer.

Raw input uses camelCase keys (currentAge, growthRate, ...). The record keeps
snake_case attributes with camelCase aliases so a normalized record can be
dumped back to the raw shape and normalized again without change.
"""

from __future__ import annotations

import datetime
from typing import Any, Mapping, Optional, Union

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

from core.config import (
    DEFAULT_CONFIG,
    DEFAULT_HORIZON_END_AGE,
    DEFAULT_INFLATION_RATE,
    DEFAULT_WAGE_GROWTH_RATE,
)
from core.errors import ValidationError
from core.utils import is_finite_number

from .validators import collect_errors

PENSION_ROOT = "pensionInputs"


def _lookup(data: Mapping[str, Any], name: str) -> Any:
    """Raw value under the camelCase alias or the field name, alias first."""
    value = data.get(to_camel(name))
    return data.get(name) if value is None else value


class PensionInputs(BaseModel):
    """Validated pension assumptions. Rates are decimals (0.05 == 5%)."""

    model_config = ConfigDict(
        frozen=True,
        strict=True,
        allow_inf_nan=False,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    current_age: int
    retirement_age: int
    horizon_end_age: int = Field(default=DEFAULT_HORIZON_END_AGE, validate_default=True)
    current_salary: float
    current_pot: float
    personal_pct: float
    employer_pct: float
    growth_rate: float = Field(gt=-1)
    inflation_rate: float = Field(default=DEFAULT_INFLATION_RATE, gt=-1)
    wage_growth_rate: float = Field(default=DEFAULT_WAGE_GROWTH_RATE, gt=-1)
    target_income_pct_of_salary: Optional[float] = None
    target_income_today: float
    current_year: int = Field(default_factory=lambda: datetime.date.today().year)
    min_drawdown_mode: bool = False

    @model_validator(mode="before")
    @classmethod
    def _derive_target_income(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        target = _lookup(data, "target_income_today")
        pct = _lookup(data, "target_income_pct_of_salary")
        if target is None and pct is None:
            raise ValueError("must include targetIncomeToday or targetIncomePctOfSalary")
        if target is None:
            salary = _lookup(data, "current_salary")
            # leave a malformed pct/salary for field validation to report
            if is_finite_number(pct) and is_finite_number(salary):
                # written in the same spelling the caller used for the pct
                if "target_income_pct_of_salary" in data:
                    key = "target_income_today"
                else:
                    key = "targetIncomeToday"
                data = {**data, key: pct * salary}
        return data

    @field_validator("retirement_age")
    @classmethod
    def _retirement_not_before_current(cls, value: int, info: ValidationInfo) -> int:
        current_age = info.data.get("current_age")
        if current_age is not None and value < current_age:
            raise ValueError("must be greater than or equal to currentAge")
        return value

    @field_validator("horizon_end_age")
    @classmethod
    def _horizon_not_before_retirement(cls, value: int, info: ValidationInfo) -> int:
        retirement_age = info.data.get("retirement_age")
        if retirement_age is not None and value < retirement_age:
            raise ValueError("must be greater than or equal to retirementAge")
        current_age = info.data.get("current_age")
        limit = DEFAULT_CONFIG.max_projection_years
        if current_age is not None and value - current_age > limit:
            raise ValueError(f"must be within {limit} years of currentAge")
        return value

    @property
    def years_to_retirement(self) -> int:
        return self.retirement_age - self.current_age

    @property
    def retirement_year(self) -> int:
        return self.current_year + self.years_to_retirement

    def to_raw(self) -> dict:
        return self.model_dump(by_alias=True)


def normalize_pension_inputs(raw: Union[PensionInputs, Mapping[str, Any]]) -> PensionInputs:
    """
    Validate raw pension assumptions and apply defaults.

    Raises ValidationError whose message starts with "pensionInputs.<field>".
    Passing an already-normalized record returns an equal record.
    """
    if isinstance(raw, PensionInputs):
        raw = raw.to_raw()
    if not isinstance(raw, Mapping):
        raise ValidationError(f"{PENSION_ROOT} must be an object", field=PENSION_ROOT)

    try:
        return PensionInputs.model_validate(dict(raw))
    except PydanticValidationError as exc:
        collect_errors(exc, PENSION_ROOT).raise_if_invalid()
        raise
