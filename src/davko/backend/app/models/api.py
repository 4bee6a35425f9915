"""Pydantic models describing the public API surface."""

from __future__ import annotations

from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

from davko.backend.config.year_config import normalise_period

__all__ = [
    "BracketTax",
    "Breakdown",
    "CalculationRequest",
    "CalculationResponse",
    "ExtraReliefInput",
    "ExtrasInput",
    "ResponseMeta",
    "format_validation_error",
]


class ExtraReliefInput(BaseModel):
    """Family, student and young adult relief selections."""

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    children_count: int = Field(default=0, ge=0)
    special_needs_count: int = Field(default=0, ge=0)
    children_months: float = 12
    is_student: bool = False
    is_young_adult: bool = False
    other_family_count: int = Field(default=0, ge=0)

    @field_validator("is_student", "is_young_adult", mode="before")
    @classmethod
    def _coerce_flags(cls, value: Any) -> bool:
        if value is None:
            return False
        return bool(value)

    @field_validator("children_months", mode="before")
    @classmethod
    def _default_months(cls, value: Any) -> Any:
        if value is None:
            return 12
        return value


class ExtrasInput(BaseModel):
    """Benefits paid on top of the ordinary salary (yearly figures)."""

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    vacation_allowance: float = Field(default=0.0, ge=0)
    company_bonus: float = Field(default=0.0, ge=0)
    daily_food_compensation: float = Field(default=0.0, ge=0)
    daily_commute_compensation: float = Field(default=0.0, ge=0)
    vacation_days: int = Field(default=0, ge=0)


class CalculationRequest(BaseModel):
    """Complete payload accepted by the calculation endpoint.

    The model doubles as the persisted session record: dumping and
    re-validating it reproduces the same engine inputs.
    """

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    year: int | None = Field(default=None, ge=0)
    period: str = "yearly"
    gross_income: float = Field(..., ge=0)
    include_employer_tax: bool = False
    locale: str = Field(default="en")
    extra_relief: ExtraReliefInput = Field(default_factory=ExtraReliefInput)
    extras: ExtrasInput | None = None

    @field_validator("period", mode="before")
    @classmethod
    def _normalise_period(cls, value: Any) -> str:
        if value is None:
            return "yearly"
        return normalise_period(value)

    @field_validator("locale", mode="before")
    @classmethod
    def _normalise_locale(cls, value: Any) -> str:
        if value is None:
            return "en"
        text = str(value).strip()
        return text or "en"

    @field_validator("extra_relief", mode="before")
    @classmethod
    def _default_extra_relief(cls, value: Any) -> Any:
        if value is None:
            return {}
        return value


class BracketTax(BaseModel):
    """Tax collected by one bracket for a given taxed income."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    lower: float
    upper: float | None
    rate: float
    tax: float


class Breakdown(BaseModel):
    """Complete, internally consistent decomposition of a gross income."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    year: int
    period: str
    gross_income: float
    contributions: float
    relief: float
    taxed_income: float
    income_tax: float
    bracket_breakdown: tuple[BracketTax, ...]
    employer_tax: float
    food_compensation: float = 0.0
    commute_compensation: float = 0.0
    vacation_allowance: float = 0.0
    bonus: float = 0.0
    bonus_contributions: float = 0.0
    bonus_employer_tax: float = 0.0
    total_contributions: float
    total_employer_tax: float
    total_above_handle: float = 0.0
    net_income: float
    total_employee_tax: float
    total_tax: float
    total_cost: float
    tax_percentage: float
    net_percentage: float


class ResponseMeta(BaseModel):
    """Metadata returned alongside the calculation output."""

    model_config = ConfigDict(extra="forbid")

    year: int
    period: str
    locale: str
    includes_extras: bool = False
    employer_rate: float
    employer_rate_pending_confirmation: bool = False


class CalculationResponse(BaseModel):
    """Full response payload produced by the calculation service."""

    model_config = ConfigDict(extra="forbid")

    breakdown: Breakdown
    labels: dict[str, str]
    display: dict[str, str]
    meta: ResponseMeta


def format_validation_error(error: ValidationError, subject: str = "calculation payload") -> str:
    """Return a concise human-readable description of validation issues."""

    messages: list[str] = []
    for issue in error.errors():
        location = ".".join(str(part) for part in issue.get("loc", ()))
        message = issue.get("msg", "Invalid value")
        if "greater than or equal to 0" in message.lower():
            message = "value cannot be negative"
        if location:
            messages.append(f"{location}: {message}")
        else:
            messages.append(message)

    details = "; ".join(messages) if messages else str(error)
    return f"Invalid {subject}: {details}"
