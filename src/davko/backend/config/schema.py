"""Pydantic models describing the tax year rule set schema."""

from __future__ import annotations

import math
from typing import Any, Iterable, Mapping, Sequence

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    computed_field,
    field_validator,
    model_validator,
)
from typing_extensions import Self

YEARLY = "yearly"
MONTHLY = "monthly"
PERIODS: tuple[str, ...] = (YEARLY, MONTHLY)
MONTHS_PER_YEAR = 12

_BOUNDARY_TOLERANCE = 1e-9


class ConfigurationError(ValueError):
    """Raised when configuration values violate schema expectations."""


class InvalidInputError(ValueError):
    """Raised when caller supplied values fall outside the supported domain."""


def normalise_period(period: Any) -> str:
    """Return the canonical period key for ``period``.

    Accepts the period names in any case. Anything else is a caller error.
    """

    if isinstance(period, str):
        candidate = period.strip().lower()
        if candidate in PERIODS:
            return candidate
    raise InvalidInputError(
        f"Unsupported period {period!r}; expected one of: {', '.join(PERIODS)}"
    )


class ImmutableModel(BaseModel):
    """Base class that freezes instances and rejects unknown fields."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


class TaxBracket(ImmutableModel):
    """Represents a single progressive tax bracket over ``[lower, upper)``."""

    lower_bound: float = Field(default=0.0, alias="lower")
    upper_bound: float | None = Field(default=None, alias="upper")
    rate: float

    @model_validator(mode="after")
    def _validate_values(self) -> TaxBracket:
        if self.rate < 0 or self.rate > 1:
            raise ConfigurationError("Tax rates must be between 0 and 1")
        if self.lower_bound < 0:
            raise ConfigurationError("Lower bounds must be non-negative")
        if self.upper_bound is not None and self.upper_bound <= self.lower_bound:
            raise ConfigurationError("Upper bounds must exceed the lower bound")
        return self

    @property
    def effective_upper(self) -> float:
        """Upper bound with the open top bracket expressed as infinity."""

        return math.inf if self.upper_bound is None else self.upper_bound

    @property
    def is_open(self) -> bool:
        return self.upper_bound is None


class ReliefRule(ImmutableModel):
    """Income dependent general relief (splošna olajšava)."""

    threshold: float
    base_amount: float
    additional_base: float
    multiplier: float

    @model_validator(mode="after")
    def _validate_values(self) -> ReliefRule:
        for field_name in ("threshold", "base_amount", "additional_base", "multiplier"):
            if getattr(self, field_name) < 0:
                raise ConfigurationError(f"Relief '{field_name}' must be non-negative")
        return self

    def amount_for_income(self, income: float) -> float:
        """Return the uncapped relief for ``income``."""

        if income <= self.threshold:
            additional = self.additional_base - self.multiplier * income
            return self.base_amount + max(0.0, additional)
        return self.base_amount

    @property
    def threshold_gap(self) -> float:
        """Size of the jump in relief when income crosses the threshold."""

        return max(0.0, self.additional_base - self.multiplier * self.threshold)


class ExtraReliefSchedule(ImmutableModel):
    """Family, student and young adult relief amounts for one period."""

    children: Sequence[float]
    children_increment: float = 0.0
    special_needs: float = 0.0
    other_family_member: float = 0.0
    student: float
    young_adult: float

    @field_validator("children", mode="before")
    @classmethod
    def _coerce_children(cls, value: Any) -> Sequence[float]:
        if isinstance(value, Iterable) and not isinstance(value, (str, bytes, Mapping)):
            return tuple(float(entry) for entry in value)
        raise ConfigurationError("'children' must be a sequence of per-child amounts")

    @model_validator(mode="after")
    def _validate_amounts(self) -> ExtraReliefSchedule:
        if not self.children:
            raise ConfigurationError("Children relief schedule must list at least one amount")
        if any(amount < 0 for amount in self.children):
            raise ConfigurationError("Children relief amounts must be non-negative")
        for field_name in (
            "children_increment",
            "special_needs",
            "other_family_member",
            "student",
            "young_adult",
        ):
            if getattr(self, field_name) < 0:
                raise ConfigurationError(f"Extra relief '{field_name}' must be non-negative")
        return self

    def amount_for_child(self, index: int) -> float:
        """Return the relief for the child at zero-based ``index``."""

        if index < len(self.children):
            return self.children[index]
        beyond = index - len(self.children) + 1
        return self.children[-1] + beyond * self.children_increment


class PeriodRules(ImmutableModel):
    """Relief, bracket and extra relief tables for a single period."""

    relief: ReliefRule
    brackets: Sequence[TaxBracket] = Field(alias="tax_brackets")
    extra_relief: ExtraReliefSchedule | None = None

    @field_validator("brackets", mode="before")
    @classmethod
    def _coerce_brackets(cls, value: Any) -> Sequence[Any]:
        if isinstance(value, Iterable) and not isinstance(value, (str, bytes, Mapping)):
            return tuple(value)
        raise ConfigurationError("'tax_brackets' must be a sequence of bracket mappings")

    @model_validator(mode="after")
    def _validate_brackets(self) -> PeriodRules:
        validate_bracket_sequence(self.brackets)
        return self


class ContributionRule(ImmutableModel):
    """Employee social security contributions (prispevki delavca)."""

    employee_rate: float
    fixed_monthly_amount: float = 0.0

    @model_validator(mode="after")
    def _validate_rates(self) -> ContributionRule:
        if self.employee_rate < 0:
            raise ConfigurationError("Contribution rates must be non-negative")
        if self.fixed_monthly_amount < 0:
            raise ConfigurationError("Fixed contribution amounts must be non-negative")
        return self

    def fixed_amount(self, period: str) -> float:
        if normalise_period(period) == MONTHLY:
            return self.fixed_monthly_amount
        return self.fixed_monthly_amount * MONTHS_PER_YEAR


class EmployerTaxRule(ImmutableModel):
    """Employer-side contributions levied on gross pay."""

    rate: float
    pending_confirmation: bool = False
    candidate_rates: Sequence[float] = Field(default_factory=tuple)
    notes_url: str | None = None

    @field_validator("candidate_rates", mode="before")
    @classmethod
    def _coerce_candidates(cls, value: Any) -> Sequence[float]:
        if value is None:
            return ()
        if isinstance(value, Iterable) and not isinstance(value, (str, bytes, Mapping)):
            return tuple(float(entry) for entry in value)
        raise ConfigurationError("'candidate_rates' must be a sequence of rates")

    @model_validator(mode="after")
    def _validate_rate(self) -> EmployerTaxRule:
        if self.rate < 0:
            raise ConfigurationError("Employer tax rate must be non-negative")
        return self


def validate_bracket_sequence(brackets: Sequence[TaxBracket]) -> None:
    """Ensure ``brackets`` are contiguous, ascending and end open."""

    if not brackets:
        raise ConfigurationError("At least one tax bracket must be defined")
    if abs(brackets[0].lower_bound) > _BOUNDARY_TOLERANCE:
        raise ConfigurationError("The first tax bracket must start at zero")

    previous: TaxBracket | None = None
    for bracket in brackets:
        if previous is not None:
            if previous.upper_bound is None:
                raise ConfigurationError("Only the final tax bracket may be open ended")
            if abs(bracket.lower_bound - previous.upper_bound) > _BOUNDARY_TOLERANCE:
                raise ConfigurationError(
                    "Tax brackets must be contiguous: "
                    f"{bracket.lower_bound} does not follow {previous.upper_bound}"
                )
        previous = bracket

    if brackets[-1].upper_bound is not None:
        raise ConfigurationError("Final tax bracket must have an open upper bound")


class YearConfiguration(ImmutableModel):
    """Structured representation of a tax year rule set."""

    year: int
    meta: Mapping[str, Any] = Field(default_factory=dict)
    contributions: ContributionRule
    employer: EmployerTaxRule
    work_days_per_year: int
    yearly: PeriodRules
    monthly: PeriodRules

    @model_validator(mode="before")
    @classmethod
    def _flatten_periods(cls, data: Any) -> Mapping[str, Any]:
        if not isinstance(data, Mapping):
            raise ConfigurationError("Configuration file must define a mapping at the top level")

        prepared = dict(data)
        meta = prepared.get("meta")
        if meta is None:
            prepared["meta"] = {}
        elif not isinstance(meta, Mapping):
            raise ConfigurationError("'meta' section must be a mapping if provided")

        periods = prepared.pop("periods", None)
        if not isinstance(periods, Mapping):
            raise ConfigurationError("Configuration must include a 'periods' section")

        sections: dict[str, dict[str, Any]] = {}
        for period in PERIODS:
            payload = periods.get(period)
            if not isinstance(payload, Mapping):
                raise ConfigurationError(f"Period configuration requires a '{period}' section")
            sections[period] = dict(payload)

        yearly_extra = sections[YEARLY].get("extra_relief")
        monthly_extra = sections[MONTHLY].get("extra_relief")
        if (yearly_extra is None) != (monthly_extra is None):
            raise ConfigurationError(
                "Extra relief must be configured for both periods or for neither"
            )
        if isinstance(yearly_extra, Mapping) and isinstance(monthly_extra, Mapping):
            # Monthly student and young adult relief default to a twelfth of
            # the yearly amounts.
            monthly_extra = dict(monthly_extra)
            for key in ("student", "young_adult"):
                if monthly_extra.get(key) is None and yearly_extra.get(key) is not None:
                    monthly_extra[key] = float(yearly_extra[key]) / MONTHS_PER_YEAR
            sections[MONTHLY]["extra_relief"] = monthly_extra

        prepared.update(sections)
        return prepared

    @model_validator(mode="after")
    def _validate_year(self) -> Self:
        if self.work_days_per_year <= 0:
            raise ConfigurationError("'work_days_per_year' must be a positive integer")
        if len(self.yearly.brackets) != len(self.monthly.brackets):
            raise ConfigurationError(
                "Yearly and monthly bracket tables must have the same number of brackets"
            )
        return self

    def period_rules(self, period: str) -> PeriodRules:
        """Return the rule tables for ``period``."""

        if normalise_period(period) == MONTHLY:
            return self.monthly
        return self.yearly

    @computed_field
    @property
    def has_extra_relief(self) -> bool:
        return self.yearly.extra_relief is not None

    @computed_field
    @property
    def bracket_count(self) -> int:
        return len(self.yearly.brackets)


class TaxYearManifestEntry(ImmutableModel):
    """Entry describing a supported tax year in the manifest."""

    year: int
    filename: str | None = None
    status: str = "active"
    notes_url: str | None = None

    @computed_field
    @property
    def resolved_filename(self) -> str:
        return self.filename or f"{self.year}.yaml"


class TaxYearManifest(ImmutableModel):
    """Manifest describing the available tax year configuration files."""

    years: Sequence[TaxYearManifestEntry]

    @model_validator(mode="after")
    def _validate_years(self) -> TaxYearManifest:
        seen: set[int] = set()
        for entry in self.years:
            if entry.year in seen:
                raise ConfigurationError(
                    f"Duplicate year {entry.year} declared in the configuration manifest"
                )
            seen.add(entry.year)
        return self

    def get_entry(self, year: int) -> TaxYearManifestEntry:
        for entry in self.years:
            if entry.year == year:
                return entry
        raise KeyError(year)

    @computed_field
    @property
    def supported_years(self) -> tuple[int, ...]:
        return tuple(sorted(entry.year for entry in self.years))


__all__ = [
    "ConfigurationError",
    "ContributionRule",
    "EmployerTaxRule",
    "ExtraReliefSchedule",
    "ImmutableModel",
    "InvalidInputError",
    "MONTHLY",
    "MONTHS_PER_YEAR",
    "PERIODS",
    "PeriodRules",
    "ReliefRule",
    "TaxBracket",
    "TaxYearManifest",
    "TaxYearManifestEntry",
    "ValidationError",
    "YEARLY",
    "YearConfiguration",
    "normalise_period",
    "validate_bracket_sequence",
]
