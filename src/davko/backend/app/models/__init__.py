"""Typed engine inputs and outputs shared across the calculation services.

The engine never keeps session state: every call receives an immutable option
record and returns a freshly built :class:`Breakdown`. The option records
reuse the request field definitions but are frozen so that one instance can
be shared freely between calls, while intermediate results use lightweight
dataclasses.
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import ConfigDict, Field

from .api import (
    BracketTax,
    Breakdown,
    CalculationRequest,
    CalculationResponse,
    ExtraReliefInput,
    ExtrasInput,
    ResponseMeta,
    format_validation_error,
)

__all__ = [
    "BracketTax",
    "Breakdown",
    "CalculationRequest",
    "CalculationResponse",
    "ExtraReliefInput",
    "ExtraReliefOptions",
    "ExtrasInput",
    "ExtrasOptions",
    "ResponseMeta",
    "UntaxedExtras",
    "format_validation_error",
]


class ExtraReliefOptions(ExtraReliefInput):
    """Immutable extra relief selections consumed by the engine."""

    model_config = ConfigDict(extra="forbid", frozen=True, allow_inf_nan=False)

    @property
    def effective_special_needs_count(self) -> int:
        return min(self.special_needs_count, self.children_count)

    @property
    def months_factor(self) -> float:
        """Share of the year the children relief applies to."""

        months = min(12.0, max(0.0, float(self.children_months)))
        return months / 12


class ExtrasOptions(ExtrasInput):
    """Immutable options for a breakdown that includes untaxed extras."""

    model_config = ConfigDict(extra="forbid", frozen=True, allow_inf_nan=False)

    include_employer_tax: bool = False
    extra_relief: ExtraReliefOptions = Field(default_factory=ExtraReliefOptions)


@dataclass(frozen=True, slots=True)
class UntaxedExtras:
    """Period adjusted benefits paid on top of the ordinary salary."""

    work_days_used: int
    food_compensation: float = 0.0
    commute_compensation: float = 0.0
    vacation_allowance: float = 0.0
    bonus: float = 0.0
    bonus_contributions: float = 0.0
    bonus_employer_tax: float = 0.0

    @property
    def total_above_handle(self) -> float:
        return (
            self.vacation_allowance
            + self.bonus
            + self.food_compensation
            + self.commute_compensation
        )
