"""Untaxed extras: meal and commute compensation, vacation allowance, bonus."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ValidationError

from davko.backend.app.models import (
    ExtrasOptions,
    UntaxedExtras,
    format_validation_error,
)
from davko.backend.config.year_config import (
    MONTHLY,
    MONTHS_PER_YEAR,
    InvalidInputError,
    YearConfiguration,
    normalise_period,
)

from .contributions import calculate_bonus_contributions

ExtrasLike = ExtrasOptions | Mapping[str, Any] | BaseModel | None


def coerce_extras_options(options: ExtrasLike) -> ExtrasOptions:
    """Validate ``options`` into an immutable :class:`ExtrasOptions`."""

    if isinstance(options, ExtrasOptions):
        return options
    if options is None:
        return ExtrasOptions()

    if isinstance(options, BaseModel):
        payload: Any = options.model_dump()
    elif isinstance(options, Mapping):
        payload = dict(options)
    else:
        raise InvalidInputError("Extras options must be a mapping")

    try:
        return ExtrasOptions.model_validate(payload)
    except ValidationError as exc:
        raise InvalidInputError(format_validation_error(exc, "extras options")) from exc


def calculate_untaxed_extras(
    period: str, options: ExtrasLike, config: YearConfiguration
) -> UntaxedExtras:
    """Return period adjusted extras and the bonus-derived levies.

    All four benefits are yearly figures; a monthly period receives a twelfth
    of each. Meal and commute compensation accrue per day actually worked.
    """

    resolved = coerce_extras_options(options)
    factor = 1 / MONTHS_PER_YEAR if normalise_period(period) == MONTHLY else 1

    work_days_used = max(0, config.work_days_per_year - resolved.vacation_days)
    yearly_food = resolved.daily_food_compensation * work_days_used
    yearly_commute = resolved.daily_commute_compensation * work_days_used

    bonus = resolved.company_bonus * factor
    bonus_employer_tax = bonus * config.employer.rate if resolved.include_employer_tax else 0.0

    return UntaxedExtras(
        work_days_used=work_days_used,
        food_compensation=yearly_food * factor,
        commute_compensation=yearly_commute * factor,
        vacation_allowance=resolved.vacation_allowance * factor,
        bonus=bonus,
        bonus_contributions=calculate_bonus_contributions(bonus, config),
        bonus_employer_tax=bonus_employer_tax,
    )


__all__ = ["ExtrasLike", "calculate_untaxed_extras", "coerce_extras_options"]
