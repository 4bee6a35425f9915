"""General relief (splošna olajšava) and extra family/student relief."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ValidationError

from davko.backend.app.models import ExtraReliefOptions, format_validation_error
from davko.backend.config.year_config import InvalidInputError, YearConfiguration

from .contributions import calculate_contributions
from .utils import ensure_amount

ExtraReliefLike = ExtraReliefOptions | Mapping[str, Any] | BaseModel | None


def coerce_extra_relief_options(options: ExtraReliefLike) -> ExtraReliefOptions | None:
    """Validate ``options`` into an immutable :class:`ExtraReliefOptions`."""

    if options is None or isinstance(options, ExtraReliefOptions):
        return options

    if isinstance(options, BaseModel):
        payload: Any = options.model_dump()
    elif isinstance(options, Mapping):
        payload = dict(options)
    else:
        raise InvalidInputError("Extra relief options must be a mapping")

    try:
        return ExtraReliefOptions.model_validate(payload)
    except ValidationError as exc:
        raise InvalidInputError(format_validation_error(exc, "extra relief options")) from exc


def calculate_base_relief(gross_income: float, period: str, config: YearConfiguration) -> float:
    """Return the income dependent general relief before any cap."""

    gross = ensure_amount(gross_income, "gross_income")
    return config.period_rules(period).relief.amount_for_income(gross)


def calculate_extra_relief(
    options: ExtraReliefLike, period: str, config: YearConfiguration
) -> float:
    """Return family, student and young adult relief for ``period``.

    Only the children subtotal (including the special needs add-on) is
    prorated by ``children_months``. Years without an extra relief schedule
    grant nothing.
    """

    resolved = coerce_extra_relief_options(options)
    schedule = config.period_rules(period).extra_relief
    if resolved is None or schedule is None:
        return 0.0

    extra = 0.0

    if resolved.children_count > 0:
        children_relief = 0.0
        for index in range(resolved.children_count):
            children_relief += schedule.amount_for_child(index)
        children_relief += resolved.effective_special_needs_count * schedule.special_needs
        children_relief *= resolved.months_factor
        extra += children_relief

    if resolved.other_family_count > 0:
        extra += resolved.other_family_count * schedule.other_family_member

    # Student relief takes precedence over young adult relief.
    if resolved.is_student:
        extra += schedule.student
    elif resolved.is_young_adult:
        extra += schedule.young_adult

    return extra


def calculate_relief_cap(gross_income: float, period: str, config: YearConfiguration) -> float:
    """Largest relief allowed: what remains of gross after contributions."""

    contributions = calculate_contributions(gross_income, period, config)
    return max(0.0, gross_income - contributions)


def calculate_relief(
    gross_income: float,
    period: str,
    config: YearConfiguration,
    options: ExtraReliefLike = None,
) -> float:
    """Return total relief, capped at gross income less contributions."""

    relief = calculate_base_relief(gross_income, period, config)
    relief += calculate_extra_relief(options, period, config)
    return min(relief, calculate_relief_cap(gross_income, period, config))


__all__ = [
    "ExtraReliefLike",
    "calculate_base_relief",
    "calculate_extra_relief",
    "calculate_relief",
    "calculate_relief_cap",
    "coerce_extra_relief_options",
]
