"""Orchestrate request validation, rule set selection and tax calculations.

The calculation service validates the request against the shared models,
selects the rule set for the requested year and delegates the arithmetic to
the pure calculators. Labels and display strings are added here so that the
calculators keep full precision and never deal with presentation. Profiling
hooks live here as well, giving the rest of the application a simple
``calculate_tax`` entry point.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from contextlib import contextmanager
from time import perf_counter
from typing import Any

from pydantic import ValidationError

from davko.backend.app.localization import Translator, get_translator
from davko.backend.app.models import (
    Breakdown,
    CalculationRequest,
    CalculationResponse,
    ExtrasOptions,
    format_validation_error,
)
from davko.backend.config.year_config import (
    InvalidInputError,
    YearConfiguration,
    select_rule_set,
)

from .calculators import (
    calculate_full_breakdown,
    calculate_full_breakdown_with_extras,
    format_euro,
    format_percent,
)

_LOGGER = logging.getLogger(__name__)

_BASE_FIELDS = (
    "gross_income",
    "contributions",
    "relief",
    "taxed_income",
    "income_tax",
    "employer_tax",
    "net_income",
    "total_employee_tax",
    "total_tax",
    "total_cost",
)

_EXTRAS_FIELDS = (
    "food_compensation",
    "commute_compensation",
    "vacation_allowance",
    "bonus",
    "bonus_contributions",
    "bonus_employer_tax",
    "total_contributions",
    "total_employer_tax",
    "total_above_handle",
)

_PERCENTAGE_FIELDS = ("tax_percentage", "net_percentage")


def _profiling_enabled() -> bool:
    """Return ``True`` when calculation profiling should be captured."""

    flag = os.getenv("DAVKO_PROFILE_CALCULATIONS", "")
    return flag.strip().lower() in {"1", "true", "yes", "on"}


@contextmanager
def _profile_section(name: str, store: dict[str, float] | None):
    """Capture the duration of a named section when profiling is enabled."""

    if store is None:
        yield
        return

    start = perf_counter()
    try:
        yield
    finally:
        store[name] = perf_counter() - start


def _validate_request(payload: Mapping[str, Any] | CalculationRequest) -> CalculationRequest:
    if isinstance(payload, CalculationRequest):
        data: Any = payload.model_dump(mode="python")
    elif isinstance(payload, Mapping):
        data = payload
    else:
        raise InvalidInputError("Payload must be a mapping")

    try:
        return CalculationRequest.model_validate(data)
    except ValidationError as exc:
        raise InvalidInputError(format_validation_error(exc)) from exc


def _build_breakdown(request: CalculationRequest, config: YearConfiguration) -> Breakdown:
    extra_relief = request.extra_relief.model_dump()

    if request.extras is None:
        return calculate_full_breakdown(
            request.gross_income,
            request.period,
            config,
            include_employer_tax=request.include_employer_tax,
            options=extra_relief,
        )

    options = ExtrasOptions.model_validate(
        {
            **request.extras.model_dump(),
            "include_employer_tax": request.include_employer_tax,
            "extra_relief": extra_relief,
        }
    )
    return calculate_full_breakdown_with_extras(
        request.gross_income, request.period, config, options
    )


def _fields_for(includes_extras: bool) -> tuple[str, ...]:
    if includes_extras:
        return _BASE_FIELDS + _EXTRAS_FIELDS
    return _BASE_FIELDS


def build_labels(translator: Translator, includes_extras: bool = False) -> dict[str, str]:
    """Return localized labels for the breakdown fields."""

    fields = _fields_for(includes_extras) + _PERCENTAGE_FIELDS + ("bracket",)
    return {field: translator(f"breakdown.{field}") for field in fields}


def build_display(breakdown: Breakdown, includes_extras: bool = False) -> dict[str, str]:
    """Return presentation strings rounded for display."""

    display = {
        field: format_euro(getattr(breakdown, field))
        for field in _fields_for(includes_extras)
    }
    for field in _PERCENTAGE_FIELDS:
        display[field] = format_percent(getattr(breakdown, field))
    return display


def calculate_tax(payload: Mapping[str, Any] | CalculationRequest) -> dict[str, Any]:
    """Compute the breakdown for the provided payload."""

    request = _validate_request(payload)

    timings: dict[str, float] | None = {} if _profiling_enabled() else None
    overall_start = perf_counter() if timings is not None else None

    with _profile_section("select_rule_set", timings):
        config = select_rule_set(request.year)

    with _profile_section("breakdown", timings):
        breakdown = _build_breakdown(request, config)

    includes_extras = request.extras is not None
    translator = get_translator(request.locale)

    with _profile_section("presentation", timings):
        labels = build_labels(translator, includes_extras)
        display = build_display(breakdown, includes_extras)

    if timings is not None and overall_start is not None:
        timings["total"] = perf_counter() - overall_start
        _LOGGER.debug(
            "calculate_tax timings (ms): %s",
            {name: round(duration * 1000, 3) for name, duration in timings.items()},
        )

    if config.employer.pending_confirmation and request.include_employer_tax:
        _LOGGER.info(
            "Employer tax rate %s for %s is pending confirmation (candidates: %s)",
            config.employer.rate,
            config.year,
            list(config.employer.candidate_rates),
        )

    response_model = CalculationResponse(
        breakdown=breakdown,
        labels=labels,
        display=display,
        meta={
            "year": config.year,
            "period": breakdown.period,
            "locale": translator.locale,
            "includes_extras": includes_extras,
            "employer_rate": config.employer.rate,
            "employer_rate_pending_confirmation": config.employer.pending_confirmation,
        },
    )

    return response_model.model_dump(mode="json")


__all__ = ["build_display", "build_labels", "calculate_tax"]
