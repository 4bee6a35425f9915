"""Expose the YAML rule sets to front-end consumers.

The front-end draws the bracket grid and the relief settings straight from
these payloads so that yearly figures live in one place only.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from flask import Blueprint, jsonify, request

from davko.backend.app.http import ProblemResponse, not_found
from davko.backend.app.localization import Translator, get_translator
from davko.backend.app.services.calculators import (
    format_percentage,
    get_all_brackets,
    get_bracket_info,
)
from davko.backend.config.year_config import (
    YEARLY,
    InvalidInputError,
    PeriodRules,
    TaxBracket,
    YearConfiguration,
    available_years,
    default_year,
    load_manifest,
    load_year_configuration,
    normalise_period,
)
from davko.backend.version import get_project_version

blueprint = Blueprint("config", __name__, url_prefix="/api/v1/config")


@dataclass(frozen=True)
class YearRouteContext:
    """Common context shared by year-scoped configuration endpoints."""

    year: int
    period: str
    translator: Translator
    configuration: YearConfiguration


def _build_year_context(year: int) -> YearRouteContext | ProblemResponse:
    try:
        configuration = load_year_configuration(year)
    except InvalidInputError as exc:
        return not_found(str(exc))

    period = normalise_period(request.args.get("period", YEARLY))
    translator = get_translator(request.args.get("locale"))
    return YearRouteContext(
        year=year,
        period=period,
        translator=translator,
        configuration=configuration,
    )


def get_configuration_metadata() -> dict[str, Any]:
    """Expose runtime metadata derived from the configuration manifest."""

    supported_years = list(load_manifest().supported_years)
    return {
        "version": get_project_version(),
        "supported_years": supported_years,
        "default_year": default_year() if supported_years else None,
    }


def _serialise_bracket(index: int, bracket: TaxBracket) -> dict[str, Any]:
    return {
        "index": index,
        "lower": bracket.lower_bound,
        "upper": bracket.upper_bound,
        "rate": bracket.rate,
        "rate_label": format_percentage(bracket.rate),
    }


def _serialise_period(rules: PeriodRules) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "relief": rules.relief.model_dump(),
        "brackets": [
            _serialise_bracket(index, bracket)
            for index, bracket in enumerate(rules.brackets)
        ],
    }
    if rules.extra_relief is not None:
        schedule = rules.extra_relief.model_dump()
        schedule["children"] = list(schedule["children"])
        payload["extra_relief"] = schedule
    return payload


def _serialise_year(config: YearConfiguration) -> dict[str, Any]:
    employer = config.employer
    return {
        "year": config.year,
        "meta": dict(config.meta),
        "contributions": config.contributions.model_dump(),
        "employer": {
            "rate": employer.rate,
            "pending_confirmation": employer.pending_confirmation,
            "candidate_rates": list(employer.candidate_rates),
            "notes_url": employer.notes_url,
        },
        "work_days_per_year": config.work_days_per_year,
        "has_extra_relief": config.has_extra_relief,
        "bracket_count": config.bracket_count,
        "periods": {
            period: _serialise_period(config.period_rules(period))
            for period in ("yearly", "monthly")
        },
    }


@blueprint.get("/meta")
def get_application_metadata() -> tuple[Any, int]:
    return jsonify(get_configuration_metadata()), 200


@blueprint.get("/years")
def list_years() -> tuple[Any, int]:
    """Return every configured rule set."""

    years = [_serialise_year(load_year_configuration(year)) for year in available_years()]
    metadata = get_configuration_metadata()
    payload = {
        "years": years,
        "default_year": metadata["default_year"],
        "supported_years": metadata["supported_years"],
    }
    return jsonify(payload), 200


@blueprint.get("/<int:year>/brackets")
def list_brackets(year: int) -> tuple[Any, int]:
    """Return the bracket table for the requested period."""

    context = _build_year_context(year)
    if isinstance(context, ProblemResponse):
        return context.to_response()

    brackets = get_all_brackets(context.period, context.configuration)
    payload = {
        "year": context.year,
        "period": context.period,
        "label": context.translator("breakdown.bracket"),
        "brackets": [
            _serialise_bracket(index, bracket) for index, bracket in enumerate(brackets)
        ],
    }
    return jsonify(payload), 200


@blueprint.get("/<int:year>/brackets/<int:index>")
def get_bracket(year: int, index: int) -> tuple[Any, int]:
    context = _build_year_context(year)
    if isinstance(context, ProblemResponse):
        return context.to_response()

    bracket = get_bracket_info(index, context.period, context.configuration)
    if bracket is None:
        return not_found(
            f"Bracket {index} does not exist for {context.year}",
            bracket_count=context.configuration.bracket_count,
        ).to_response()

    payload = {
        "year": context.year,
        "period": context.period,
        **_serialise_bracket(index, bracket),
    }
    return jsonify(payload), 200
