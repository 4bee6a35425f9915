"""Assemble complete breakdowns from the individual calculators.

Every function here is pure: the rule set and the option records are
immutable, so identical inputs always produce identical breakdowns and the
functions may be called concurrently without coordination.
"""

from __future__ import annotations

from davko.backend.app.models import Breakdown
from davko.backend.config.year_config import (
    YearConfiguration,
    normalise_period,
    select_rule_set,
)

from .brackets import calculate_bracket_breakdown, calculate_total_income_tax
from .contributions import calculate_contributions, calculate_employer_tax
from .extras import ExtrasLike, calculate_untaxed_extras, coerce_extras_options
from .relief import ExtraReliefLike, calculate_relief, coerce_extra_relief_options
from .utils import ensure_amount


def _share(amount: float, total_cost: float) -> float:
    return (amount / total_cost) * 100 if total_cost > 0 else 0.0


def calculate_net_income(
    gross_income: float,
    period: str,
    config: YearConfiguration,
    options: ExtraReliefLike = None,
) -> float:
    """Return gross income less contributions and income tax."""

    contributions = calculate_contributions(gross_income, period, config)
    income_tax = calculate_total_income_tax(gross_income, period, config, options)
    return gross_income - contributions - income_tax


def calculate_full_breakdown(
    gross_income: float,
    period: str,
    config: YearConfiguration,
    include_employer_tax: bool = False,
    options: ExtraReliefLike = None,
) -> Breakdown:
    """Return the breakdown of ordinary salary without untaxed extras."""

    gross = ensure_amount(gross_income, "gross_income")
    period = normalise_period(period)
    relief_options = coerce_extra_relief_options(options)

    contributions = calculate_contributions(gross, period, config)
    relief = calculate_relief(gross, period, config, relief_options)
    taxed_income = max(0.0, gross - contributions - relief)
    income_tax = calculate_total_income_tax(gross, period, config, relief_options)
    employer_tax = calculate_employer_tax(gross, config) if include_employer_tax else 0.0
    net_income = gross - contributions - income_tax

    total_employee_tax = contributions + income_tax
    total_tax = total_employee_tax + employer_tax
    total_cost = gross + employer_tax

    return Breakdown(
        year=config.year,
        period=period,
        gross_income=gross,
        contributions=contributions,
        relief=relief,
        taxed_income=taxed_income,
        income_tax=income_tax,
        bracket_breakdown=calculate_bracket_breakdown(taxed_income, period, config),
        employer_tax=employer_tax,
        total_contributions=contributions,
        total_employer_tax=employer_tax,
        net_income=net_income,
        total_employee_tax=total_employee_tax,
        total_tax=total_tax,
        total_cost=total_cost,
        tax_percentage=_share(total_tax, total_cost),
        net_percentage=_share(net_income, total_cost),
    )


def calculate_full_breakdown_with_extras(
    gross_income: float,
    period: str,
    config: YearConfiguration,
    options: ExtrasLike = None,
) -> Breakdown:
    """Return the breakdown including benefits paid above the gross salary.

    Only the ordinary salary determines relief and income tax. The bonus adds
    its own percentage contributions and, optionally, employer tax.
    """

    gross = ensure_amount(gross_income, "gross_income")
    period = normalise_period(period)
    resolved = coerce_extras_options(options)
    relief_options = resolved.extra_relief

    contributions = calculate_contributions(gross, period, config)
    relief = calculate_relief(gross, period, config, relief_options)
    taxed_income = max(0.0, gross - contributions - relief)
    income_tax = calculate_total_income_tax(gross, period, config, relief_options)

    extras = calculate_untaxed_extras(period, resolved, config)

    total_contributions = contributions + extras.bonus_contributions
    employer_tax = (
        calculate_employer_tax(gross, config) if resolved.include_employer_tax else 0.0
    )
    total_employer_tax = employer_tax + extras.bonus_employer_tax

    net_income = (
        gross
        + extras.food_compensation
        + extras.commute_compensation
        + extras.vacation_allowance
        + extras.bonus
        - total_contributions
        - income_tax
    )

    total_employee_tax = total_contributions + income_tax
    total_tax = total_employee_tax + total_employer_tax
    total_cost = (
        gross
        + total_employer_tax
        + extras.food_compensation
        + extras.commute_compensation
        + extras.vacation_allowance
        + extras.bonus
    )

    return Breakdown(
        year=config.year,
        period=period,
        gross_income=gross,
        contributions=contributions,
        relief=relief,
        taxed_income=taxed_income,
        income_tax=income_tax,
        bracket_breakdown=calculate_bracket_breakdown(taxed_income, period, config),
        employer_tax=employer_tax,
        food_compensation=extras.food_compensation,
        commute_compensation=extras.commute_compensation,
        vacation_allowance=extras.vacation_allowance,
        bonus=extras.bonus,
        bonus_contributions=extras.bonus_contributions,
        bonus_employer_tax=extras.bonus_employer_tax,
        total_contributions=total_contributions,
        total_employer_tax=total_employer_tax,
        total_above_handle=extras.total_above_handle,
        net_income=net_income,
        total_employee_tax=total_employee_tax,
        total_tax=total_tax,
        total_cost=total_cost,
        tax_percentage=_share(total_tax, total_cost),
        net_percentage=_share(net_income, total_cost),
    )


def get_full_breakdown(
    gross_income: float,
    period: str,
    include_employer_tax: bool = False,
    *,
    year: int | str | None = None,
    extra_relief: ExtraReliefLike = None,
) -> Breakdown:
    """Select the rule set for ``year`` and return the plain breakdown."""

    config = select_rule_set(year)
    return calculate_full_breakdown(
        gross_income, period, config, include_employer_tax, extra_relief
    )


def get_full_breakdown_with_extras(
    gross_income: float,
    period: str,
    options: ExtrasLike = None,
    *,
    year: int | str | None = None,
) -> Breakdown:
    """Select the rule set for ``year`` and return the breakdown with extras."""

    config = select_rule_set(year)
    return calculate_full_breakdown_with_extras(gross_income, period, config, options)


__all__ = [
    "calculate_full_breakdown",
    "calculate_full_breakdown_with_extras",
    "calculate_net_income",
    "get_full_breakdown",
    "get_full_breakdown_with_extras",
]
