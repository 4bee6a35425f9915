"""Progressive income tax (dohodnina) over the configured brackets."""

from __future__ import annotations

from davko.backend.app.models import BracketTax
from davko.backend.config.year_config import (
    InvalidInputError,
    TaxBracket,
    YearConfiguration,
)

from .contributions import calculate_contributions
from .relief import ExtraReliefLike, calculate_relief
from .utils import calculate_progressive_tax, calculate_slice_tax


def get_bracket_count(config: YearConfiguration) -> int:
    return config.bracket_count


def get_all_brackets(period: str, config: YearConfiguration) -> tuple[TaxBracket, ...]:
    """Return the ordered bracket table for ``period``."""

    return tuple(config.period_rules(period).brackets)


def get_bracket_info(index: int, period: str, config: YearConfiguration) -> TaxBracket | None:
    """Return the bracket at ``index`` or ``None`` when there is no such bracket."""

    brackets = config.period_rules(period).brackets
    if index < 0 or index >= len(brackets):
        return None
    return brackets[index]


def calculate_bracket_tax(
    taxed_income: float, bracket_index: int, period: str, config: YearConfiguration
) -> float:
    """Return the tax collected by a single bracket."""

    bracket = get_bracket_info(bracket_index, period, config)
    if bracket is None:
        raise InvalidInputError(
            f"Bracket index {bracket_index} is out of range for {config.year}"
        )
    return calculate_slice_tax(taxed_income, bracket)


def calculate_taxed_income(
    gross_income: float,
    period: str,
    config: YearConfiguration,
    options: ExtraReliefLike = None,
) -> float:
    """Return the tax base: gross less contributions and relief, never negative."""

    contributions = calculate_contributions(gross_income, period, config)
    relief = calculate_relief(gross_income, period, config, options)
    return max(0.0, gross_income - contributions - relief)


def calculate_total_income_tax(
    gross_income: float,
    period: str,
    config: YearConfiguration,
    options: ExtraReliefLike = None,
) -> float:
    """Return income tax summed over every bracket."""

    taxed_income = calculate_taxed_income(gross_income, period, config, options)
    return calculate_progressive_tax(taxed_income, config.period_rules(period).brackets)


def calculate_bracket_breakdown(
    taxed_income: float, period: str, config: YearConfiguration
) -> tuple[BracketTax, ...]:
    """Return per-bracket detail for ``taxed_income``."""

    return tuple(
        BracketTax(
            lower=bracket.lower_bound,
            upper=bracket.upper_bound,
            rate=bracket.rate,
            tax=calculate_slice_tax(taxed_income, bracket),
        )
        for bracket in config.period_rules(period).brackets
    )


__all__ = [
    "calculate_bracket_breakdown",
    "calculate_bracket_tax",
    "calculate_taxed_income",
    "calculate_total_income_tax",
    "get_all_brackets",
    "get_bracket_count",
    "get_bracket_info",
]
