"""Utility helpers for calculator modules."""

from __future__ import annotations

import math
from collections.abc import Sequence

from davko.backend.config.year_config import InvalidInputError, TaxBracket


def ensure_amount(value: float, field_name: str) -> float:
    """Return ``value`` as a float, rejecting negative or non-finite amounts."""

    if isinstance(value, bool):
        raise InvalidInputError(f"Field '{field_name}' must be a number")
    try:
        amount = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"Field '{field_name}' must be a number") from exc
    if not math.isfinite(amount):
        raise InvalidInputError(f"Field '{field_name}' must be a finite number")
    if amount < 0:
        raise InvalidInputError(f"Field '{field_name}' cannot be negative")
    return amount


def calculate_slice_tax(amount: float, bracket: TaxBracket) -> float:
    """Tax on the part of ``amount`` that falls inside ``bracket``.

    Income equal to a bracket's upper bound belongs entirely to that bracket.
    """

    if amount <= bracket.lower_bound:
        return 0.0
    in_bracket = min(amount, bracket.effective_upper) - bracket.lower_bound
    return max(0.0, in_bracket) * bracket.rate


def calculate_progressive_tax(amount: float, brackets: Sequence[TaxBracket]) -> float:
    """Calculate progressive tax for ``amount`` using ``brackets``."""

    if amount <= 0:
        return 0.0

    total = 0.0
    for bracket in brackets:
        total += calculate_slice_tax(amount, bracket)
    return total


def format_percentage(value: float) -> str:
    """Return a human-readable percentage label for the rate ``value``."""

    percentage = value * 100
    if float(int(percentage)) == percentage:
        return f"{int(percentage)}%"
    return f"{percentage:.2f}%"


def format_percent(value: float) -> str:
    """Format an already scaled percentage with one decimal (``33.3%``)."""

    rounded = round(value, 1)
    if float(int(rounded)) == rounded:
        return f"{int(rounded)}%"
    return f"{rounded}%"


def format_euro(amount: float) -> str:
    """Format ``amount`` the Slovenian way, e.g. ``1.234,56 EUR``."""

    rounded = round_currency(amount)
    digits = f"{abs(rounded):,.2f}"
    localised = digits.replace(",", " ").replace(".", ",").replace(" ", ".")
    sign = "-" if rounded < 0 else ""
    return f"{sign}{localised} EUR"


def round_currency(value: float) -> float:
    """Round monetary amounts to two decimals."""

    return round(value, 2)
