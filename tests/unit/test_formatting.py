"""Display helpers used for labels and presentation strings."""

from __future__ import annotations

import pytest

from davko.backend.app.services.calculators import (
    format_euro,
    format_percent,
    format_percentage,
    round_currency,
)


@pytest.mark.parametrize(
    "amount, expected",
    [
        (0, "0,00 EUR"),
        (12.5, "12,50 EUR"),
        (1234.564, "1.234,56 EUR"),
        (48000, "48.000,00 EUR"),
        (1234567.891, "1.234.567,89 EUR"),
        (-446.04, "-446,04 EUR"),
    ],
)
def test_format_euro(amount: float, expected: str) -> None:
    assert format_euro(amount) == expected


@pytest.mark.parametrize(
    "value, expected",
    [(33.333, "33.3%"), (60.9124, "60.9%"), (50.0, "50%"), (0.0, "0%")],
)
def test_format_percent(value: float, expected: str) -> None:
    assert format_percent(value) == expected


def test_format_percentage_for_rates() -> None:
    assert format_percentage(0.5) == "50%"
    assert format_percentage(0.125) == "12.50%"


def test_rounding_helpers() -> None:
    assert round_currency(29237.9439) == 29237.94
