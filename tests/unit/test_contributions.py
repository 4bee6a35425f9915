"""Employee contributions and employer tax."""

from __future__ import annotations

import pytest

from davko.backend.app.services.calculators import (
    calculate_bonus_contributions,
    calculate_contributions,
    calculate_employer_tax,
)
from davko.backend.config.year_config import InvalidInputError, YearConfiguration


def test_yearly_contributions_include_twelve_flat_amounts(config_2025: YearConfiguration) -> None:
    assert calculate_contributions(48000, "yearly", config_2025) == pytest.approx(11534.04)


def test_monthly_contributions_include_one_flat_amount(config_2026: YearConfiguration) -> None:
    assert calculate_contributions(2000, "monthly", config_2026) == pytest.approx(499.17)


def test_zero_gross_still_owes_the_flat_amount(config_2026: YearConfiguration) -> None:
    assert calculate_contributions(0, "monthly", config_2026) == pytest.approx(37.17)
    assert calculate_contributions(0, "yearly", config_2026) == pytest.approx(446.04)


def test_bonus_contributions_use_the_rate_only(config_2026: YearConfiguration) -> None:
    assert calculate_bonus_contributions(1000, config_2026) == pytest.approx(231.0)


def test_employer_tax_uses_year_rate(
    config_2025: YearConfiguration, config_2026: YearConfiguration
) -> None:
    assert calculate_employer_tax(48000, config_2025) == pytest.approx(7728.0)
    assert calculate_employer_tax(48000, config_2026) == pytest.approx(8208.0)


@pytest.mark.parametrize("gross", [-1, float("nan"), float("inf"), "abc", True])
def test_invalid_gross_is_rejected(config_2026: YearConfiguration, gross: object) -> None:
    with pytest.raises(InvalidInputError):
        calculate_contributions(gross, "yearly", config_2026)  # type: ignore[arg-type]


def test_unknown_period_is_rejected(config_2026: YearConfiguration) -> None:
    with pytest.raises(InvalidInputError):
        calculate_contributions(1000, "weekly", config_2026)
