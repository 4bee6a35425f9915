"""Full salary breakdowns, with and without untaxed extras."""

from __future__ import annotations

import pytest

from davko.backend.app.models import ExtrasOptions
from davko.backend.app.services.calculators import (
    calculate_full_breakdown,
    calculate_full_breakdown_with_extras,
    calculate_net_income,
    calculate_untaxed_extras,
    get_full_breakdown,
    get_full_breakdown_with_extras,
)
from davko.backend.config.year_config import InvalidInputError, YearConfiguration

EXTRAS = {
    "vacation_allowance": 1500,
    "company_bonus": 1000,
    "daily_food_compensation": 7.96,
    "daily_commute_compensation": 5,
    "vacation_days": 24,
    "include_employer_tax": True,
}


def test_2025_reference_salary(config_2025: YearConfiguration) -> None:
    breakdown = calculate_full_breakdown(48000, "yearly", config_2025)

    assert breakdown.contributions == pytest.approx(11534.04)
    assert breakdown.relief == pytest.approx(5260.00)
    assert breakdown.taxed_income == pytest.approx(31205.96)
    assert breakdown.income_tax == pytest.approx(7480.7108)
    assert breakdown.net_income == pytest.approx(28985.2492)
    assert breakdown.employer_tax == 0.0
    assert breakdown.total_cost == pytest.approx(48000)


def test_2026_reference_salary_with_employer_tax(config_2026: YearConfiguration) -> None:
    breakdown = calculate_full_breakdown(48000, "yearly", config_2026, include_employer_tax=True)

    assert breakdown.relief == pytest.approx(5551.93)
    assert breakdown.taxed_income == pytest.approx(30914.03)
    assert breakdown.income_tax == pytest.approx(7228.0161)
    assert breakdown.net_income == pytest.approx(29237.9439)
    assert breakdown.employer_tax == pytest.approx(8208.0)
    assert breakdown.total_cost == pytest.approx(56208.0)
    assert [item.tax for item in breakdown.bracket_breakdown] == pytest.approx(
        [1555.4288, 4906.4626, 766.1247, 0.0, 0.0]
    )


def test_monthly_breakdown(config_2026: YearConfiguration) -> None:
    breakdown = calculate_full_breakdown(2000, "monthly", config_2026)

    assert breakdown.period == "monthly"
    assert breakdown.contributions == pytest.approx(499.17)
    assert breakdown.taxed_income == pytest.approx(1038.17)
    assert breakdown.income_tax == pytest.approx(188.9122)
    assert breakdown.net_income == pytest.approx(1311.9178)


def test_zero_gross_has_no_tax_and_no_shares(config_2026: YearConfiguration) -> None:
    breakdown = calculate_full_breakdown(0, "yearly", config_2026)

    assert breakdown.income_tax == 0.0
    assert breakdown.relief == 0.0
    assert breakdown.tax_percentage == 0.0
    assert breakdown.net_percentage == 0.0


@pytest.mark.parametrize("gross", [1000, 20000, 48000, 150000])
@pytest.mark.parametrize("include_employer_tax", [False, True])
def test_totals_are_consistent(
    config_2026: YearConfiguration, gross: float, include_employer_tax: bool
) -> None:
    breakdown = calculate_full_breakdown(
        gross, "yearly", config_2026, include_employer_tax=include_employer_tax
    )

    assert breakdown.total_tax + breakdown.net_income == pytest.approx(breakdown.total_cost)
    assert breakdown.tax_percentage + breakdown.net_percentage == pytest.approx(100.0)
    assert breakdown.net_income == pytest.approx(
        calculate_net_income(gross, "yearly", config_2026)
    )
    assert sum(item.tax for item in breakdown.bracket_breakdown) == pytest.approx(
        breakdown.income_tax
    )


def test_net_income_is_monotonic(config_2026: YearConfiguration) -> None:
    nets = [
        calculate_full_breakdown(gross, "yearly", config_2026).net_income
        for gross in range(0, 120001, 500)
    ]

    assert all(later >= earlier - 1e-9 for earlier, later in zip(nets, nets[1:]))


def test_breakdown_is_idempotent(config_2026: YearConfiguration) -> None:
    options = {"children_count": 2, "is_young_adult": True}

    first = calculate_full_breakdown(36000, "yearly", config_2026, True, options)
    second = calculate_full_breakdown(36000, "yearly", config_2026, True, options)

    assert first == second


def test_capped_relief_leaves_no_income_tax(config_2026: YearConfiguration) -> None:
    breakdown = calculate_full_breakdown(
        30000, "yearly", config_2026, options={"children_count": 5, "is_student": True}
    )

    assert breakdown.taxed_income == 0.0
    assert breakdown.income_tax == 0.0
    assert breakdown.net_income == pytest.approx(30000 - breakdown.contributions)


def test_negative_gross_is_rejected(config_2026: YearConfiguration) -> None:
    with pytest.raises(InvalidInputError):
        calculate_full_breakdown(-1, "yearly", config_2026)


def test_untaxed_extras_use_working_days(config_2026: YearConfiguration) -> None:
    extras = calculate_untaxed_extras("yearly", EXTRAS, config_2026)

    assert extras.work_days_used == 230
    assert extras.food_compensation == pytest.approx(1830.8)
    assert extras.commute_compensation == pytest.approx(1150.0)
    assert extras.bonus_contributions == pytest.approx(231.0)
    assert extras.bonus_employer_tax == pytest.approx(171.0)
    assert extras.total_above_handle == pytest.approx(5480.8)


def test_untaxed_extras_monthly_are_a_twelfth(config_2026: YearConfiguration) -> None:
    yearly = calculate_untaxed_extras("yearly", EXTRAS, config_2026)
    monthly = calculate_untaxed_extras("monthly", EXTRAS, config_2026)

    assert monthly.total_above_handle == pytest.approx(yearly.total_above_handle / 12)
    assert monthly.bonus_contributions == pytest.approx(yearly.bonus_contributions / 12)


def test_vacation_days_beyond_work_days_leave_no_daily_benefits(
    config_2026: YearConfiguration,
) -> None:
    options = {**EXTRAS, "vacation_days": 400}

    extras = calculate_untaxed_extras("yearly", options, config_2026)

    assert extras.work_days_used == 0
    assert extras.food_compensation == 0.0


def test_breakdown_with_extras(config_2026: YearConfiguration) -> None:
    breakdown = calculate_full_breakdown_with_extras(
        48000, "yearly", config_2026, ExtrasOptions(**EXTRAS)
    )

    assert breakdown.income_tax == pytest.approx(7228.0161)
    assert breakdown.total_contributions == pytest.approx(11765.04)
    assert breakdown.total_employer_tax == pytest.approx(8379.0)
    assert breakdown.net_income == pytest.approx(34487.7439)
    assert breakdown.total_cost == pytest.approx(61859.8)
    assert breakdown.total_above_handle == pytest.approx(5480.8)
    assert breakdown.total_tax + breakdown.net_income == pytest.approx(breakdown.total_cost)
    assert breakdown.tax_percentage + breakdown.net_percentage == pytest.approx(100.0)


@pytest.mark.parametrize("gross", [800, 2000, 4000, 12000])
def test_monthly_breakdown_with_extras_is_consistent(
    config_2026: YearConfiguration, gross: float
) -> None:
    breakdown = calculate_full_breakdown_with_extras(gross, "monthly", config_2026, EXTRAS)
    plain = calculate_full_breakdown(gross, "monthly", config_2026, include_employer_tax=True)

    assert breakdown.period == "monthly"
    assert breakdown.income_tax == pytest.approx(plain.income_tax)
    assert breakdown.total_above_handle == pytest.approx(5480.8 / 12)
    assert breakdown.total_tax + breakdown.net_income == pytest.approx(breakdown.total_cost)
    assert breakdown.tax_percentage + breakdown.net_percentage == pytest.approx(100.0)


@pytest.mark.parametrize(
    "overrides",
    [
        {"vacation_allowance": float("inf")},
        {"company_bonus": float("inf")},
        {"daily_food_compensation": float("nan")},
        {"daily_commute_compensation": float("inf")},
        {"extra_relief": {"children_count": 1, "children_months": float("nan")}},
    ],
)
def test_non_finite_extras_are_rejected(config_2026: YearConfiguration, overrides: dict) -> None:
    with pytest.raises(InvalidInputError, match="finite"):
        calculate_full_breakdown_with_extras(
            48000, "yearly", config_2026, {**EXTRAS, **overrides}
        )


def test_bonus_employer_tax_follows_the_toggle(config_2026: YearConfiguration) -> None:
    options = {**EXTRAS, "include_employer_tax": False}

    breakdown = calculate_full_breakdown_with_extras(48000, "yearly", config_2026, options)

    assert breakdown.employer_tax == 0.0
    assert breakdown.bonus_employer_tax == 0.0
    assert breakdown.total_cost == pytest.approx(48000 + 5480.8)


def test_empty_extras_match_plain_breakdown(config_2026: YearConfiguration) -> None:
    plain = calculate_full_breakdown(48000, "yearly", config_2026)
    extended = calculate_full_breakdown_with_extras(48000, "yearly", config_2026)

    assert extended.net_income == pytest.approx(plain.net_income)
    assert extended.total_cost == pytest.approx(plain.total_cost)


def test_facades_select_the_rule_set() -> None:
    assert get_full_breakdown(48000, "yearly", year=2025).relief == pytest.approx(5260.0)
    assert get_full_breakdown(48000, "yearly", year="2026").relief == pytest.approx(5551.93)
    assert get_full_breakdown(48000, "yearly").year == 2026

    breakdown = get_full_breakdown_with_extras(48000, "yearly", EXTRAS, year=2026)
    assert breakdown.net_income == pytest.approx(34487.7439)


def test_facade_rejects_unknown_year() -> None:
    with pytest.raises(InvalidInputError):
        get_full_breakdown(48000, "yearly", year=1999)
