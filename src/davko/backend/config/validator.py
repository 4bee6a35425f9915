"""Utilities for validating year configuration data and surfacing issues."""

from __future__ import annotations

import argparse
from typing import Sequence

from .year_config import (
    PERIODS,
    ContributionRule,
    EmployerTaxRule,
    ExtraReliefSchedule,
    PeriodRules,
    ReliefRule,
    YearConfiguration,
    available_years,
    load_year_configuration,
)

# Largest tolerated jump in general relief at the threshold, in currency units.
RELIEF_CONTINUITY_TOLERANCE = 1.0


def _format_scope(scope: str, message: str) -> str:
    return f"{scope}: {message}"


def _validate_rate(scope: str, label: str, value: float) -> list[str]:
    if value < 0 or value > 1:
        return [_format_scope(scope, f"{label} rate {value} must be between 0 and 1")]
    return []


def _validate_contributions(contributions: ContributionRule) -> list[str]:
    return _validate_rate("contributions", "employee", contributions.employee_rate)


def _validate_employer(employer: EmployerTaxRule) -> list[str]:
    errors = _validate_rate("employer", "employer", employer.rate)

    for candidate in employer.candidate_rates:
        errors.extend(_validate_rate("employer.candidate_rates", "candidate", candidate))

    if employer.candidate_rates and employer.rate not in employer.candidate_rates:
        errors.append(
            _format_scope(
                "employer",
                f"rate {employer.rate} is not one of the listed candidate rates",
            )
        )

    if employer.notes_url and not employer.notes_url.startswith(("http://", "https://")):
        errors.append(_format_scope("employer", "notes URL must be absolute"))

    return errors


def _validate_relief(scope: str, relief: ReliefRule) -> list[str]:
    errors: list[str] = []
    gap = relief.threshold_gap
    if gap > RELIEF_CONTINUITY_TOLERANCE:
        errors.append(
            _format_scope(
                scope,
                f"relief jumps by {gap:.2f} at the threshold {relief.threshold}",
            )
        )
    return errors


def _validate_extra_relief(scope: str, schedule: ExtraReliefSchedule) -> list[str]:
    errors: list[str] = []
    amounts = list(schedule.children)
    if amounts != sorted(amounts):
        errors.append(
            _format_scope(scope, "children relief amounts should not decrease with birth order")
        )
    return errors


def _validate_period(period: str, rules: PeriodRules) -> list[str]:
    errors: list[str] = []
    errors.extend(_validate_relief(f"{period}.relief", rules.relief))

    rates = [bracket.rate for bracket in rules.brackets]
    if rates != sorted(rates):
        errors.append(
            _format_scope(f"{period}.tax_brackets", "marginal rates should not decrease")
        )

    if rules.extra_relief is not None:
        errors.extend(_validate_extra_relief(f"{period}.extra_relief", rules.extra_relief))

    return errors


def _validate_period_alignment(config: YearConfiguration) -> list[str]:
    errors: list[str] = []
    yearly_rates = [bracket.rate for bracket in config.yearly.brackets]
    monthly_rates = [bracket.rate for bracket in config.monthly.brackets]
    if yearly_rates != monthly_rates:
        errors.append(
            _format_scope(
                "periods",
                "yearly and monthly brackets must apply the same marginal rates",
            )
        )

    yearly_extra = config.yearly.extra_relief
    monthly_extra = config.monthly.extra_relief
    if yearly_extra is not None and monthly_extra is not None:
        if len(yearly_extra.children) != len(monthly_extra.children):
            errors.append(
                _format_scope(
                    "periods",
                    "yearly and monthly children schedules must cover the same children",
                )
            )
    return errors


def validate_year_configuration(config: YearConfiguration) -> list[str]:
    """Return a list of validation issues for the provided configuration."""

    errors: list[str] = []

    errors.extend(_validate_contributions(config.contributions))
    errors.extend(_validate_employer(config.employer))

    if config.work_days_per_year > 366:
        errors.append(
            _format_scope(
                "work_days_per_year",
                f"{config.work_days_per_year} exceeds the days in a year",
            )
        )

    for period in PERIODS:
        errors.extend(_validate_period(period, config.period_rules(period)))

    errors.extend(_validate_period_alignment(config))

    return errors


def validate_all_years(years: Sequence[int] | None = None) -> dict[int, list[str]]:
    """Validate all configured years and return issues keyed by year."""

    targets = years or available_years()
    results: dict[int, list[str]] = {}

    for year in targets:
        config = load_year_configuration(year)
        results[int(year)] = validate_year_configuration(config)

    return results


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=(
            "Validate configured tax years and report issues helpful to contributors."
        )
    )
    parser.add_argument(
        "years",
        nargs="*",
        type=int,
        help="Specific years to validate (defaults to all configured years)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for running validations from the command line."""

    parser = _build_argument_parser()
    args = parser.parse_args(argv)
    years = args.years or available_years()

    if not years:
        parser.print_help()
        return 1

    exit_code = 0

    for year in years:
        try:
            config = load_year_configuration(year)
        except ValueError as error:
            print(f"[{year}] failed to load configuration: {error}")
            exit_code = 1
            continue

        issues = validate_year_configuration(config)
        if issues:
            exit_code = 1
            print(f"[{year}] {len(issues)} issue(s) detected:")
            for issue in issues:
                print(f"  - {issue}")
        else:
            print(f"[{year}] OK")

    return exit_code


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    raise SystemExit(main())
