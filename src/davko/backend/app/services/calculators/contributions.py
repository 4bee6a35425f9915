"""Employee contributions and employer tax."""

from __future__ import annotations

from davko.backend.config.year_config import YearConfiguration

from .utils import ensure_amount


def calculate_contributions(gross_income: float, period: str, config: YearConfiguration) -> float:
    """Return employee contributions (prispevki) for ``gross_income``.

    The percentage part scales with income; the flat part is the monthly
    amount, or twelve of them for a yearly period.
    """

    gross = ensure_amount(gross_income, "gross_income")
    rule = config.contributions
    return gross * rule.employee_rate + rule.fixed_amount(period)


def calculate_bonus_contributions(bonus: float, config: YearConfiguration) -> float:
    """Contributions on a bonus: the percentage rate only, no flat amount."""

    return ensure_amount(bonus, "bonus") * config.contributions.employee_rate


def calculate_employer_tax(gross_income: float, config: YearConfiguration) -> float:
    """Return the employer-side tax (prispevki delodajalca) on ``gross_income``."""

    return ensure_amount(gross_income, "gross_income") * config.employer.rate


__all__ = [
    "calculate_bonus_contributions",
    "calculate_contributions",
    "calculate_employer_tax",
]
