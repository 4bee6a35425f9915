"""Domain-specific calculation helpers."""

from .brackets import (
    calculate_bracket_breakdown,
    calculate_bracket_tax,
    calculate_taxed_income,
    calculate_total_income_tax,
    get_all_brackets,
    get_bracket_count,
    get_bracket_info,
)
from .breakdown import (
    calculate_full_breakdown,
    calculate_full_breakdown_with_extras,
    calculate_net_income,
    get_full_breakdown,
    get_full_breakdown_with_extras,
)
from .contributions import (
    calculate_bonus_contributions,
    calculate_contributions,
    calculate_employer_tax,
)
from .extras import calculate_untaxed_extras, coerce_extras_options
from .relief import (
    calculate_base_relief,
    calculate_extra_relief,
    calculate_relief,
    calculate_relief_cap,
    coerce_extra_relief_options,
)
from .utils import (
    calculate_progressive_tax,
    format_euro,
    format_percent,
    format_percentage,
    round_currency,
)

__all__ = [
    "calculate_base_relief",
    "calculate_bonus_contributions",
    "calculate_bracket_breakdown",
    "calculate_bracket_tax",
    "calculate_contributions",
    "calculate_employer_tax",
    "calculate_extra_relief",
    "calculate_full_breakdown",
    "calculate_full_breakdown_with_extras",
    "calculate_net_income",
    "calculate_progressive_tax",
    "calculate_relief",
    "calculate_relief_cap",
    "calculate_taxed_income",
    "calculate_total_income_tax",
    "calculate_untaxed_extras",
    "coerce_extra_relief_options",
    "coerce_extras_options",
    "format_euro",
    "format_percent",
    "format_percentage",
    "get_all_brackets",
    "get_bracket_count",
    "get_bracket_info",
    "get_full_breakdown",
    "get_full_breakdown_with_extras",
    "round_currency",
]
