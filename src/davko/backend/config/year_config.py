"""Load the per-year rule sets declared in ``data/manifest.yaml``.

Each rule set is read once and cached; callers share the frozen models.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Sequence

import yaml
from pydantic import ValidationError

from .schema import (
    MONTHLY,
    MONTHS_PER_YEAR,
    PERIODS,
    YEARLY,
    ConfigurationError,
    ContributionRule,
    EmployerTaxRule,
    ExtraReliefSchedule,
    InvalidInputError,
    PeriodRules,
    ReliefRule,
    TaxBracket,
    TaxYearManifest,
    TaxYearManifestEntry,
    YearConfiguration,
    normalise_period,
)

_LOGGER = logging.getLogger(__name__)

CONFIG_DIRECTORY = Path(__file__).resolve().parent / "data"
MANIFEST_FILE = CONFIG_DIRECTORY / "manifest.yaml"


def _read_mapping(path: Path) -> dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except yaml.YAMLError as error:
        raise ConfigurationError(f"{path.name} is not valid YAML: {error}") from error

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path.name} must define a mapping at the top level")
    return data


@lru_cache(maxsize=1)
def load_manifest() -> TaxYearManifest:
    """Return the manifest listing every supported tax year."""

    if not MANIFEST_FILE.exists():
        raise ConfigurationError("Configuration manifest not found")

    raw_manifest = _read_mapping(MANIFEST_FILE)

    try:
        return TaxYearManifest.model_validate(raw_manifest)
    except ValidationError as error:
        raise ConfigurationError(f"Manifest validation failed: {error}") from error


def manifest_entries() -> Sequence[TaxYearManifestEntry]:
    """Return the manifest entries in declaration order."""

    return load_manifest().years


@lru_cache(maxsize=8)
def load_year_configuration(year: int) -> YearConfiguration:
    """Load the rule set for the specified tax year from disk."""

    try:
        manifest_entry = load_manifest().get_entry(year)
    except KeyError as exc:
        supported = ", ".join(str(entry) for entry in available_years())
        raise InvalidInputError(
            f"Tax year {year} is not supported (supported years: {supported})"
        ) from exc

    config_file = CONFIG_DIRECTORY / manifest_entry.resolved_filename
    if not config_file.exists():
        raise ConfigurationError(
            f"Configuration file for year {year} missing: {config_file.name}"
        )

    raw_config = _read_mapping(config_file)
    raw_config.setdefault("year", year)

    try:
        configuration = YearConfiguration.model_validate(raw_config)
    except ValidationError as error:
        raise ConfigurationError(f"Configuration validation failed for {year}: {error}") from error

    if configuration.year != year:
        raise ConfigurationError(
            f"Configuration year mismatch: expected {year}, found {configuration.year}"
        )

    _LOGGER.debug("Loaded tax rule set for %s from %s", year, config_file.name)
    return configuration


def available_years() -> Sequence[int]:
    """Return the declared tax years, oldest first."""

    return load_manifest().supported_years


def default_year() -> int:
    """Return the newest configured tax year."""

    years = available_years()
    if not years:
        raise ConfigurationError("No tax years are declared in the manifest")
    return years[-1]


def select_rule_set(year: int | str | None = None) -> YearConfiguration:
    """Return the rule set for ``year``, or the newest year when omitted.

    ``year`` may be given as a string key such as ``"2026"``. Unknown years
    raise :class:`InvalidInputError` instead of silently falling back.
    """

    if year is None:
        return load_year_configuration(default_year())

    if isinstance(year, bool):
        raise InvalidInputError(f"Invalid tax year selection: {year!r}")

    try:
        resolved = int(str(year).strip())
    except ValueError as exc:
        raise InvalidInputError(f"Invalid tax year selection: {year!r}") from exc

    return load_year_configuration(resolved)


__all__ = [
    "CONFIG_DIRECTORY",
    "ConfigurationError",
    "ContributionRule",
    "EmployerTaxRule",
    "ExtraReliefSchedule",
    "InvalidInputError",
    "MANIFEST_FILE",
    "MONTHLY",
    "MONTHS_PER_YEAR",
    "PERIODS",
    "PeriodRules",
    "ReliefRule",
    "TaxBracket",
    "TaxYearManifest",
    "TaxYearManifestEntry",
    "YEARLY",
    "YearConfiguration",
    "available_years",
    "default_year",
    "load_manifest",
    "load_year_configuration",
    "manifest_entries",
    "normalise_period",
    "select_rule_set",
]
