#!/usr/bin/env python3
"""Check that every label catalogue covers the keys of the base locale."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
TRANSLATIONS_DIR = REPO_ROOT / "src" / "davko" / "translations"
BASE_LOCALE = "en"


class CatalogueError(Exception):
    """Raised when a catalogue cannot be read at all."""


def _flatten(tree: dict, prefix: str = "") -> dict[str, str]:
    items: dict[str, str] = {}
    for key, value in tree.items():
        path = f"{prefix}.{key}" if prefix else key
        if isinstance(value, dict):
            items.update(_flatten(value, path))
        else:
            items[path] = "" if value is None else str(value)
    return items


def load_catalogues(directory: Path = TRANSLATIONS_DIR) -> dict[str, dict[str, dict[str, str]]]:
    """Return flattened ``backend`` and ``frontend`` sections keyed by locale."""

    catalogues: dict[str, dict[str, dict[str, str]]] = {}
    for path in sorted(directory.glob("*.json")):
        with path.open("r", encoding="utf-8") as handle:
            payload = json.load(handle)

        backend = payload.get("backend") if isinstance(payload, dict) else None
        frontend = payload.get("frontend") if isinstance(payload, dict) else None
        if not isinstance(backend, dict) or not isinstance(frontend, dict):
            raise CatalogueError(f"{path.name} must define backend and frontend objects")

        catalogues[path.stem] = {
            "backend": _flatten(backend),
            "frontend": _flatten(frontend),
        }

    if not catalogues:
        raise CatalogueError(f"No catalogues found in {directory}")
    return catalogues


def find_issues(
    catalogues: dict[str, dict[str, dict[str, str]]], base_locale: str = BASE_LOCALE
) -> list[str]:
    """Return missing, extra and empty keys relative to ``base_locale``."""

    base = catalogues.get(base_locale)
    if base is None:
        return [f"Base locale '{base_locale}' has no catalogue"]

    issues: list[str] = []
    for locale, sections in sorted(catalogues.items()):
        for section in ("backend", "frontend"):
            expected = set(base[section])
            present = set(sections[section])
            missing = sorted(expected - present)
            extra = sorted(present - expected)
            empty = sorted(key for key, value in sections[section].items() if not value.strip())
            if missing:
                issues.append(f"{locale}:{section} missing keys: {', '.join(missing)}")
            if extra:
                issues.append(f"{locale}:{section} unknown keys: {', '.join(extra)}")
            if empty:
                issues.append(f"{locale}:{section} empty values: {', '.join(empty)}")
    return issues


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--directory",
        type=Path,
        default=TRANSLATIONS_DIR,
        help="Directory holding the <locale>.json catalogues",
    )
    args = parser.parse_args(argv)

    try:
        catalogues = load_catalogues(args.directory)
    except CatalogueError as error:
        print(f"[error] {error}")
        return 1

    issues = find_issues(catalogues)
    for issue in issues:
        print(f"[catalogue] {issue}")

    if issues:
        return 1

    print(f"{len(catalogues)} catalogue(s) OK: {', '.join(sorted(catalogues))}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
