"""Label catalogues backed by the JSON resources in ``davko.translations``.

Each ``<locale>.json`` file holds a flat ``backend`` mapping (breakdown
labels used by the calculation service) and a nested ``frontend`` mapping
that is passed through to the UI untouched. English is the fallback for any
missing label.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from functools import cache
from importlib import resources
from typing import Any, Mapping

_LOGGER = logging.getLogger(__name__)

_BASE_LOCALE = "en"
_TRANSLATIONS_PACKAGE = "davko.translations"


@dataclass(frozen=True)
class Translator:
    """Callable returning the label for a key, falling back to English."""

    locale: str
    _messages: Mapping[str, str]
    _fallback: Mapping[str, str]

    def __call__(self, key: str) -> str:
        return self._messages.get(key) or self._fallback.get(key, key)


@dataclass(frozen=True)
class Catalogue:
    locale: str
    backend: Mapping[str, str] = field(default_factory=dict)
    frontend: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, locale: str, payload: Any) -> Catalogue:
        sections = payload if isinstance(payload, Mapping) else {}
        backend = sections.get("backend") or {}
        frontend = sections.get("frontend") or {}
        if not isinstance(backend, Mapping) or not isinstance(frontend, Mapping):
            raise ValueError(f"Catalogue {locale}.json must hold 'backend' and 'frontend' objects")
        return cls(
            locale=locale,
            backend={str(key): str(value) for key, value in backend.items()},
            frontend=dict(frontend),
        )


def _catalogue_files():
    return resources.files(_TRANSLATIONS_PACKAGE)


@cache
def available_locales() -> tuple[str, ...]:
    """Return the locales that ship a catalogue, sorted."""

    names = (entry.name for entry in _catalogue_files().iterdir())
    locales = sorted(name.removesuffix(".json") for name in names if name.endswith(".json"))
    return tuple(locales) or (_BASE_LOCALE,)


@cache
def _load_catalogue(locale: str) -> Catalogue:
    source = _catalogue_files().joinpath(f"{locale}.json")
    if not source.is_file():
        _LOGGER.warning("No translation catalogue for locale %s", locale)
        return Catalogue(locale=locale)

    with source.open("r", encoding="utf-8") as handle:
        return Catalogue.from_payload(locale, json.load(handle))


def normalise_locale(locale: str | None) -> str:
    """Map a locale hint such as ``sl-SI`` onto a shipped catalogue."""

    if not locale:
        return _BASE_LOCALE

    primary = locale.strip().lower().replace("_", "-").split("-")[0]
    return primary if primary in available_locales() else _BASE_LOCALE


def get_translator(locale: str | None = None) -> Translator:
    selected = _load_catalogue(normalise_locale(locale))
    return Translator(
        locale=selected.locale,
        _messages=selected.backend,
        _fallback=_load_catalogue(_BASE_LOCALE).backend,
    )


def load_translations(locale: str | None = None) -> dict[str, Any]:
    """Return backend and frontend labels plus the English fallback."""

    selected = _load_catalogue(normalise_locale(locale))
    base = _load_catalogue(_BASE_LOCALE)

    return {
        "locale": selected.locale,
        "available_locales": list(available_locales()),
        "backend": dict(selected.backend),
        "frontend": selected.frontend,
        "fallback": {
            "locale": base.locale,
            "backend": dict(base.backend),
            "frontend": base.frontend,
        },
    }


__all__ = [
    "Catalogue",
    "Translator",
    "available_locales",
    "get_translator",
    "load_translations",
    "normalise_locale",
]
