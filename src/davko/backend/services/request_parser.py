"""Normalise incoming calculation requests."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from flask import Request
from werkzeug.exceptions import BadRequest

from davko.backend.app.localization import normalise_locale


def _resolve_locale(req: Request, payload: dict[str, Any]) -> None:
    """Fill ``payload["locale"]`` from the body, the query string or headers."""

    locale = payload.get("locale")
    if isinstance(locale, str) and locale.strip():
        payload["locale"] = normalise_locale(locale)
        return

    locale_param = req.args.get("locale")
    if locale_param:
        payload["locale"] = normalise_locale(locale_param)
        return

    best = req.accept_languages.best
    if best:
        payload["locale"] = normalise_locale(best)


def _resolve_year(req: Request, payload: dict[str, Any]) -> None:
    if payload.get("year") is None and req.args.get("year"):
        payload["year"] = req.args["year"]


def parse_calculation_payload(req: Request) -> dict[str, Any]:
    """Extract the JSON object from ``req`` and apply query/header hints."""

    data = req.get_json(silent=True)
    if data is None:
        raise BadRequest("Request body must be valid JSON")
    if not isinstance(data, Mapping):
        raise BadRequest("Request JSON must be an object")

    payload = dict(data)
    _resolve_locale(req, payload)
    _resolve_year(req, payload)

    return payload
