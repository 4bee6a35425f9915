"""Unit tests for calculation request parsing helpers."""

from __future__ import annotations

import pytest
from flask import Flask, request
from werkzeug.exceptions import BadRequest

from davko.backend.services.request_parser import parse_calculation_payload


def test_parse_payload_uses_accept_language(app: Flask) -> None:
    with app.test_request_context(
        "/api/v1/calculations",
        method="POST",
        json={"gross_income": 2000},
        headers={"Accept-Language": "sl-SI,sl;q=0.9,en;q=0.8"},
    ):
        payload = parse_calculation_payload(request)

    assert payload["locale"] == "sl"


def test_parse_payload_preserves_explicit_locale(app: Flask) -> None:
    with app.test_request_context(
        "/api/v1/calculations?locale=en",
        method="POST",
        json={"gross_income": 2000, "locale": "sl"},
    ):
        payload = parse_calculation_payload(request)

    assert payload["locale"] == "sl"


def test_parse_payload_reads_year_from_query(app: Flask) -> None:
    with app.test_request_context(
        "/api/v1/calculations?year=2025",
        method="POST",
        json={"gross_income": 2000},
    ):
        payload = parse_calculation_payload(request)

    assert payload["year"] == "2025"


def test_parse_payload_rejects_non_object(app: Flask) -> None:
    with app.test_request_context(
        "/api/v1/calculations",
        method="POST",
        json=["not", "an", "object"],
    ):
        with pytest.raises(BadRequest):
            parse_calculation_payload(request)


def test_parse_payload_rejects_invalid_json(app: Flask) -> None:
    with app.test_request_context(
        "/api/v1/calculations",
        method="POST",
        data="{not json",
        content_type="application/json",
    ):
        with pytest.raises(BadRequest):
            parse_calculation_payload(request)
