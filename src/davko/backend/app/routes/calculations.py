"""REST endpoint for salary breakdowns."""

from __future__ import annotations

from typing import Any

from flask import Blueprint, request

from davko.backend.services import (
    build_calculation_response,
    calculate_tax,
    parse_calculation_payload,
)

blueprint = Blueprint("calculations", __name__, url_prefix="/api/v1")


@blueprint.post("/calculations")
def create_calculation() -> tuple[Any, int]:
    """Compute a breakdown for the submitted JSON payload."""

    payload = parse_calculation_payload(request)
    return build_calculation_response(calculate_tax(payload))
