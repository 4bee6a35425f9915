"""Serialise calculation results into Flask responses."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from flask import jsonify

ResponseTuple = tuple[Any, int]


def build_calculation_response(payload: Mapping[str, Any]) -> ResponseTuple:
    """Return the JSON response for a computed breakdown.

    Clients that render the grid while the handle is dragged issue many
    identical requests, so the response carries a short cache lifetime.
    """

    response = jsonify(payload)
    response.headers["Cache-Control"] = "private, max-age=60"
    return response, 200
