"""Request/response glue between the Flask routes and the calculation service."""

from davko.backend.app.services.calculation_service import calculate_tax

from .request_parser import parse_calculation_payload
from .response_builder import build_calculation_response

__all__ = [
    "build_calculation_response",
    "calculate_tax",
    "parse_calculation_payload",
]
