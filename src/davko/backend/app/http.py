"""Error payloads shared by the blueprints and the app factory."""

from __future__ import annotations

from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any, Mapping

from flask import jsonify


@dataclass(frozen=True)
class ProblemResponse:
    """JSON error body of the form ``{"error": ..., "message": ...}``.

    ``extra`` entries are merged into the body, e.g. the bracket count on a
    missing bracket.
    """

    error: str
    status: int
    message: str | None = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.error}
        if self.message:
            body["message"] = self.message
        body.update(self.extra)
        return body

    def to_response(self) -> tuple[Any, int]:
        return jsonify(self.as_dict()), int(self.status)


def problem_response(
    error: str,
    *,
    status: int,
    message: str | None = None,
    **extra: Any,
) -> ProblemResponse:
    return ProblemResponse(error=error, status=status, message=message, extra=extra)


def not_found(message: str, **extra: Any) -> ProblemResponse:
    """Shortcut for the 404 body used by year-scoped routes."""

    return problem_response("not_found", status=HTTPStatus.NOT_FOUND, message=message, **extra)


__all__ = ["ProblemResponse", "not_found", "problem_response"]
