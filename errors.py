"""
Typed errors raised by the calculator, the lifecycle manager and the repositories.
The HTTP layer maps each kind to a status code (see api/errors.py); nothing here
knows about transport.
"""
from __future__ import annotations

from typing import Any

from pydantic import ValidationError as PydanticValidationError


class LoanAppError(Exception):
    status_code = 500
    code = "internal_error"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


class ValidationError(LoanAppError):
    """Malformed or out-of-range input; keeps field-level detail."""

    status_code = 400
    code = "validation_error"

    def __init__(self, message: str, errors: list[dict[str, str]] | None = None) -> None:
        self.errors = errors or []
        super().__init__(message, {"errors": self.errors})

    @classmethod
    def from_pydantic(cls, exc: PydanticValidationError) -> "ValidationError":
        return cls.from_error_list(exc.errors())

    @classmethod
    def from_error_list(cls, raw_errors: list[dict[str, Any]]) -> "ValidationError":
        """Build from pydantic-style error dicts (``loc``/``msg``)."""
        errors = [
            {"field": _field_path(err.get("loc") or ()), "message": err.get("msg") or "Invalid value"}
            for err in raw_errors
        ]
        message = "; ".join(f"{e['field']}: {e['message']}" if e["field"] else e["message"] for e in errors)
        return cls(message or "Validation failed", errors)


class InvalidArgument(LoanAppError):
    """Well-formed but semantically illegal (step=9, unknown lender response, ...)."""

    status_code = 400
    code = "invalid_argument"


class NotFound(LoanAppError):
    status_code = 404
    code = "not_found"


class Unauthorized(LoanAppError):
    status_code = 401
    code = "unauthorized"


class InternalError(LoanAppError):
    status_code = 500
    code = "internal_error"


def _field_path(loc: tuple[Any, ...] | list[Any]) -> str:
    # Drop the request section (body/query/path) from the location
    parts = [str(p) for p in loc if p not in {"body", "query", "path"}]
    return ".".join(parts)
