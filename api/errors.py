"""Map typed errors to JSON responses: {"code", "message", "data", "details"}."""
from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from errors import LoanAppError, ValidationError

logger = logging.getLogger(__name__)


def _build_response(status_code: int, code: str, message: str, details: Any | None = None) -> JSONResponse:
    payload = {
        "code": code,
        "message": message,
        "data": None,
        "details": details or {},
    }
    return JSONResponse(status_code=status_code, content=jsonable_encoder(payload))


async def loan_app_exception_handler(request: Request, exc: LoanAppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc, exc_info=exc)
    return _build_response(exc.status_code, exc.code, exc.message, exc.details)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Schema violations are client errors (400), same shape as ValidationError from the core
    error = ValidationError.from_error_list(list(exc.errors()))
    return _build_response(error.status_code, error.code, error.message, error.details)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = "not_found" if exc.status_code == 404 else "http_error"
    return _build_response(exc.status_code, code, str(exc.detail))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _build_response(500, "internal_server_error", "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(LoanAppError, loan_app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
