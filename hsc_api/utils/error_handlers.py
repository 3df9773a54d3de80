"""Render every error as ``{"ok": false, "error": <code>}``."""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from hsc_api.services.errors import MissingFieldsError, ServiceError

logger = logging.getLogger(__name__)


def error_response(status_code: int, code: str, **extra: Any) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"ok": False, "error": code, **extra},
    )


def missing_field_names(errors: list[dict[str, Any]]) -> list[str] | None:
    """Field names when every error is a missing field, else None."""
    names: list[str] = []
    for error in errors:
        if error.get("type") != "missing":
            return None
        loc = [str(part) for part in error.get("loc", ()) if part != "body"]
        names.append(".".join(loc) or "body")
    return names or None


async def service_error_handler(request: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, ServiceError)
    if isinstance(exc, MissingFieldsError):
        return error_response(exc.status_code, exc.code, required=exc.required)
    return error_response(exc.status_code, exc.code)


async def http_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, StarletteHTTPException)
    response = error_response(exc.status_code, str(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def validation_error_handler(request: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, RequestValidationError)
    errors = list(exc.errors())
    missing = missing_field_names(errors)
    if missing is not None:
        return error_response(400, "missing_fields", required=missing)
    return error_response(400, "invalid_request", details=jsonable_encoder(errors))


async def db_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        f"Database error on {request.method} {request.url.path}", exc_info=exc
    )
    return error_response(500, "db_error")


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, db_error_handler)
