"""Exception handlers rendering errors into the response envelope."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from logging_config import request_id_of
from services.errors import DomainError, ErrorCode

logger = logging.getLogger(__name__)

# Location prefixes FastAPI adds in front of the offending field name
_LOCATION_PREFIXES = {"body", "query", "path", "header"}


def _error_body(status_code: int, message: str, data=None) -> dict:
    return {"status": status_code, "message": message, "data": data, "pager": None}


def _field_of(loc: tuple) -> str:
    parts = [str(part) for part in loc if part not in _LOCATION_PREFIXES]
    return ".".join(parts) if parts else "body"


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("Domain error %s [request_id=%s]: %s", exc.code.value, request_id_of(request), exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.status_code, exc.message, exc.payload()),
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors: dict[str, str] = {}
    for error in exc.errors():
        field = _field_of(tuple(error.get("loc", ())))
        # Keep the first message per field
        errors.setdefault(field, error.get("msg", "Invalid value"))
    return JSONResponse(
        status_code=422,
        content=_error_body(
            422,
            "Validation failed",
            {"code": ErrorCode.VALIDATION_FAILED.value, "error": errors},
        ),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.status_code, message),
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error [request_id=%s] %s %s", request_id_of(request), request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content=_error_body(500, "Internal server error", {"code": ErrorCode.INTERNAL_ERROR.value}),
    )


def install_exception_handlers(app: FastAPI) -> None:
    """Register all envelope-rendering handlers on the app."""
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
