"""Error Handlers: every failure leaves the API as one CatalogError envelope.

Invariants:
    - Every error response body is {"error": ..., "notification": ...}; the
      notification is the blocking alert with the Vietnamese user_message
    - RequestValidationError → InvalidInputError (400) with field-level details
    - Any other exception → InternalError (500), never leaking internal details
    - Log level follows the error's severity
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from fengshui_catalog.core.errors import (
    CatalogError, ErrorSeverity, InternalError, InvalidInputError,
)

logger = logging.getLogger(__name__)

_LOG_LEVELS = {
    ErrorSeverity.INFO: logging.INFO,
    ErrorSeverity.WARNING: logging.WARNING,
    ErrorSeverity.ERROR: logging.ERROR,
    ErrorSeverity.CRITICAL: logging.CRITICAL,
}


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""

    @app.exception_handler(CatalogError)
    async def catalog_error_handler(request: Request, exc: CatalogError):
        return error_response(request, exc)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        return error_response(request, InvalidInputError(_field_details(exc)))

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}", exc_info=exc,
        )
        return error_response(request, InternalError())


def error_response(request: Request, exc: CatalogError) -> JSONResponse:
    """Log a catalog error at its severity and render the envelope plus alert."""
    logger.log(
        _LOG_LEVELS.get(exc.severity, logging.ERROR),
        f"{exc.code} on {request.method} {request.url.path}: {exc.message}",
        extra={
            "error_code": exc.code,
            "path": request.url.path,
            "category": exc.context.category,
            "record_id": exc.context.record_id,
            "file_name": exc.context.file_name,
        },
    )
    content = exc.to_response()
    content["notification"] = exc.to_notification()
    return JSONResponse(status_code=exc.http_status, content=content)


def _field_details(exc: RequestValidationError) -> list[dict]:
    details = []
    for e in exc.errors():
        loc = [str(part) for part in e["loc"]]
        if loc and loc[0] in ("body", "query", "path"):
            loc = loc[1:]
        details.append({
            "field": ".".join(loc),
            "message": e["msg"],
            "type": e["type"],
        })
    return details
