"""Error Handlers — global exception handlers for the inventory API.

Invariants:
    - InventoryError -> its own envelope and status; log level follows severity
    - RequestValidationError (JSON bodies, query params) -> 400 with field details
    - Any other exception -> 500 that names the request path, never the cause
    - Every log line carries the calling organization when the header is present
    - Form validation failures never reach these handlers: they are ordinary
      400 responses built by api/presenters.py
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from inventory.core.errors import (
    ErrorCategory, ErrorSeverity, InventoryError,
)

logger = logging.getLogger(__name__)

ORGANIZATION_HEADER = "x-organization-id"

_LOG_LEVEL_BY_SEVERITY = {
    ErrorSeverity.INFO: logging.INFO,
    ErrorSeverity.WARNING: logging.WARNING,
    ErrorSeverity.ERROR: logging.WARNING,
    ErrorSeverity.CRITICAL: logging.ERROR,
}


def _request_extra(request: Request, **extra) -> dict:
    return {
        "path": request.url.path,
        "method": request.method,
        "organization_id": request.headers.get(ORGANIZATION_HEADER),
        **extra,
    }


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(InventoryError, handle_inventory_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)


async def handle_inventory_error(request: Request, exc: InventoryError) -> JSONResponse:
    """Domain and infrastructure errors raised by routes and services."""
    level = _LOG_LEVEL_BY_SEVERITY.get(exc.severity, logging.ERROR)
    logger.log(
        level,
        f"{exc.code} on {request.method} {request.url.path}: {exc.message}",
        extra=_request_extra(
            request,
            error_code=exc.code,
            entity=exc.context.entity,
            field_name=exc.context.field_name,
            # Errors tagged by the pipeline know the tenant better than the header
            **(
                {"organization_id": exc.context.organization_id}
                if exc.context.organization_id else {}
            ),
        ),
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    """Malformed JSON bodies and query parameters (not multipart forms)."""
    details = [
        {
            "field": ".".join(str(loc) for loc in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]
    logger.info(
        f"Rejected request data on {request.method} {request.url.path}: "
        f"{', '.join(d['field'] for d in details)}",
        extra=_request_extra(
            request, error_code="VALIDATION_ERROR", error_count=len(details),
        ),
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Request data does not match the endpoint's contract",
                "category": ErrorCategory.VALIDATION.value,
                "severity": ErrorSeverity.WARNING.value,
                "details": details,
            },
        },
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all: full traceback to the log, only the path to the client."""
    logger.error(
        f"Unhandled {type(exc).__name__} on {request.method} {request.url.path}",
        exc_info=exc,
        extra=_request_extra(request, error_code="INTERNAL_ERROR"),
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "The inventory service could not complete the request",
                "category": ErrorCategory.INTERNAL.value,
                "severity": ErrorSeverity.CRITICAL.value,
                "path": request.url.path,
            },
        },
    )
