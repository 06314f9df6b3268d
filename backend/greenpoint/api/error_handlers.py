"""Error Handlers — every failure leaves the API in one {"error": {...}} envelope.

Invariants:
    - GreenPointError → its own status and to_response() body
    - RequestValidationError → 400 VALIDATION_ERROR with per-field details
    - Starlette HTTPException (unknown route, wrong method) → same envelope
    - Exception (catch-all) → 500, never leaks internal details

Design Decisions:
    - Extracted from main.py: main stays wiring-only
    - Log level follows status: 5xx at error, 4xx at warning
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from greenpoint.core.errors import ErrorCategory, ErrorSeverity, GreenPointError

logger = logging.getLogger(__name__)

_HTTP_CODES = {
    status.HTTP_404_NOT_FOUND: ("NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND),
    status.HTTP_405_METHOD_NOT_ALLOWED: ("METHOD_NOT_ALLOWED", ErrorCategory.VALIDATION),
}


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(GreenPointError, _domain_error)
    app.add_exception_handler(RequestValidationError, _validation_error)
    app.add_exception_handler(StarletteHTTPException, _http_error)
    app.add_exception_handler(Exception, _unhandled_error)


def error_envelope(
    code: str,
    message: str,
    category: ErrorCategory,
    severity: ErrorSeverity = ErrorSeverity.ERROR,
    details: list | None = None,
) -> dict:
    body = {
        "code": code,
        "message": message,
        "category": category.value,
        "severity": severity.value,
    }
    if details is not None:
        body["details"] = details
    return {"error": body}


async def _domain_error(request: Request, exc: GreenPointError) -> JSONResponse:
    log = logger.error if exc.http_status >= 500 else logger.warning
    log(
        f"GreenPointError: {exc.message}",
        extra={
            "error_code": exc.code, "path": request.url.path,
            "scientific_name": exc.context.scientific_name,
        },
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def _validation_error(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    details = [
        {
            "field": ".".join(str(loc) for loc in e["loc"]),
            "message": e["msg"],
            "type": e["type"],
        }
        for e in exc.errors()
    ]
    logger.warning(
        f"Validation error on {request.url.path}: {details}",
        extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_envelope(
            "VALIDATION_ERROR", "Invalid request data", ErrorCategory.VALIDATION,
            details=details,
        ),
    )


async def _http_error(
    request: Request, exc: StarletteHTTPException,
) -> JSONResponse:
    code, category = _HTTP_CODES.get(
        exc.status_code, ("HTTP_ERROR", ErrorCategory.VALIDATION),
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=error_envelope(code, str(exc.detail), category),
        headers=getattr(exc, "headers", None),
    )


async def _unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled exception on {request.url.path}: {exc}",
        exc_info=True, extra={"path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_envelope(
            "INTERNAL_ERROR", "An unexpected error occurred",
            ErrorCategory.INTERNAL, ErrorSeverity.CRITICAL,
        ),
    )
