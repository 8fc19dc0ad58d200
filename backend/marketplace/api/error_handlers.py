"""Error Handlers — every failure leaves the API as {"error": {...}}.

Invariants:
    - MarketplaceError → its own status and to_response() body
    - RequestValidationError (undecodable JSON or form) → 400 INVALID_SHAPE with field details
    - Starlette HTTPException (unknown route, wrong method) → same envelope, same status
    - Anything else → 500 INTERNAL_ERROR; the exception text is logged, never returned
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from marketplace.core.errors import ErrorCategory, ErrorSeverity, MarketplaceError

logger = logging.getLogger(__name__)


def _envelope(
    code: str, message: str, category: str, severity: ErrorSeverity, **extra,
) -> dict:
    return {
        "error": {
            "code": code,
            "message": message,
            "category": category,
            "severity": severity.value,
            **extra,
        },
    }


async def handle_marketplace_error(request: Request, exc: MarketplaceError):
    log = logger.error if exc.http_status >= 500 else logger.info
    log(
        f"{exc.code} on {request.method} {request.url.path}: {exc.message}",
        extra={
            "error_code": exc.code,
            "path": request.url.path,
            "listing_id": exc.context.listing_id,
            "username": exc.context.username,
        },
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def handle_request_validation_error(request: Request, exc: RequestValidationError):
    details = [
        {
            "field": ".".join(str(part) for part in e["loc"]),
            "message": e["msg"],
            "type": e["type"],
        }
        for e in exc.errors()
    ]
    logger.info(
        f"Undecodable request on {request.url.path}",
        extra={"error_code": "INVALID_SHAPE", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_envelope(
            "INVALID_SHAPE", "Invalid request body",
            ErrorCategory.VALIDATION.value, ErrorSeverity.ERROR, details=details,
        ),
    )


async def handle_http_exception(request: Request, exc: StarletteHTTPException):
    not_found = exc.status_code == status.HTTP_404_NOT_FOUND
    return JSONResponse(
        status_code=exc.status_code,
        content=_envelope(
            "NOT_FOUND" if not_found else "HTTP_ERROR",
            "Not Found" if not_found else str(exc.detail),
            "routing", ErrorSeverity.INFO,
        ),
        headers=getattr(exc, "headers", None),
    )


async def handle_unexpected_error(request: Request, exc: Exception):
    logger.error(
        f"Unhandled exception on {request.method} {request.url.path}: {exc}",
        exc_info=exc,
        extra={"path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_envelope(
            "INTERNAL_ERROR", "Something went wrong",
            ErrorCategory.INTERNAL.value, ErrorSeverity.CRITICAL,
        ),
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(MarketplaceError, handle_marketplace_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unexpected_error)
