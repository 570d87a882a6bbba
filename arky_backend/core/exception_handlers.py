"""Global exception handlers for the relay API.

Every failure leaves the service in the same envelope:

    {"error": {"code": ..., "message": ..., "request_id": ..., "details": ...}}

- AppError subclasses → the status declared on the class (400, 429, 500)
- Body parsing / schema failures → 400 ``invalid_request``
- Anything else → generic 500 with no internals in the body
"""

import logging
from typing import Any, Mapping

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from arky_backend.core.errors import AppError
from arky_backend.core.logging import get_request_id

logger = logging.getLogger(__name__)

MALFORMED_BODY_MESSAGE = "Request body is malformed or has invalid fields."
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred. Please try again later."


def _error_response(
    status_code: int,
    code: str,
    message: str,
    details: Mapping[str, Any] | None = None,
    headers: Mapping[str, str] | None = None,
) -> JSONResponse:
    body: dict[str, Any] = {
        "code": code,
        "message": message,
        "request_id": get_request_id(),
    }
    if details:
        body["details"] = dict(details)
    return JSONResponse(status_code=status_code, content={"error": body}, headers=headers)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Render a domain error with the status code its class declares.

    Client faults (validation, rate limiting) log at warning; server faults
    (missing credentials, collaborator failures) log at error. Rate limit
    errors carry their quota headers onto the response.
    """
    level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
    logger.log(
        level,
        "app_error_handled",
        extra={
            "error_code": exc.code,
            "status_code": exc.status_code,
            "has_details": bool(exc.details),
            "request_path": request.url.path,
            "request_id": get_request_id(),
        },
    )
    return _error_response(
        exc.status_code,
        exc.code,
        exc.message,
        details=exc.details,
        headers=getattr(exc, "headers", None),
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report unparsable or mistyped bodies as 400 rather than FastAPI's 422."""
    fields = [
        ".".join(str(part) for part in err.get("loc", ()))
        for err in exc.errors()
    ]
    logger.warning(
        "request_validation_failed",
        extra={
            "request_path": request.url.path,
            "fields": fields,
            "request_id": get_request_id(),
        },
    )
    return _error_response(
        400,
        "invalid_request",
        MALFORMED_BODY_MESSAGE,
        details={"context": {"fields": fields}},
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    # Type and message go to the log only.
    logger.error(
        "unhandled_exception",
        extra={
            "error_type": type(exc).__name__,
            "error_msg": str(exc),
            "request_path": request.url.path,
            "request_method": request.method,
            "request_id": get_request_id(),
        },
    )
    return _error_response(500, "internal_server_error", UNEXPECTED_ERROR_MESSAGE)


def setup_exception_handlers(app) -> None:
    """Register the handlers on ``app``; the Exception fallback goes last."""
    app.exception_handler(AppError)(app_error_handler)
    app.exception_handler(RequestValidationError)(request_validation_handler)
    app.exception_handler(Exception)(general_exception_handler)
