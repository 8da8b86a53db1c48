"""Global exception handlers.

Every failure leaves the API as ``{"error": {code, message, request_id, details?}}``.
Domain errors answer with the status declared on their class; anything else
becomes a generic 500 whose body carries nothing from the exception.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from cv_architect.core.errors import AppError
from cv_architect.core.logging import get_request_id

logger = logging.getLogger(__name__)

GENERIC_FAILURE_MESSAGE = "An unexpected error occurred. Please try again later."


def error_envelope(code: str, message: str, details: dict[str, Any] | None = None) -> dict:
    """Build the JSON error body shared by all handlers."""
    body: dict[str, Any] = {
        "code": code,
        "message": message,
        "request_id": get_request_id(),
    }
    if details:
        body["details"] = dict(details)
    return {"error": body}


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Answer a domain error with its declared status.

    Upstream model failures (5xx, quota) are logged at error level so they
    stand out from ordinary client mistakes such as a rejected upload.
    """
    status_code = exc.http_status
    level = logging.ERROR if status_code >= 500 or status_code == 429 else logging.WARNING

    logger.log(
        level,
        "app_error_handled",
        extra={
            "error_code": exc.code,
            "error_class": type(exc).__name__,
            "status_code": status_code,
            "request_path": request.url.path,
            "has_details": bool(exc.details),
        },
    )

    return JSONResponse(
        status_code=status_code,
        content=error_envelope(exc.code, exc.message, exc.details),
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Safety net for anything that escaped the domain error hierarchy."""
    logger.error(
        "unhandled_exception",
        exc_info=exc,
        extra={
            "error_type": type(exc).__name__,
            "request_path": request.url.path,
            "request_method": request.method,
        },
    )

    return JSONResponse(
        status_code=500,
        content=error_envelope("internal_server_error", GENERIC_FAILURE_MESSAGE),
    )


def setup_exception_handlers(app: FastAPI) -> None:
    app.exception_handler(AppError)(app_error_handler)
    app.exception_handler(Exception)(general_exception_handler)
