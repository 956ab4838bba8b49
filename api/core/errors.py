"""
Operational errors and the terminal error handlers.

Every failure leaves the API as the same JSON envelope:

    {"error": "<message>", "status": "error"}

`AppError` marks an expected condition whose message is safe to show.
Anything else is treated as a defect: it is logged with its traceback and
its message is masked when running in production.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import settings

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


class AppError(Exception):
    """
    Expected, user-facing failure carrying an HTTP status code.
    """

    def __init__(self, message: str, status_code: int) -> None:
        if not 100 <= int(status_code) <= 599:
            raise ValueError(f"Invalid HTTP status code: {status_code}")
        super().__init__(message)
        self.message = message
        self.status_code = int(status_code)
        self.is_operational = True


def error_body(message: str) -> dict[str, str]:
    return {"error": message, "status": "error"}


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Validation failed"
    first = errors[0]
    loc = [str(part) for part in first.get("loc", ()) if part != "body"]
    msg = str(first.get("msg") or "Invalid value")
    return f"{'.'.join(loc)}: {msg}" if loc else msg


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message))


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning("Validation error on %s: %s", request.url.path, exc.errors())
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(_validation_message(exc)),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled error on %s %s: %s",
        request.method,
        request.url.path,
        exc,
        exc_info=exc,
        extra={
            "path": request.url.path,
            "method": request.method,
            "status_code": status.HTTP_500_INTERNAL_SERVER_ERROR,
            "user_id": getattr(request.state, "user_id", None),
        },
    )
    message = INTERNAL_ERROR_MESSAGE if settings.is_production() else str(exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(message or INTERNAL_ERROR_MESSAGE),
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
