"""
Failure envelopes and application-wide exception handlers.
"""

import traceback
from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .exceptions import AIServiceError, StoreError
from ..models.api import ErrorResponse

logger = structlog.get_logger(__name__)


def error_response(
    message: str,
    status_code: int = 500,
    exc: Optional[BaseException] = None,
    debug: bool = False,
) -> JSONResponse:
    """Build the {success: false, message} envelope; the traceback is added only in debug mode."""
    error = None
    if debug and exc is not None:
        error = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))

    body = ErrorResponse(message=message, error=error).model_dump(exclude_none=True)
    return JSONResponse(body, status_code=status_code)


def _debug_enabled(request: Request) -> bool:
    settings = getattr(request.app.state, "settings", None)
    return bool(settings and settings.debug)


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request body"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    return f"{location}: {first.get('msg')}" if location else str(first.get("msg"))


def register_exception_handlers(app: FastAPI) -> None:
    """Install handlers that keep every failure inside the JSON envelope."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        message = _describe_validation_error(exc)
        logger.warning("Rejected invalid request body", path=request.url.path, detail=message)
        return error_response(message, 400)

    @app.exception_handler(AIServiceError)
    async def ai_service_error_handler(request: Request, exc: AIServiceError):
        logger.error("AI service error", path=request.url.path, error=str(exc))
        return error_response(str(exc), 500, exc, _debug_enabled(request))

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError):
        logger.error("Project store error", path=request.url.path, error=str(exc))
        return error_response(str(exc), 500, exc, _debug_enabled(request))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error(
            "Unhandled error",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            error_type=type(exc).__name__,
        )
        debug = _debug_enabled(request)
        message = str(exc) if debug else "Internal server error"
        return error_response(message, 500, exc, debug)
