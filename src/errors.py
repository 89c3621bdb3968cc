"""Application errors and the JSON error handlers.

Every failure response has the shape ``{"message": ...}``. Unhandled
exceptions become 500s; outside production the traceback is included under
``stack``.
"""

import logging
import traceback

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.config import get_settings

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base class for application errors that map to an HTTP status."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class EmailDeliveryError(AppError):
    """Rendering or sending an email failed."""


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid value")
    return f"{field}: {message}" if field else message


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render HTTPException detail as ``{"message": ...}``."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies are client errors: 400, not 422."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": _validation_message(exc)},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback for anything a route did not handle itself."""
    status_code = getattr(exc, "status_code", None)
    if not isinstance(status_code, int) or status_code < 400:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)

    settings = get_settings()
    stack = None
    if not settings.is_production:
        stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))

    return JSONResponse(
        status_code=status_code,
        content={"message": str(exc) or "Internal server error", "stack": stack},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the JSON error handlers on the app."""
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
