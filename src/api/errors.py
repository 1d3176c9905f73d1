"""Exception handlers rendering errors as plain text for the signup form."""

import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.services.exceptions import FloodAlertError

logger = logging.getLogger(__name__)


async def flood_alert_exception_handler(
    request: Request, exc: FloodAlertError
) -> PlainTextResponse:
    """Render a domain error with its own status and message."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return PlainTextResponse(exc.message, status_code=exc.status_code)


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> PlainTextResponse:
    return PlainTextResponse(str(exc.detail), status_code=exc.status_code, headers=exc.headers)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> PlainTextResponse:
    """Turn request validation failures into a 400 the form can display."""
    if any("email" in error.get("loc", ()) for error in exc.errors()):
        message = "Please provide a valid email address."
    else:
        message = "Invalid request."
    return PlainTextResponse(message, status_code=status.HTTP_400_BAD_REQUEST)


async def general_exception_handler(request: Request, exc: Exception) -> PlainTextResponse:
    logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
    return PlainTextResponse(
        "Internal server error", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
    )
