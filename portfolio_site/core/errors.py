"""
=============================================================================
PORTFOLIO SITE - ERROR HANDLING MODULE
=============================================================================
Exception types raised by the relay and the handlers that turn them into the
JSON payloads the front-end expects.

Payload shapes:
- relay / HTTP errors:   {"success": false, "error": "<message>"}
- rate-limit rejection:  {"error": "<message>"}   (status 429)
- unhandled exception:   {"success": false, "error": "Something went wrong!"}

Usage:
    # In main.py
    from portfolio_site.core.errors import register_exception_handlers
    register_exception_handlers(app)
=============================================================================
"""

import logging
import traceback

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from portfolio_site.core.config import settings

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Something went wrong!"
NOT_FOUND_MESSAGE = "Page not found"
INVALID_PAYLOAD_MESSAGE = "Invalid request payload"


class RelayError(Exception):
    """Base class for errors reported to the caller as {success, error}."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ContactValidationError(RelayError):
    """Submission is missing a field or carries a malformed email."""

    status_code = status.HTTP_400_BAD_REQUEST


class DeliveryError(RelayError):
    """One or both outbound emails could not be delivered."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class RateLimitExceeded(Exception):
    """Source address exceeded the contact submission window."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


def error_payload(message: str) -> dict:
    return {"success": False, "error": message}


def register_exception_handlers(app: FastAPI) -> None:
    """Register global exception handlers on the FastAPI app."""

    @app.exception_handler(RelayError)
    async def relay_error_handler(request: Request, exc: RelayError):
        return JSONResponse(status_code=exc.status_code, content=error_payload(exc.message))

    @app.exception_handler(RateLimitExceeded)
    async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
        return JSONResponse(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            content={"error": exc.message},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            message = NOT_FOUND_MESSAGE
        else:
            message = str(exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content=error_payload(message),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        logger.info(
            "Request validation failed on %s %s: %s",
            request.method,
            request.url.path,
            exc.errors(),
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_payload(INVALID_PAYLOAD_MESSAGE),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """
        Catch-all handler for unhandled exceptions.

        - Logs the full traceback server-side
        - Returns a generic error message to prevent info leakage
        - In debug mode, includes the error type and text
        """
        logger.error(
            f"Unhandled exception on {request.method} {request.url.path}:\n"
            f"{traceback.format_exc()}"
        )

        content = error_payload(GENERIC_ERROR_MESSAGE)
        if settings.DEBUG:
            content["error_type"] = type(exc).__name__
            content["message"] = str(exc)
            content["path"] = request.url.path

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=content,
        )
