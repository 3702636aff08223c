"""
Application Exceptions and JSON Error Handlers

Every error a client can see is an AppError subclass carrying an HTTP status
and a message that is safe to return. Handlers render all of them, plus
FastAPI's own validation and HTTP errors, as {"success": false, "message": ...}.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base class for errors rendered as a JSON failure response."""

    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ValidationError(AppError):
    """Missing or malformed request fields."""
    status_code = 400


class ConflictError(AppError):
    status_code = 409


class AuthenticationError(AppError):
    """Bad, missing or expired credentials. Never says which part failed."""
    status_code = 401
    message = "Not authorized. Please log in again."


class NotFoundError(AppError):
    status_code = 404


class PaymentSignatureError(AppError):
    status_code = 400
    message = "Invalid payment signature"


class PaymentUnavailableError(AppError):
    """Payment gateway is not configured for this deployment."""
    status_code = 503
    message = "Payment service unavailable"


class UpstreamError(AppError):
    """The payment gateway call failed."""
    status_code = 502
    message = "Could not create Razorpay order"


def error_response(status_code: int, message: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message},
        headers=headers,
    )


def register_exception_handlers(app: FastAPI, debug: bool = False) -> None:
    """Attach the JSON error handlers to the application."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
        return error_response(exc.status_code, exc.message, headers)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        errors = exc.errors()
        if errors:
            first = errors[0]
            field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
            message = f"Invalid value for '{field}': {first.get('msg')}" if field else first.get("msg")
        else:
            message = "Invalid request body"
        return error_response(400, message)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return error_response(exc.status_code, str(exc.detail), getattr(exc, "headers", None))

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all exception handler."""
        logger.exception(f"Unhandled exception: {exc}")
        return error_response(
            500,
            str(exc) if debug else "Internal server error",
        )
