"""Error taxonomy for the booking API.

Every error that reaches a route is rendered as ``{"message": ...}`` with the
status code carried by the exception class.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class BookingServiceError(Exception):
    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class BadRequest(BookingServiceError):
    status_code = 400
    default_message = "Bad request"


class NotAuthenticated(BookingServiceError):
    status_code = 401
    default_message = "Not authenticated"


class Unauthorized(BookingServiceError):
    status_code = 401
    default_message = "Unauthorized"


class NotFound(BookingServiceError):
    status_code = 404
    default_message = "Not found"


class AttendeeNotFound(NotFound):
    default_message = "Attendee not found"


class AlreadyFinalized(BookingServiceError):
    status_code = 400
    default_message = "booking already confirmed"


class DuplicateAccount(BookingServiceError):
    status_code = 422
    default_message = "employer_reg_duplicate"


class RefundFailed(BookingServiceError):
    status_code = 502
    default_message = "Refund failed"


class DownstreamCreateFailed(BookingServiceError):
    """Every calendar/video creation failed. Logged, never raised to a route."""

    status_code = 502
    default_message = "Booking failed"


class DispatchFailed(BookingServiceError):
    status_code = 502
    default_message = "Webhook dispatch failed"


class PersistenceFailed(BookingServiceError):
    status_code = 500
    default_message = "Failed to persist booking"


class ConfigurationError(BookingServiceError):
    status_code = 500
    default_message = "Service is not configured"


async def booking_error_handler(request: Request, exc: BookingServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"❌ {request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    if location:
        message = f"{location}: {message}"
    return JSONResponse(status_code=400, content={"message": message})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BookingServiceError, booking_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
