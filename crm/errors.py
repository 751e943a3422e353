"""Error taxonomy of the CRM API and its HTTP rendering.

Every failure a request can end with is one of the :class:`ServiceError`
subclasses below. They are ``HTTPException`` subclasses, so they can be
raised from route handlers, dependencies and CRUD helpers alike, and they
are all rendered as ``{"message": ...}`` bodies.
"""

import logging
from typing import Any

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core import get_settings

logger = logging.getLogger(__name__)


class ServiceError(HTTPException):
    """Base class for all errors reported to API callers."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Server error"
    headers: dict[str, str] | None = None

    def __init__(self, message: str | None = None):
        super().__init__(
            status_code=type(self).status_code,
            detail=message or type(self).message,
            headers=type(self).headers,
        )


class DuplicateIdentity(ServiceError):
    """Username or email is already registered."""

    status_code = status.HTTP_400_BAD_REQUEST
    message = "User already exists"


class InvalidCredentials(ServiceError):
    """Login failed; unknown email and wrong password look the same."""

    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid credentials"


class Unauthenticated(ServiceError):
    """No bearer token was supplied."""

    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Access denied. No token provided."
    headers = {"WWW-Authenticate": "Bearer"}


class InvalidToken(ServiceError):
    """Bearer token is malformed, expired or signed with another secret."""

    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid token."


class NotFound(ServiceError):
    """No contact with that id is owned by the caller."""

    status_code = status.HTTP_404_NOT_FOUND
    message = "Contact not found"


class ValidationFailed(ServiceError):
    """Request body is missing required fields or carries invalid values."""

    status_code = 422
    message = "Validation failed"

    def __init__(self, errors: list[Any] | None = None, message: str | None = None):
        super().__init__(message)
        self.errors = errors or []


class Internal(ServiceError):
    """Unexpected storage or runtime failure."""

    def __init__(self, error: str | None = None):
        super().__init__()
        self.error = error


def error_body(exc: StarletteHTTPException) -> dict[str, Any]:
    """
    Build the JSON body returned for an HTTP error.

    Args:
        exc (HTTPException): Raised error.

    Returns:
        dict: Body with a ``message`` key and optional details.
    """
    body: dict[str, Any] = {"message": exc.detail}
    if isinstance(exc, ValidationFailed) and exc.errors:
        body["errors"] = jsonable_encoder(exc.errors)
    if isinstance(exc, Internal) and exc.error and get_settings().EXPOSE_ERROR_DETAILS:
        body["error"] = exc.error
    return body


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    """Render any HTTP error, including routing 404/405, as a message body."""
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc),
        headers=getattr(exc, "headers", None),
    )


async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Render request validation failures as :class:`ValidationFailed`."""
    logger.debug("Validation failed for %s %s", request.method, request.url.path)
    return await http_error_handler(request, ValidationFailed(exc.errors()))


async def unhandled_error_handler(request: Request, exc: Exception):
    """Log an unexpected exception and render it as :class:`Internal`."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return await http_error_handler(request, Internal(str(exc)))


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the error handlers to the application."""
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
