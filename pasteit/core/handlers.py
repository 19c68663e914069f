"""
Exception handlers for FastAPI application.

This module provides:
- Custom application exception handler (AppException)
- Pydantic validation error handler (RequestValidationError)
- General unhandled exception handler (Exception)
- Rate limit exceeded handler (RateLimitExceeded)

Every error body has the shape
{"error": {"code", "message", "details"}, "meta": {"request_id"}}.
"""

import logging
from typing import Any

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from pasteit.core.config import settings
from pasteit.exceptions import AppException

logger = logging.getLogger(__name__)


def _request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


def error_response(
    request: Request,
    status_code: int,
    code: str,
    message: str,
    details: Any = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Build the JSON error envelope."""
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "code": code,
                "message": message,
                "details": details if details is not None else {},
            },
            "meta": {
                "request_id": _request_id(request),
            },
        },
        headers=headers,
    )


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """
    Handle custom application exceptions.

    Converts AppException to proper HTTP responses with consistent format.
    """
    logger.warning(
        f"Application exception: {exc.error_code} - {exc.message} "
        f"(request_id={_request_id(request)})"
    )

    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    body = exc.to_dict()["error"]
    return error_response(
        request,
        exc.status_code,
        body["code"],
        body["message"],
        body["details"],
        headers=headers,
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Handle Pydantic validation errors.

    Input values are left out of the details so that submitted passwords
    never appear in a response.
    """
    errors = [
        {
            "field": ".".join(str(loc) for loc in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]

    logger.warning(
        f"Validation error on {[e['field'] for e in errors]} "
        f"(request_id={_request_id(request)})"
    )

    return error_response(
        request,
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "VALIDATION_ERROR",
        "Request validation failed",
        errors,
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle unexpected exceptions.

    Logs the full error and returns a generic error response to the client.
    """
    logger.error(
        f"Unexpected error: {exc.__class__.__name__} "
        f"(request_id={_request_id(request)})",
        exc_info=True,
    )

    return error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "INTERNAL_ERROR",
        str(exc) if settings.debug else "An unexpected error occurred.",
    )


async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """
    Handle rate limit exceeded errors.

    Returns 429 status.
    """
    logger.warning(
        f"Rate limit exceeded: {request.client.host if request.client else 'unknown'} "
        f"(request_id={_request_id(request)})"
    )

    return error_response(
        request,
        status.HTTP_429_TOO_MANY_REQUESTS,
        "RATE_LIMIT_EXCEEDED",
        "Rate limit exceeded. Please try again later.",
    )
