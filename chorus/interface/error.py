"""Interface layer error mapping.

Translates domain errors into HTTP status codes and ``{"error": message}``
bodies. The realtime gateway uses the same table for its replies.
"""

import logfire
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError

from chorus.domain.error import (
    DomainError,
    NotFoundError,
    StorageError,
    ValidationError,
)

INTERNAL_ERROR_MESSAGE = "Internal server error"


def status_for(error: Exception) -> int:
    """HTTP status class for an error raised by a comment operation."""
    if isinstance(error, (ValidationError, PydanticValidationError)):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(error, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def message_for(error: Exception) -> str:
    """Client-visible message; storage and unexpected failures stay generic."""
    if isinstance(error, PydanticValidationError):
        return "; ".join(
            f"{'.'.join(str(part) for part in e['loc']) or 'body'}: {e['msg']}"
            for e in error.errors()
        )
    if isinstance(error, (ValidationError, NotFoundError)):
        return str(error)
    if isinstance(error, StorageError):
        return "Storage failure"
    return INTERNAL_ERROR_MESSAGE


def error_response(error: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=status_for(error),
        content={"error": message_for(error)},
    )


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Render domain errors raised by use cases."""
    code = status_for(exc)
    if code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logfire.error(
            "Comment operation failed",
            path=request.url.path,
            error=str(exc),
            error_type=type(exc).__name__,
        )
    else:
        logfire.warn(
            "Comment operation rejected",
            path=request.url.path,
            error=str(exc),
            status=code,
        )
    return error_response(exc)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render malformed bodies, query strings and path ids as 400."""
    message = "; ".join(
        f"{'.'.join(str(part) for part in e['loc'])}: {e['msg']}"
        for e in exc.errors()
    )
    logfire.warn("Malformed request", path=request.url.path, error=message)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": message},
    )


def register_error_handlers(app: FastAPI) -> None:
    """Install the error handlers on an application."""
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
