"""
Domain error taxonomy and the exception handlers that turn it into JSON.

Every error response has the same shape:

    {"success": false, "error": "<message>"}

Handlers raise one of the ReviewBoxError subclasses below; anything coming
out of the store is logged and reported as a generic internal error.
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from reviewbox.core.logging import get_logger

logger = get_logger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


class ReviewBoxError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = INTERNAL_ERROR_MESSAGE

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ReviewBoxError):
    """Malformed or out-of-range input."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class AuthenticationError(ReviewBoxError):
    """Missing, invalid or expired access token."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authenticated"


class AccessDenied(ReviewBoxError):
    """Caller is not a member of the group or lacks the required role."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Access denied"


class NotFound(ReviewBoxError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class Conflict(ReviewBoxError):
    """Duplicate review, invitation or membership."""

    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


class InternalError(ReviewBoxError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = INTERNAL_ERROR_MESSAGE


def error_response(status_code: int, message: str) -> JSONResponse:
    """Build the JSON error body shared by every handler."""
    headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message},
        headers=headers,
    )


async def review_box_error_handler(request: Request, exc: ReviewBoxError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            "request_failed",
            path=request.url.path,
            method=request.method,
            error=exc.message,
        )
    else:
        logger.info(
            "request_rejected",
            path=request.url.path,
            method=request.method,
            status_code=exc.status_code,
            error=exc.message,
        )
    return error_response(exc.status_code, exc.message)


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """FastAPI body/query validation failures are reported as 400 with the first problem."""
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        first = errors[0]
        ctx_error = first.get("ctx", {}).get("error")
        if first.get("type") == "value_error" and ctx_error is not None:
            # Messages raised by our own validators are already user-facing
            message = str(ctx_error)
        else:
            location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
            detail = first.get("msg", "invalid value")
            message = f"{location}: {detail}" if location else detail
    logger.info("request_validation_failed", path=request.url.path, errors=len(errors))
    return error_response(status.HTTP_400_BAD_REQUEST, message)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(exc.status_code, str(exc.detail))


async def database_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Store failures are logged with their cause and surfaced without detail."""
    logger.exception("database_error", path=request.url.path, method=request.method)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_exception", path=request.url.path, method=request.method)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)


def register_exception_handlers(app: FastAPI) -> None:
    """Install the error handlers on the application (most specific first)."""
    app.add_exception_handler(ReviewBoxError, review_box_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(
        RequestValidationError, request_validation_error_handler  # type: ignore[arg-type]
    )
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
