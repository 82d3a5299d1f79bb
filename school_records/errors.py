"""Application exception taxonomy and the global HTTP error mapping.

Services raise the exceptions below; `register_exception_handlers`
turns them into plain-text responses with a fixed status code and a
body prefixed by the error kind. Anything else becomes a 500.
"""

import logging
from fastapi import FastAPI, Request, status
from fastapi.responses import PlainTextResponse

logger = logging.getLogger("school_records.errors")


class AppError(Exception):
    """Base class for errors surfaced to HTTP clients."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    prefix = "An unexpected error occurred"

    def __init__(self, message: str = ""):
        self.message = message
        super().__init__(message)


class NotFoundError(AppError):
    """Raised when a requested entity does not exist."""
    status_code = status.HTTP_404_NOT_FOUND
    prefix = "Resource not found"


class ClassNotFoundError(NotFoundError):
    """Raised when a student references a class id that does not exist."""

    def __init__(self, class_id=None, message: str = "Class not found"):
        self.class_id = class_id
        super().__init__(message)


class BadRequestError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    prefix = "Bad request"


class UnauthorizedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    prefix = "Unauthorized"


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    prefix = "Forbidden"


class ConflictError(AppError):
    """Raised when an operation clashes with existing data."""
    status_code = status.HTTP_409_CONFLICT
    prefix = "Conflict"


def error_body(prefix: str, message: str) -> str:
    return f"{prefix}: {message}"


async def app_error_handler(request: Request, exc: AppError):
    logger.warning(
        "%s %s -> %s %s",
        request.method, request.url.path, exc.status_code, exc.message,
    )
    return PlainTextResponse(error_body(exc.prefix, exc.message), status_code=exc.status_code)


async def unexpected_error_handler(request: Request, exc: Exception):
    logger.error("unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return PlainTextResponse(
        error_body(AppError.prefix, str(exc)),
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the application error handlers on `app`."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
