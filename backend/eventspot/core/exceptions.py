"""
Application error taxonomy.

Services raise these instead of HTTP exceptions; the handlers registered in
`register_exception_handlers` turn them into JSON responses of the form
{"message": ..., "errors": [...]}.
"""

from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from eventspot.core.logging import get_logger

logger = get_logger(__name__)


class AppError(Exception):
    """Base error with a user-safe message and an HTTP status."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, errors: Optional[list[Any]] = None):
        self.message = message
        self.errors = errors
        super().__init__(message)


class ValidationError(AppError):
    """Malformed input shape or values that fail a business rule."""

    def __init__(self, message: str = "Invalid input data", errors: Optional[list[Any]] = None):
        super().__init__(message, errors)


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND


class UnauthorizedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class ConflictError(AppError):
    """Duplicate username/email or an already-held seat.

    Reported as 400, which is what existing clients expect.
    """


class InsufficientInventoryError(AppError):
    def __init__(self, requested: int, available: int):
        super().__init__("Not enough seats available")
        self.requested = requested
        self.available = available


def _body(exc: AppError) -> dict:
    body: dict[str, Any] = {"message": exc.message}
    if exc.errors:
        body["errors"] = exc.errors
    return body


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    logger.warning(
        "request_rejected",
        error=type(exc).__name__,
        message=exc.message,
        status_code=exc.status_code,
    )
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(_body(exc)))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"field": ".".join(str(part) for part in err["loc"][1:]), "message": err["msg"]}
        for err in exc.errors()
    ]
    logger.warning("request_validation_failed", errors=errors)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=jsonable_encoder({"message": "Invalid input data", "errors": errors}),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_exception", error=str(exc))
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal Server Error"},
    )


EXCEPTION_HANDLERS = {
    AppError: app_error_handler,
    RequestValidationError: request_validation_handler,
    Exception: unhandled_error_handler,
}


def register_exception_handlers(app: FastAPI) -> None:
    for exception_class, handler in EXCEPTION_HANDLERS.items():
        app.add_exception_handler(exception_class, handler)
