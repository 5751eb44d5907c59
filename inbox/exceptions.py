"""Application errors and their mapping onto HTTP responses.

Services raise ``AppError`` subclasses and never ``HTTPException``; a single
set of handlers turns them into the ``{"success": false, "error": ...}``
envelope.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


class AppError(Exception):
    """Base class for errors that surface to API callers."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    code: str = "error"

    def __init__(self, message: str, *, details: list[dict[str, Any]] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "validation_error"


class UnauthorizedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "unauthorized"


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "forbidden"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    code = "conflict"


class InvalidStateError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "invalid_state"


class UpstreamError(AppError):
    """An outbound platform call failed."""

    status_code = status.HTTP_502_BAD_GATEWAY
    code = "upstream_error"

    def __init__(self, message: str, *, platform: str, detail: str) -> None:
        super().__init__(message)
        self.platform = platform
        self.detail = detail


class InternalError(AppError):
    """Unexpected storage or infrastructure failure. Message is never exposed."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "internal_error"


class DispatchError(Exception):
    """Raised by platform clients when a message could not be delivered."""

    def __init__(self, platform: str, detail: str) -> None:
        super().__init__(f"{platform} API failed: {detail}")
        self.platform = platform
        self.detail = detail


def error_body(message: str, data: Any = None) -> dict[str, Any]:
    """Build the error envelope."""
    body: dict[str, Any] = {"success": False, "error": message}
    if data is not None:
        body["data"] = data
    return body


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Map AppError subclasses to their status code."""
    if exc.status_code >= 500 and not isinstance(exc, UpstreamError):
        logger.error(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=error_body(INTERNAL_ERROR_MESSAGE))

    logger.info(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message, exc.details))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Wrap framework HTTP errors (404 routes, 405, auth) in the envelope."""
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    if exc.status_code == status.HTTP_404_NOT_FOUND and message == "Not Found":
        message = "Route not found."
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(message),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 400 with one entry per invalid field."""
    fields = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        fields.append(
            {
                "field": ".".join(location) or "unknown",
                "message": error.get("msg", "Invalid value"),
            }
        )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body("Validation failed", fields),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort: log everything, reveal nothing."""
    logger.error(
        f"Unhandled error on {request.method} {request.url.path}: {exc}",
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(INTERNAL_ERROR_MESSAGE),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install all handlers on the application."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
