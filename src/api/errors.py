"""API error types and response helpers."""

import logging
from typing import Any, Dict

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base application error."""

    def __init__(self, message: str, code: str, http_status: int = 400):
        """Initialize error."""
        self.message = message
        self.code = code
        self.http_status = http_status
        super().__init__(message)


class ValidationError(AppError, ValueError):
    """Form input rejected before reaching the backend."""

    def __init__(self, message: str):
        super().__init__(message, "validation_error", status.HTTP_422_UNPROCESSABLE_ENTITY)


class NotFoundError(AppError):
    """Requested record does not exist."""

    def __init__(self, message: str = "Not found"):
        super().__init__(message, "not_found", status.HTTP_404_NOT_FOUND)


class ConfirmationRequiredError(AppError):
    """Operation must be repeated with force=true after the user confirms."""

    def __init__(self, message: str = "Confirmation required"):
        super().__init__(message, "confirmation_required", status.HTTP_409_CONFLICT)


class MissingTokenError(AppError):
    """No bearer token in the local token store."""

    def __init__(self, message: str = "Authentication token not found."):
        super().__init__(message, "missing_token", status.HTTP_401_UNAUTHORIZED)


class BackendError(Exception):
    """REST backend answered with an error or could not be reached.

    Attributes:
        status_code: HTTP status from the backend, None for transport failures
        message: Backend ``message`` field, or the caller's fallback message
        payload: Decoded error body (dict) or raw text
    """

    def __init__(self, message: str, status_code: int | None = None, payload: Any = None):
        self.message = message
        self.status_code = status_code
        self.payload = payload
        super().__init__(message)

    @property
    def http_status(self) -> int:
        """Status to answer with: backend 4xx pass through, everything else is 502."""
        if self.status_code is not None and 400 <= self.status_code < 500:
            return self.status_code
        return status.HTTP_502_BAD_GATEWAY


def error_response(error: AppError | BackendError) -> Dict[str, Any]:
    """Create a standardized error response."""
    code = getattr(error, "code", None) or "backend_error"
    return {
        "error": {
            "code": code,
            "message": error.message,
        }
    }


def register_error_handlers(app: FastAPI) -> None:
    """Map AppError and BackendError to JSON responses."""

    @app.exception_handler(AppError)
    async def handle_app_error(request: Request, exc: AppError) -> JSONResponse:
        logger.info("%s %s -> %s: %s", request.method, request.url.path, exc.code, exc.message)
        return JSONResponse(status_code=exc.http_status, content=error_response(exc))

    @app.exception_handler(BackendError)
    async def handle_backend_error(request: Request, exc: BackendError) -> JSONResponse:
        logger.warning(
            "%s %s -> backend error status=%s: %s",
            request.method,
            request.url.path,
            exc.status_code,
            exc.message,
        )
        return JSONResponse(status_code=exc.http_status, content=error_response(exc))


__all__ = [
    "AppError",
    "BackendError",
    "ConfirmationRequiredError",
    "MissingTokenError",
    "NotFoundError",
    "ValidationError",
    "error_response",
    "register_error_handlers",
]
