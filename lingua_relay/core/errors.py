"""
Application errors and FastAPI exception handlers
"""

from typing import Any, Optional

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from lingua_relay.core.logging import get_logger

logger = get_logger(__name__)


class AppError(Exception):
    """Base error carrying a user-facing message and an optional detail."""

    status_code: int = 500
    code: str = "internal_error"

    def __init__(self, message: str, detail: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail

    def to_payload(self) -> dict:
        payload = {"message": self.message}
        if self.detail is not None:
            payload["detail"] = self.detail
        return payload


class ValidationError(AppError):
    """Missing or malformed fields on an inbound request or event."""

    status_code = 400
    code = "validation_error"


class AuthorizationError(AppError):
    """A connection referenced a room it is not bound to."""

    status_code = 403
    code = "authorization_error"


class NotFoundError(AppError):
    status_code = 404
    code = "not_found"


class CollaboratorError(AppError):
    """Recognition, translation or synthesis failed, timed out, or returned garbage."""

    status_code = 502
    code = "collaborator_error"


def _error_body(code: str, message: str, detail: Optional[Any] = None) -> dict:
    return {"error": {"code": code, "message": message, "detail": detail}}


async def app_exception_handler(request: Request, exc: AppError) -> JSONResponse:
    logger.warning(f"{exc.code} on {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.code, exc.message, exc.detail),
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body("http_error", str(exc.detail)),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content=_error_body("validation_error", "Invalid request", exc.errors()),
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content=_error_body("internal_error", "Internal server error"),
    )
