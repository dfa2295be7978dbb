"""
Error handling utilities

Every error carries an ErrorKind. Client-facing kinds (validation, auth,
not found) keep their message; upstream, persistence and internal kinds only
ever expose a generic message and the underlying detail is logged.
"""

import traceback
from enum import Enum
from typing import Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException

from nutrition_service.core.logger import logger


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    MISSING_TOKEN = "missing_token"
    INVALID_TOKEN = "invalid_token"
    NOT_FOUND = "not_found"
    UPSTREAM = "upstream"
    PERSISTENCE = "persistence"
    INTERNAL = "internal"


GENERIC_MESSAGES = {
    ErrorKind.UPSTREAM: "An external service is unavailable. Please try again later.",
    ErrorKind.PERSISTENCE: "Database operation failed. Please try again later.",
    ErrorKind.INTERNAL: "Internal server error",
}

# Kinds whose message was written for the client and is safe to return as-is
CLIENT_FACING_KINDS = {
    ErrorKind.VALIDATION,
    ErrorKind.MISSING_TOKEN,
    ErrorKind.INVALID_TOKEN,
    ErrorKind.NOT_FOUND,
}


class ErrorResponse(Exception):
    """Custom exception for application errors"""

    def __init__(
        self,
        message: str,
        status_code: int = 400,
        details: dict = None,
        kind: ErrorKind = ErrorKind.INTERNAL,
        cause: Optional[BaseException] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.kind = kind
        self.cause = cause
        super().__init__(message)


class ValidationError(ErrorResponse):
    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(
            message,
            status_code=status.HTTP_400_BAD_REQUEST,
            details={"field": field} if field else None,
            kind=ErrorKind.VALIDATION,
        )


class MissingTokenError(ErrorResponse):
    def __init__(self, message: str = "Token is required"):
        super().__init__(message, status_code=status.HTTP_403_FORBIDDEN, kind=ErrorKind.MISSING_TOKEN)


class InvalidTokenError(ErrorResponse):
    def __init__(self, message: str = "Invalid token"):
        super().__init__(message, status_code=status.HTTP_401_UNAUTHORIZED, kind=ErrorKind.INVALID_TOKEN)


class NotFoundError(ErrorResponse):
    def __init__(self, message: str = "Product not found"):
        super().__init__(message, status_code=status.HTTP_404_NOT_FOUND, kind=ErrorKind.NOT_FOUND)


class UpstreamError(ErrorResponse):
    """Object storage or nutrient API failure. `detail` is logged, never returned."""

    def __init__(self, service: str, detail: str = ""):
        self.service = service
        self.detail = detail
        super().__init__(
            GENERIC_MESSAGES[ErrorKind.UPSTREAM],
            status_code=status.HTTP_502_BAD_GATEWAY,
            kind=ErrorKind.UPSTREAM,
        )


class PersistenceError(ErrorResponse):
    """Product data store failure. `detail` is logged, never returned."""

    def __init__(self, operation: str, detail: str = ""):
        self.operation = operation
        self.detail = detail
        super().__init__(
            GENERIC_MESSAGES[ErrorKind.PERSISTENCE],
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            kind=ErrorKind.PERSISTENCE,
        )


class ErrorResponseModel(BaseModel):
    """Pydantic model for error responses"""
    error: str
    details: Optional[dict] = None


def endpoint_error(exc: Exception, status_code: int, operation: str) -> ErrorResponse:
    """
    Convert any exception raised while handling a request into an ErrorResponse
    carrying the endpoint's fixed status code.

    Validation errors keep their own 400. Other client-facing kinds keep their
    message; everything else is replaced by the generic message for its kind.
    """
    if isinstance(exc, ValidationError):
        return exc

    if isinstance(exc, ErrorResponse):
        kind = exc.kind
        message = exc.message if kind in CLIENT_FACING_KINDS else GENERIC_MESSAGES[kind]
        details = exc.details if kind in CLIENT_FACING_KINDS else None
    else:
        kind = ErrorKind.INTERNAL
        message = GENERIC_MESSAGES[kind]
        details = None

    metadata = {
        "event": "endpoint_error",
        "operation": operation,
        "kind": kind.value,
        "status_code": status_code,
    }
    detail = getattr(exc, "detail", None)
    if detail:
        metadata["detail"] = detail
    logger.error(f"{operation} failed", error=exc, metadata=metadata)

    return ErrorResponse(message, status_code=status_code, details=details, kind=kind, cause=exc)


def _error_body(exc: ErrorResponse) -> dict:
    body = {"error": exc.message}
    if exc.details:
        body["details"] = exc.details
    return body


def _is_development(request: Request) -> bool:
    context = getattr(request.app.state, "context", None)
    return context is not None and context.config.is_development


async def error_response_handler(request: Request, exc: ErrorResponse):
    """
    Handler for custom ErrorResponse exceptions.

    In development the traceback of the exception behind a generic message
    is added to the log entry.
    """
    metadata = {
        "event": "error_response",
        "kind": exc.kind.value,
        "status_code": exc.status_code,
        "url": str(request.url),
        "method": request.method,
    }
    if exc.cause is not None and exc.kind not in CLIENT_FACING_KINDS and _is_development(request):
        metadata["traceback"] = "".join(
            traceback.format_exception(type(exc.cause), exc.cause, exc.cause.__traceback__)
        )
    logger.warning(f"Error: {exc.message}", metadata=metadata)
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc))


async def http_exception_handler(request: Request, exc: HTTPException):
    """Handler for FastAPI HTTPException"""
    logger.warning(
        f"HTTPException: {exc.detail}",
        metadata={
            "event": "http_exception",
            "status_code": exc.status_code,
            "url": str(request.url),
            "method": request.method,
        },
    )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})
