"""
HTTP-layer exceptions and global exception handlers for the application.

Every error leaves the API in the same body shape: ``{"error": "<message>"}``.
"""
import logging
import traceback
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


# ============================================================================
# Error Response Model
# ============================================================================


class ErrorResponse(BaseModel):
    """Error body returned by every failing endpoint."""
    error: str


# ============================================================================
# Error Codes
# ============================================================================


class ErrorCode:
    """Application error codes (logged, never sent to the client)."""
    # Validation errors (VAL_xxx)
    VAL_MISSING_FIELD = "VAL_001"

    # AI errors (AI_xxx)
    AI_GENERATION_FAILED = "AI_001"
    AI_CHAT_FAILED = "AI_002"

    # Server errors (SRV_xxx)
    SRV_INTERNAL_ERROR = "SRV_001"


# ============================================================================
# Custom Exceptions
# ============================================================================


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        message: str,
        code: str = ErrorCode.SRV_INTERNAL_ERROR,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
        field: Optional[str] = None,
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        self.field = field
        super().__init__(message)


class ValidationError(AppException):
    """A required request field is missing or empty."""

    def __init__(
        self,
        message: str = "Validation failed",
        code: str = ErrorCode.VAL_MISSING_FIELD,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            code=code,
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details,
            field=field,
        )


class AIProcessingError(AppException):
    """A provider-backed operation failed and has no soft fallback."""

    def __init__(
        self,
        message: str,
        code: str = ErrorCode.AI_GENERATION_FAILED,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            code=code,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details=details,
        )


# ============================================================================
# Exception Handlers
# ============================================================================


def create_error_response(message: str, status_code: int) -> JSONResponse:
    """Create the standard ``{"error": ...}`` response."""
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
    )


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Handle custom application exceptions."""
    request_id = getattr(request.state, "request_id", None)

    log = logger.warning if exc.status_code < 500 else logger.error
    log(
        f"[{exc.code}] {exc.message}",
        extra={
            "request_id": request_id,
            "path": request.url.path,
            "method": request.method,
            "code": exc.code,
            "details": exc.details,
        },
    )

    return create_error_response(exc.message, exc.status_code)


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Handle standard HTTP exceptions (404, 405, ...)."""
    request_id = getattr(request.state, "request_id", None)
    message = str(exc.detail) if exc.detail else "An error occurred"

    logger.warning(
        f"HTTP {exc.status_code}: {message}",
        extra={
            "request_id": request_id,
            "path": request.url.path,
            "method": request.method,
        },
    )

    return create_error_response(message, exc.status_code)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle Pydantic validation errors on request bodies."""
    request_id = getattr(request.state, "request_id", None)

    errors = exc.errors()
    first_error = errors[0] if errors else {}
    field = ".".join(str(loc) for loc in first_error.get("loc", [])[1:])  # Skip 'body'
    message = first_error.get("msg", "Validation failed")
    if field:
        message = f"{field}: {message}"

    logger.warning(
        f"Validation error: {message}",
        extra={
            "request_id": request_id,
            "path": request.url.path,
            "method": request.method,
            "errors": [
                {"field": ".".join(str(loc) for loc in err.get("loc", [])[1:]), "type": err.get("type")}
                for err in errors
            ],
        },
    )

    return create_error_response(f"Invalid request: {message}", status.HTTP_400_BAD_REQUEST)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unhandled exceptions."""
    request_id = getattr(request.state, "request_id", None)

    logger.exception(
        f"Unhandled exception: {str(exc)}",
        extra={
            "request_id": request_id,
            "path": request.url.path,
            "method": request.method,
            "traceback": traceback.format_exc(),
        },
    )

    return create_error_response(
        "Internal server error",
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app."""
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
