"""
Structured exceptions and error responses for Shoptrack.

Provides consistent error handling across the API with:
- Custom exception classes
- Structured error response format
- FastAPI exception handlers
"""

from typing import Any, Dict, Optional, List
from fastapi import Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from shoptrack.logging_config import get_logger

logger = get_logger("shoptrack.error")


# =============================================================================
# Error Response Schema
# =============================================================================

class ErrorDetail(BaseModel):
    """Detail of a single error."""
    loc: Optional[List[str]] = None  # Location of error (e.g., ["body", "title"])
    msg: str
    type: str


class ErrorResponse(BaseModel):
    """Structured error response format."""
    error: str  # Error code (e.g., "not_found", "conflict")
    message: str  # Human-readable message
    details: Optional[List[ErrorDetail]] = None


# =============================================================================
# Custom Exceptions
# =============================================================================

class ShoptrackException(Exception):
    """Base exception for all Shoptrack errors."""

    def __init__(
        self,
        message: str,
        error_code: str = "internal_error",
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[List[Dict[str, Any]]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details
        super().__init__(message)


class NotFoundError(ShoptrackException):
    """Resource not found."""

    def __init__(self, resource: str, resource_id: Any):
        super().__init__(
            message=f"{resource} {resource_id} not found",
            error_code="not_found",
            status_code=status.HTTP_404_NOT_FOUND,
        )
        self.resource = resource
        self.resource_id = resource_id


class BadRequestError(ShoptrackException):
    """Request body is missing required content."""

    def __init__(self, message: str, field: Optional[str] = None):
        details = None
        if field:
            details = [{"loc": ["body", field], "msg": message, "type": "value_error"}]
        super().__init__(
            message=message,
            error_code="bad_request",
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details,
        )


class ConflictError(ShoptrackException):
    """Unique business key already taken."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            error_code="conflict",
            status_code=status.HTTP_409_CONFLICT,
        )


class CompletionError(ShoptrackException):
    """Completion aggregation failed for a project."""

    def __init__(self, project_no: str, category: Optional[str] = None):
        where = f" ({category})" if category else ""
        super().__init__(
            message=f"Failed to calculate completion for project {project_no}{where}",
            error_code="completion_error",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
        self.project_no = project_no
        self.category = category


# =============================================================================
# Exception Handlers
# =============================================================================

async def shoptrack_exception_handler(request: Request, exc: ShoptrackException) -> JSONResponse:
    """Handle ShoptrackException and return structured response."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=exc.error_code,
            message=exc.message,
            details=exc.details,
        ).model_dump(),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.exception(f"Unhandled exception on {request.method} {request.url.path}: {exc}")

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(
            error="internal_error",
            message="An unexpected error occurred",
        ).model_dump(),
    )


def register_exception_handlers(app):
    """Register all exception handlers with the FastAPI app."""
    app.add_exception_handler(ShoptrackException, shoptrack_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
