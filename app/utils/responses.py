"""
Standardized response utilities
"""

from typing import Any, Optional
from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse

from app.core.exceptions import (
    CalendarError,
    EventNotFoundError,
    EventValidationError,
    PermissionDeniedError,
    PersistenceError,
)
from app.schemas.common import StandardResponse, ErrorResponse

def success_response(
    message: str,
    data: Any = None,
    status_code: int = 200
) -> JSONResponse:
    """Create standardized success response"""
    response = StandardResponse(
        success=True,
        message=message,
        data=data
    )
    return JSONResponse(
        content=response.model_dump(),
        status_code=status_code
    )

def error_response(
    message: str,
    error_code: Optional[str] = None,
    details: Any = None,
    status_code: int = 400
) -> JSONResponse:
    """Create standardized error response"""
    response = ErrorResponse(
        message=message,
        error_code=error_code,
        details=details
    )
    return JSONResponse(
        content=response.model_dump(),
        status_code=status_code
    )

def validation_error(
    message: str,
    errors: list,
    status_code: int = 422
) -> HTTPException:
    """Create validation error exception"""
    raise HTTPException(
        status_code=status_code,
        detail={
            "message": message,
            "errors": errors
        }
    )

def not_found_error(resource: str = "Resource"):
    """Create not found error"""
    raise HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"{resource} not found"
    )

def rate_limit_error():
    """Create rate limit error"""
    raise HTTPException(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        detail="Rate limit exceeded. Please try again later."
    )

async def calendar_error_handler(request: Request, exc: CalendarError) -> JSONResponse:
    """Map service layer exceptions to standardized error responses"""
    if isinstance(exc, EventValidationError):
        return error_response(
            message="Missing or invalid fields",
            error_code="validation_failed",
            details=exc.fields,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY
        )
    if isinstance(exc, EventNotFoundError):
        return error_response(message="Event not found", error_code="not_found", status_code=404)
    if isinstance(exc, PermissionDeniedError):
        return error_response(message=str(exc), error_code="forbidden", status_code=403)
    if isinstance(exc, PersistenceError):
        return error_response(message=str(exc), error_code="persistence_failed", status_code=502)
    return error_response(message=str(exc), status_code=400)
