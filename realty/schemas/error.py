"""
Error response schemas for API documentation and consistent error formatting.
"""

from pydantic import BaseModel, Field
from typing import List, Optional


class ErrorDetail(BaseModel):
    """Schema for individual error detail."""

    field: Optional[str] = Field(None, description="Field name that caused the error", examples=["minPrice"])
    message: str = Field(..., description="Human-readable error message", examples=["minPrice must be a valid number"])
    type: Optional[str] = Field(None, description="Error type identifier")


class ErrorResponse(BaseModel):
    """Schema for standardized error responses."""

    code: str = Field(..., description="Error code identifier", examples=["VALIDATION_ERROR"])
    message: str = Field(..., description="Human-readable error message")
    timestamp: str = Field(..., description="Error timestamp in ISO format", examples=["2026-01-01T00:00:00Z"])
    request_id: Optional[str] = Field(None, description="Unique request identifier for tracking", examples=["abc12345"])
    details: Optional[List[ErrorDetail]] = Field(None, description="Offending fields, for validation errors")


class APIErrorResponse(BaseModel):
    """Schema for API error response wrapper."""

    error: ErrorResponse = Field(..., description="Error information")


def error_responses(*status_codes: int) -> dict:
    """OpenAPI ``responses`` entries for the given error status codes."""
    descriptions = {
        400: "Bad Request - Invalid request parameters",
        401: "Unauthorized - Authentication required",
        403: "Forbidden - Role not allowed",
        404: "Not Found - Resource does not exist",
        409: "Conflict - Unique value already taken",
        500: "Internal Server Error",
    }
    return {
        code: {"description": descriptions.get(code, "Error"), "model": APIErrorResponse}
        for code in status_codes
    }
