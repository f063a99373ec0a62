"""
Pydantic schemas for request/response validation.
"""

from .common import CamelModel

from .property import PropertyResponse

from .favorite import (
    FavoriteCreate,
    FavoriteResponse,
    FavoriteCheckResponse,
    SessionResponse
)

from .admin import (
    AdminCreate,
    AdminUpdate,
    AdminStatusUpdate,
    AdminResponse
)

from .auth import LoginRequest, LoginResponse

from .error import ErrorDetail, ErrorResponse, APIErrorResponse, error_responses

__all__ = [
    "CamelModel",

    # Property
    "PropertyResponse",

    # Favorites
    "FavoriteCreate",
    "FavoriteResponse",
    "FavoriteCheckResponse",
    "SessionResponse",

    # Admin
    "AdminCreate",
    "AdminUpdate",
    "AdminStatusUpdate",
    "AdminResponse",

    # Authentication
    "LoginRequest",
    "LoginResponse",

    # Errors
    "ErrorDetail",
    "ErrorResponse",
    "APIErrorResponse",
    "error_responses",
]
