"""
Utility modules for the Realty Catalogue API.
"""

from .auth import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
    TokenClaims
)

from .exceptions import (
    APIException,
    ValidationError,
    AuthError,
    AuthorizationError,
    NotFoundError,
    DuplicateError,
    ServerError,
    InvalidCredentialsError,
    TokenExpiredError,
    InvalidTokenError,
    InsufficientPermissionsError,
    SelfModificationError,
    PropertyNotFoundError,
    AdminNotFoundError
)

# Dependencies and the policy table are imported directly where needed to avoid circular imports

__all__ = [
    # Auth utilities
    "create_access_token",
    "decode_access_token",
    "hash_password",
    "verify_password",
    "TokenClaims",

    # Exceptions
    "APIException",
    "ValidationError",
    "AuthError",
    "AuthorizationError",
    "NotFoundError",
    "DuplicateError",
    "ServerError",
    "InvalidCredentialsError",
    "TokenExpiredError",
    "InvalidTokenError",
    "InsufficientPermissionsError",
    "SelfModificationError",
    "PropertyNotFoundError",
    "AdminNotFoundError",
]
