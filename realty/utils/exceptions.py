"""
Domain exceptions. Each class fixes its HTTP status and public error code;
ErrorHandlerService turns them into the JSON error envelope.
"""

from typing import Any, Dict, Optional, List
from fastapi import HTTPException, status


class APIException(HTTPException):
    """Base class; subclasses override ``default_status`` and ``default_code``."""

    default_status = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_code = "API_ERROR"
    default_headers: Optional[Dict[str, Any]] = None

    def __init__(
        self,
        status_code: Optional[int] = None,
        detail: str = "",
        error_code: Optional[str] = None,
        headers: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            status_code=status_code or self.default_status,
            detail=detail,
            headers=headers or self.default_headers
        )
        self.error_code = error_code or self.default_code


class ValidationError(APIException):
    """
    Malformed or missing input.

    ``field`` names the offending input; ``field_errors`` is what ends up in
    the envelope's ``details`` list.
    """

    default_status = status.HTTP_400_BAD_REQUEST
    default_code = "VALIDATION_ERROR"

    def __init__(
        self,
        detail: str,
        field: Optional[str] = None,
        field_errors: Optional[List[Dict[str, str]]] = None
    ):
        super().__init__(detail=detail)
        self.field = field
        if field_errors:
            self.field_errors = field_errors
        elif field:
            self.field_errors = [{"field": field, "message": detail}]
        else:
            self.field_errors = []


class AuthError(APIException):
    default_status = status.HTTP_401_UNAUTHORIZED
    default_code = "UNAUTHORIZED"
    default_headers = {"WWW-Authenticate": "Bearer"}

    def __init__(self, detail: str = "Authentication required"):
        super().__init__(detail=detail)


class InvalidCredentialsError(AuthError):
    def __init__(self, detail: str = "Invalid email or password"):
        super().__init__(detail)


class TokenExpiredError(AuthError):
    def __init__(self, detail: str = "Token has expired"):
        super().__init__(detail)


class InvalidTokenError(AuthError):
    def __init__(self, detail: str = "Invalid token"):
        super().__init__(detail)


class AuthorizationError(APIException):
    """Authenticated, but the role does not allow the operation."""

    default_status = status.HTTP_403_FORBIDDEN
    default_code = "FORBIDDEN"

    def __init__(self, detail: str = "Access forbidden"):
        super().__init__(detail=detail)


class InsufficientPermissionsError(AuthorizationError):
    def __init__(self, action: str):
        super().__init__(f"Insufficient permissions to {action}")


class SelfModificationError(AuthorizationError):
    """A super admin tried to delete or deactivate their own account."""

    def __init__(self, action: str = "delete"):
        super().__init__(f"You cannot {action} your own account")


class NotFoundError(APIException):
    default_status = status.HTTP_404_NOT_FOUND
    default_code = "NOT_FOUND"

    def __init__(self, resource: str, resource_id: Optional[str] = None):
        detail = f"{resource} {resource_id} not found" if resource_id else f"{resource} not found"
        super().__init__(detail=detail)


class PropertyNotFoundError(NotFoundError):
    def __init__(self, property_id: str):
        super().__init__("Property", property_id)


class AdminNotFoundError(NotFoundError):
    def __init__(self, admin_id: str):
        super().__init__("Admin", admin_id)


class DuplicateError(APIException):
    default_status = status.HTTP_409_CONFLICT
    default_code = "CONFLICT"

    def __init__(self, resource: str, identifier: str):
        super().__init__(detail=f"{resource} '{identifier}' already exists")


class ServerError(APIException):
    """Persistence or unexpected failure; the detail never carries internals."""

    default_code = "INTERNAL_SERVER_ERROR"

    def __init__(self, detail: str = "Internal server error"):
        super().__init__(detail=detail)


class FileUploadError(ValidationError):
    """Rejected upload; reported against the ``images`` form field."""

    def __init__(self, detail: str, field: str = "images"):
        super().__init__(f"File upload error: {detail}", field=field)


class UnsupportedFileTypeError(FileUploadError):
    def __init__(self, file_type: str):
        super().__init__(f"Unsupported file type '{file_type}'. Only image files are allowed")


class FileSizeExceededError(FileUploadError):
    def __init__(self, size: int, max_size: int):
        super().__init__(f"File size {size} bytes exceeds maximum allowed size {max_size} bytes")


class ImageLimitExceededError(FileUploadError):
    def __init__(self, count: int, limit: int):
        super().__init__(f"A property can have at most {limit} images ({count} given)")
