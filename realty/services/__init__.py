"""
Service layer for business logic implementation.
Contains services for catalogue queries, favorites, admin management, authentication and error handling.
"""

from .auth import AuthGate, AuthService
from .property import PropertyService
from .favorite import FavoriteService
from .admin import AdminService
from .image import ImageService
from .error_handler import ErrorHandlerService

__all__ = [
    "AuthGate",
    "AuthService",
    "PropertyService",
    "FavoriteService",
    "AdminService",
    "ImageService",
    "ErrorHandlerService"
]
