"""
API route handlers for the Realty Catalogue API.
"""

from .auth import router as auth_router
from .properties import router as properties_router
from .favorites import router as favorites_router
from .admins import router as admins_router

__all__ = ["auth_router", "properties_router", "favorites_router", "admins_router"]
