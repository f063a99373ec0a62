"""
FastAPI dependency injection utilities for authentication, sessions and services.
"""

from typing import Optional
from fastapi import Depends, Header, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from realty.config import settings
from realty.database import get_db
from realty.services.auth import AuthGate, AuthService
from realty.services.property import PropertyService
from realty.services.favorite import FavoriteService
from realty.services.admin import AdminService
from realty.utils.auth import TokenClaims


# HTTP Bearer token security scheme
security = HTTPBearer(auto_error=False)


async def get_auth_service(db: AsyncSession = Depends(get_db)) -> AuthService:
    return AuthService(db)


async def get_property_service(db: AsyncSession = Depends(get_db)) -> PropertyService:
    return PropertyService(db)


async def get_favorite_service(db: AsyncSession = Depends(get_db)) -> FavoriteService:
    return FavoriteService(db)


async def get_admin_service(db: AsyncSession = Depends(get_db)) -> AdminService:
    return AdminService(db)


async def get_current_claims(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> TokenClaims:
    """
    Authenticate the bearer token and authorize it for the matched route.

    The route is looked up in the policy table by HTTP method and the path
    template it was registered with.

    Returns:
        Verified token claims

    Raises:
        AuthError: If no valid token is presented
        AuthorizationError: If the role is not allowed on the route
    """
    route = request.scope.get("route")
    path = getattr(route, "path", request.url.path)
    token = credentials.credentials if credentials else None
    return AuthGate.check(token, request.method, path)


async def get_session_id(
    session_id: Optional[str] = Header(None, alias=settings.session_header)
) -> Optional[str]:
    """Raw anonymous session id header; validated by the favorites service."""
    return session_id
