"""
Authentication service and auth gate.

AuthService checks credentials against stored admin accounts and issues
tokens. AuthGate verifies bearer tokens and evaluates the authorization
policy table without touching the database.
"""

from typing import Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from jose import JWTError, ExpiredSignatureError
import logging

from realty.models.admin import AdminUser, AdminRole
from realty.repositories.admin import AdminRepository
from realty.utils.auth import create_access_token, decode_access_token, TokenClaims
from realty.utils.policy import allowed_roles
from realty.utils.exceptions import (
    AuthError,
    InvalidCredentialsError,
    InvalidTokenError,
    TokenExpiredError,
    InsufficientPermissionsError,
    ServerError
)

logger = logging.getLogger(__name__)


class AuthGate:
    """
    Unauthenticated -> Authenticated(claims) on a verified, unexpired token.
    Every failure raises AuthError (401); a role outside the policy entry
    raises AuthorizationError (403).
    """

    @staticmethod
    def authenticate(token: Optional[str]) -> TokenClaims:
        """
        Verify a bearer token.

        Args:
            token: Raw token from the Authorization header, or None

        Returns:
            Verified token claims

        Raises:
            AuthError: If no token was presented
            TokenExpiredError: If the token has expired
            InvalidTokenError: If signature or claims are invalid
        """
        if not token:
            raise AuthError("Authentication token required")

        try:
            claims = decode_access_token(token)
        except ExpiredSignatureError:
            raise TokenExpiredError()
        except JWTError as e:
            logger.warning(f"Rejected bearer token: {e}")
            raise InvalidTokenError()

        try:
            AdminRole(claims.role)
        except ValueError:
            logger.warning(f"Rejected bearer token with unknown role: {claims.role}")
            raise InvalidTokenError()

        return claims

    @staticmethod
    def authorize(claims: TokenClaims, method: str, path: str) -> TokenClaims:
        """
        Check the claims' role against the policy entry of a route.
        A route without an entry is denied.

        Raises:
            InsufficientPermissionsError: If the role is not allowed
        """
        roles = allowed_roles(method, path)
        if roles is None:
            logger.warning(f"No authorization policy for {method} {path}; denying")
            raise InsufficientPermissionsError(f"access {path}")

        if AdminRole(claims.role) not in roles:
            logger.warning(f"Admin {claims.admin_id} with role {claims.role} denied {method} {path}")
            raise InsufficientPermissionsError(f"{method.lower()} {path}")

        return claims

    @classmethod
    def check(cls, token: Optional[str], method: str, path: str) -> TokenClaims:
        """Authenticate then authorize in one step."""
        return cls.authorize(cls.authenticate(token), method, path)


class AuthService:
    """
    Authentication service for admin login.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.admin_repo = AdminRepository(db_session)

    async def authenticate_admin(self, email: str, password: str) -> AdminUser:
        """
        Authenticate an admin with email and password.

        Raises:
            InvalidCredentialsError: If credentials are invalid or the account is inactive
            ServerError: If the lookup fails
        """
        try:
            admin = await self.admin_repo.get_by_email(email)
        except SQLAlchemyError as e:
            logger.error(f"Authentication lookup failed for {email}: {e}", exc_info=True)
            raise ServerError("Login failed")

        if not admin or not admin.verify_password(password):
            logger.warning(f"Failed authentication attempt for email: {email}")
            raise InvalidCredentialsError()

        if not admin.is_active:
            logger.warning(f"Login attempt on inactive account: {email}")
            raise InvalidCredentialsError("Account is inactive")

        logger.info(f"Admin authenticated successfully: {admin.email}")
        return admin

    @staticmethod
    def create_token(admin: AdminUser) -> str:
        return create_access_token(
            admin_id=admin.id,
            email=admin.email,
            role=admin.role.value,
            permissions=admin.permissions
        )

    async def login(self, email: str, password: str) -> Tuple[AdminUser, str]:
        """
        Authenticate an admin and issue an access token.

        Returns:
            Tuple of (admin, access_token)

        Raises:
            InvalidCredentialsError: If credentials are invalid or the account is inactive
        """
        admin = await self.authenticate_admin(email, password)
        return admin, self.create_token(admin)
