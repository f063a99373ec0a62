"""
Favorites service for anonymous, session-scoped bookmarks.

The session id is an opaque string presented by the client; it is trusted as
is and never tied to an admin account.
"""

from typing import List, Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
import secrets
import uuid
import logging

from realty.config import settings
from realty.models.favorite import Favorite, MAX_SESSION_ID_LENGTH
from realty.repositories.favorite import FavoriteRepository
from realty.repositories.property import PropertyRepository
from realty.utils.exceptions import ValidationError, PropertyNotFoundError, ServerError

logger = logging.getLogger(__name__)


def generate_session_id() -> str:
    """New random session token for a first-time visitor."""
    return secrets.token_urlsafe(24)


class FavoriteService:
    """At most one favorite per (session, property) pair; adding twice is idempotent."""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.favorite_repo = FavoriteRepository(db_session)
        self.property_repo = PropertyRepository(db_session)

    @staticmethod
    def require_session_id(session_id: Optional[str]) -> str:
        """
        Validate the session header value.

        Raises:
            ValidationError: If the session id is missing or too long
        """
        header = settings.session_header
        if session_id is None or not session_id.strip():
            raise ValidationError("Session ID required", field=header)

        session_id = session_id.strip()
        if len(session_id) > MAX_SESSION_ID_LENGTH:
            raise ValidationError(
                f"Session ID cannot exceed {MAX_SESSION_ID_LENGTH} characters",
                field=header
            )
        return session_id

    @staticmethod
    def resolve_session(session_id: Optional[str]) -> str:
        """Echo a presented session id or issue a new one."""
        if session_id and session_id.strip():
            return FavoriteService.require_session_id(session_id)
        new_id = generate_session_id()
        logger.debug("Issued new session id")
        return new_id

    async def list_favorites(self, session_id: Optional[str]) -> List[Favorite]:
        """
        Favorites of a session with their property data, newest first.

        Raises:
            ValidationError: If the session id is missing
            ServerError: If the query fails
        """
        session_id = self.require_session_id(session_id)
        try:
            return await self.favorite_repo.list_for_session(session_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to fetch favorites: {e}", exc_info=True)
            raise ServerError("Failed to fetch favorites")

    async def add_favorite(self, session_id: Optional[str], property_id: uuid.UUID) -> Tuple[Favorite, bool]:
        """
        Bookmark a property for a session.

        Returns:
            Tuple of (favorite, created); created is False when the pair
            already existed

        Raises:
            ValidationError: If the session id is missing
            PropertyNotFoundError: If the property doesn't exist
            ServerError: If the insert fails
        """
        session_id = self.require_session_id(session_id)

        try:
            property_obj = await self.property_repo.get_by_id(property_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to look up property {property_id}: {e}", exc_info=True)
            raise ServerError("Failed to add favorite")

        if property_obj is None:
            raise PropertyNotFoundError(str(property_id))

        try:
            favorite, created = await self.favorite_repo.add_pair(session_id, property_obj)
        except SQLAlchemyError as e:
            logger.error(f"Failed to add favorite for property {property_id}: {e}", exc_info=True)
            raise ServerError("Failed to add favorite")

        if created:
            logger.info(f"Favorite added for property {property_id}")
        return favorite, created

    async def remove_favorite(self, session_id: Optional[str], property_id: uuid.UUID) -> None:
        """
        Remove a bookmark; removing a missing one is a no-op.

        Raises:
            ValidationError: If the session id is missing
            ServerError: If the delete fails
        """
        session_id = self.require_session_id(session_id)
        try:
            removed = await self.favorite_repo.delete_pair(session_id, property_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to remove favorite for property {property_id}: {e}", exc_info=True)
            raise ServerError("Failed to remove favorite")

        if removed:
            logger.info(f"Favorite removed for property {property_id}")
        else:
            logger.debug(f"No favorite to remove for property {property_id}")

    async def is_favorite(self, session_id: Optional[str], property_id: uuid.UUID) -> bool:
        """Whether the session bookmarked the property; False without a session id."""
        if session_id is None or not session_id.strip():
            return False
        session_id = self.require_session_id(session_id)
        try:
            return await self.favorite_repo.exists_pair(session_id, property_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to check favorite for property {property_id}: {e}", exc_info=True)
            raise ServerError("Failed to check favorite")
