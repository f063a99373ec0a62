"""
Favorite repository for session-scoped bookmarks.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, and_, desc, func
from sqlalchemy.exc import IntegrityError
from realty.repositories.base import BaseRepository
from realty.models.favorite import Favorite
from realty.models.property import Property
from typing import Optional, List, Tuple
import uuid
import logging

logger = logging.getLogger(__name__)


class FavoriteRepository(BaseRepository[Favorite]):
    """
    Repository for favorites.
    Uniqueness of (property, session) is enforced by the database.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Favorite, db)

    async def list_for_session(self, session_id: str) -> List[Favorite]:
        """
        Favorites of a session joined with their property, newest first.

        Returns:
            List of favorites with ``property`` loaded
        """
        try:
            query = (
                select(Favorite)
                .join(Property, Favorite.property_id == Property.id)
                .where(Favorite.session_id == session_id)
                .order_by(desc(Favorite.created_at))
            )
            result = await self.db.execute(query)
            favorites = result.scalars().all()

            logger.debug(f"Session {session_id} has {len(favorites)} favorites")
            return list(favorites)
        except Exception as e:
            logger.error(f"Failed to list favorites for session {session_id}: {e}")
            raise

    async def get_pair(self, session_id: str, property_id: uuid.UUID) -> Optional[Favorite]:
        """Favorite of a (session, property) pair, if any."""
        try:
            query = select(Favorite).where(
                and_(Favorite.session_id == session_id, Favorite.property_id == property_id)
            )
            result = await self.db.execute(query)
            return result.scalar_one_or_none()
        except Exception as e:
            logger.error(f"Failed to get favorite ({session_id}, {property_id}): {e}")
            raise

    async def exists_pair(self, session_id: str, property_id: uuid.UUID) -> bool:
        try:
            query = select(func.count(Favorite.id)).where(
                and_(Favorite.session_id == session_id, Favorite.property_id == property_id)
            )
            result = await self.db.execute(query)
            return result.scalar() > 0
        except Exception as e:
            logger.error(f"Failed to check favorite ({session_id}, {property_id}): {e}")
            raise

    async def add_pair(self, session_id: str, property_obj: Property) -> Tuple[Favorite, bool]:
        """
        Insert a favorite unless the pair already exists.

        Args:
            session_id: Session identifier
            property_obj: Persistent property being bookmarked

        Returns:
            Tuple of (favorite, created) where created is False when the
            pair was already stored

        Raises:
            SQLAlchemyError: If database operation fails
        """
        property_id = property_obj.id
        existing = await self.get_pair(session_id, property_id)
        if existing:
            logger.debug(f"Favorite ({session_id}, {property_id}) already exists")
            return existing, False

        favorite = Favorite(session_id=session_id, property_id=property_id)
        favorite.property = property_obj
        self.db.add(favorite)

        try:
            await self.db.commit()
        except IntegrityError:
            # A concurrent insert of the same pair won the unique constraint
            await self.db.rollback()
            existing = await self.get_pair(session_id, property_id)
            if existing is None:
                raise
            logger.info(f"Favorite ({session_id}, {property_id}) inserted concurrently")
            return existing, False
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to create favorite ({session_id}, {property_id}): {e}")
            raise

        logger.info(f"Created favorite {favorite.id} for property {property_id}")
        return favorite, True

    async def delete_pair(self, session_id: str, property_id: uuid.UUID) -> bool:
        """
        Delete the favorite of a pair.

        Returns:
            True if a row was deleted, False if none matched
        """
        try:
            stmt = delete(Favorite).where(
                and_(Favorite.session_id == session_id, Favorite.property_id == property_id)
            )
            result = await self.db.execute(stmt)
            await self.db.commit()
            return result.rowcount > 0
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to delete favorite ({session_id}, {property_id}): {e}")
            raise
