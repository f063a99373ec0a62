"""
Admin repository for back-office account management.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from realty.repositories.base import BaseRepository
from realty.models.admin import AdminUser
from typing import Optional, List
import uuid
import logging

logger = logging.getLogger(__name__)


class AdminRepository(BaseRepository[AdminUser]):
    """
    Repository for admin accounts.
    Emails are stored and looked up lower-case.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(AdminUser, db)

    async def get_by_email(self, email: str) -> Optional[AdminUser]:
        """
        Get admin by email address.

        Returns:
            AdminUser instance if found, None otherwise
        """
        try:
            normalized_email = email.lower().strip()
            result = await self.db.execute(
                select(AdminUser).where(AdminUser.email == normalized_email)
            )
            admin = result.scalar_one_or_none()

            if admin:
                logger.debug(f"Retrieved admin by email: {normalized_email}")
            else:
                logger.debug(f"Admin with email {normalized_email} not found")

            return admin
        except Exception as e:
            logger.error(f"Failed to get admin by email {email}: {e}")
            raise

    async def email_taken(self, email: str, exclude_id: Optional[uuid.UUID] = None) -> bool:
        """Check whether another account already uses the email."""
        try:
            query = select(func.count(AdminUser.id)).where(AdminUser.email == email.lower().strip())
            if exclude_id is not None:
                query = query.where(AdminUser.id != exclude_id)
            result = await self.db.execute(query)
            return result.scalar() > 0
        except Exception as e:
            logger.error(f"Failed to check email {email}: {e}")
            raise

    async def list_admins(self) -> List[AdminUser]:
        """All admin accounts, newest first."""
        return await self.get_multi()

