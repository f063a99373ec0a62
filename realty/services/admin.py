"""
Admin account management for super admins.
Handles create, update, status toggling and deletion with self-protection rules.
"""

from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
import uuid
import logging

from realty.models.admin import AdminUser
from realty.repositories.admin import AdminRepository
from realty.schemas.admin import AdminCreate, AdminUpdate
from realty.utils.auth import TokenClaims, hash_password
from realty.utils.exceptions import (
    ValidationError,
    DuplicateError,
    AdminNotFoundError,
    SelfModificationError,
    ServerError
)

logger = logging.getLogger(__name__)


class AdminService:
    """
    Service for admin account CRUD.
    Callers are already authorized as super_admin by the auth gate.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.admin_repo = AdminRepository(db_session)

    async def list_admins(self) -> List[AdminUser]:
        try:
            return await self.admin_repo.list_admins()
        except SQLAlchemyError as e:
            logger.error(f"Failed to list admins: {e}", exc_info=True)
            raise ServerError("Failed to fetch admins")

    async def get_admin(self, admin_id: uuid.UUID) -> AdminUser:
        """
        Get admin by ID.

        Raises:
            AdminNotFoundError: If the account doesn't exist
        """
        try:
            admin = await self.admin_repo.get_by_id(admin_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to get admin {admin_id}: {e}", exc_info=True)
            raise ServerError("Failed to fetch admin")

        if not admin:
            raise AdminNotFoundError(str(admin_id))
        return admin

    async def _ensure_email_free(self, email: str, exclude_id: Optional[uuid.UUID] = None) -> None:
        try:
            taken = await self.admin_repo.email_taken(email, exclude_id=exclude_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to check email {email}: {e}", exc_info=True)
            raise ServerError("Failed to check email")

        if taken:
            raise DuplicateError("Admin", email)

    async def create_admin(self, admin_data: AdminCreate, created_by: Optional[uuid.UUID] = None) -> AdminUser:
        """
        Create an admin account.

        Args:
            admin_data: Validated account data
            created_by: ID of the super admin creating the account

        Returns:
            Created admin

        Raises:
            DuplicateError: If the email is already used
            ValidationError: If the password is too weak
            IntegrityError: For other constraint violations, e.g. an unknown created_by
        """
        await self._ensure_email_free(admin_data.email)

        try:
            hashed = hash_password(admin_data.password)
        except ValueError as e:
            raise ValidationError(str(e), field="password")

        create_data = {
            "name": admin_data.name,
            "email": AdminUser.validate_email_format(admin_data.email),
            "hashed_password": hashed,
            "role": admin_data.role,
            "permissions": admin_data.permissions,
            "is_active": True,
            "created_by": created_by,
        }

        try:
            admin = await self.admin_repo.create(create_data)
        except IntegrityError:
            await self._ensure_email_free(admin_data.email)
            raise
        except SQLAlchemyError as e:
            logger.error(f"Failed to create admin {admin_data.email}: {e}", exc_info=True)
            raise ServerError("Failed to create admin")

        logger.info(f"Admin created: {admin.email} (ID: {admin.id}, role: {admin.role.value})")
        return admin

    async def update_admin(self, admin_id: uuid.UUID, admin_data: AdminUpdate, actor: TokenClaims) -> AdminUser:
        """
        Partially update an admin account.

        An omitted password keeps the stored hash; a supplied one is re-hashed.

        Raises:
            AdminNotFoundError: If the account doesn't exist
            DuplicateError: If the new email is already used
            SelfModificationError: If a super admin deactivates their own account
        """
        admin = await self.get_admin(admin_id)
        changes = admin_data.model_dump(exclude_unset=True)

        if changes.get("is_active") is False and str(admin.id) == actor.admin_id:
            raise SelfModificationError("deactivate")

        update_data = {}
        if changes.get("name") is not None:
            update_data["name"] = changes["name"]
        if changes.get("email") is not None:
            email = AdminUser.validate_email_format(changes["email"])
            if email != admin.email:
                await self._ensure_email_free(email, exclude_id=admin.id)
            update_data["email"] = email
        if changes.get("password"):
            try:
                update_data["hashed_password"] = hash_password(changes["password"])
            except ValueError as e:
                raise ValidationError(str(e), field="password")
        if changes.get("role") is not None:
            update_data["role"] = changes["role"]
        if changes.get("permissions") is not None:
            update_data["permissions"] = changes["permissions"]
        if changes.get("is_active") is not None:
            update_data["is_active"] = changes["is_active"]

        try:
            updated = await self.admin_repo.update(admin, update_data)
        except IntegrityError:
            if "email" in update_data:
                await self._ensure_email_free(update_data["email"], exclude_id=admin.id)
            raise
        except SQLAlchemyError as e:
            logger.error(f"Failed to update admin {admin_id}: {e}", exc_info=True)
            raise ServerError("Failed to update admin")

        logger.info(f"Admin updated: {admin_id} (fields: {', '.join(sorted(update_data)) or 'none'})")
        return updated

    async def set_admin_status(self, admin_id: uuid.UUID, is_active: bool, actor: TokenClaims) -> AdminUser:
        """
        Activate or deactivate an account.

        Raises:
            AdminNotFoundError: If the account doesn't exist
            SelfModificationError: If a super admin deactivates their own account
        """
        admin = await self.get_admin(admin_id)

        if not is_active and str(admin.id) == actor.admin_id:
            raise SelfModificationError("deactivate")

        try:
            updated = await self.admin_repo.update(admin, {"is_active": is_active})
        except SQLAlchemyError as e:
            logger.error(f"Failed to update status of admin {admin_id}: {e}", exc_info=True)
            raise ServerError("Failed to update admin status")

        logger.info(f"Admin {admin_id} {'activated' if is_active else 'deactivated'}")
        return updated

    async def delete_admin(self, admin_id: uuid.UUID, actor: TokenClaims) -> None:
        """
        Delete an account.

        Raises:
            SelfModificationError: If a super admin deletes their own account
            AdminNotFoundError: If the account doesn't exist
        """
        if str(admin_id) == actor.admin_id:
            raise SelfModificationError("delete")

        try:
            deleted = await self.admin_repo.delete(admin_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to delete admin {admin_id}: {e}", exc_info=True)
            raise ServerError("Failed to delete admin")

        if not deleted:
            raise AdminNotFoundError(str(admin_id))

        logger.info(f"Admin deleted: {admin_id}")
