"""
Generic async repository shared by the property, favorite and admin repositories.
Each write commits immediately and rolls the session back when it fails.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete
from realty.database import Base
from typing import TypeVar, Generic, Optional, List, Dict, Any, Type
import uuid
import logging

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Common persistence operations for one model class.

    Reads return None or an empty list when nothing matches; writes re-raise
    SQLAlchemy errors after rolling back so services can map them.
    """

    def __init__(self, model: Type[ModelType], db: AsyncSession):
        self.model = model
        self.db = db

    @property
    def model_name(self) -> str:
        return self.model.__name__

    async def _commit(self, action: str, db_obj: Optional[ModelType] = None) -> None:
        """Commit the unit of work, refreshing db_obj; roll back on any failure."""
        try:
            await self.db.commit()
            if db_obj is not None:
                await self.db.refresh(db_obj)
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to {action} {self.model_name}: {e}")
            raise

    async def create(self, obj_in: Dict[str, Any]) -> ModelType:
        """
        Insert a row built from field values.

        Returns:
            The persisted instance with server defaults loaded
        """
        db_obj = self.model(**obj_in)
        self.db.add(db_obj)
        await self._commit("create", db_obj)
        logger.debug(f"Created {self.model_name} {db_obj.id}")
        return db_obj

    async def get_by_id(self, id: uuid.UUID) -> Optional[ModelType]:
        result = await self.db.execute(select(self.model).where(self.model.id == id))
        db_obj = result.scalar_one_or_none()
        if db_obj is None:
            logger.debug(f"{self.model_name} {id} not found")
        return db_obj

    async def get_multi(self, order_by: Optional[str] = None) -> List[ModelType]:
        """
        All rows, newest first by default.

        Args:
            order_by: Column name, prefixed with '-' for descending order

        Raises:
            ValueError: If the column does not exist
        """
        if order_by:
            column = getattr(self.model, order_by.lstrip("-"), None)
            if column is None:
                raise ValueError(f"{self.model_name} has no column '{order_by.lstrip('-')}'")
            ordering = column.desc() if order_by.startswith("-") else column.asc()
        else:
            ordering = self.model.created_at.desc()

        result = await self.db.execute(select(self.model).order_by(ordering))
        return list(result.scalars().all())

    async def update(self, db_obj: ModelType, obj_in: Dict[str, Any]) -> ModelType:
        """
        Copy the non-None values of obj_in onto a loaded instance and commit.
        An update without any value is a no-op.
        """
        changes = {field: value for field, value in obj_in.items() if value is not None}
        if not changes:
            logger.debug(f"Nothing to update on {self.model_name} {db_obj.id}")
            return db_obj

        for field, value in changes.items():
            setattr(db_obj, field, value)

        await self._commit("update", db_obj)
        logger.debug(f"Updated {self.model_name} {db_obj.id}: {', '.join(sorted(changes))}")
        return db_obj

    async def delete(self, id: uuid.UUID) -> bool:
        """
        Delete by primary key with a single DELETE statement, so database-level
        ON DELETE rules (favorites cascade, created_by set null) apply.

        Returns:
            True if a row was deleted
        """
        result = await self.db.execute(delete(self.model).where(self.model.id == id))
        await self._commit("delete")
        deleted = result.rowcount > 0
        logger.debug(f"Delete {self.model_name} {id}: {'done' if deleted else 'no such row'}")
        return deleted
