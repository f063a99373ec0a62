"""
Property repository with filter composition for the public catalogue.
Filters are turned into an explicit list of SQL predicates combined with AND.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_, desc
from realty.repositories.base import BaseRepository
from realty.models.property import Property, PropertyType, PropertyStatus
from typing import Optional, List, Dict, Any
from decimal import Decimal
import logging

logger = logging.getLogger(__name__)


class PropertyFilters:
    """Parsed listing filters; None means the filter is not applied."""

    def __init__(
        self,
        property_type: Optional[PropertyType] = None,
        location: Optional[str] = None,
        min_price: Optional[Decimal] = None,
        max_price: Optional[Decimal] = None,
        status: Optional[PropertyStatus] = None
    ):
        self.property_type = property_type
        self.location = location
        self.min_price = min_price
        self.max_price = max_price
        self.status = status

    def __repr__(self) -> str:
        return (
            f"<PropertyFilters(type={self.property_type}, location={self.location}, "
            f"min_price={self.min_price}, max_price={self.max_price}, status={self.status})>"
        )


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def build_property_predicates(filters: PropertyFilters) -> List:
    """
    Build SQLAlchemy filter conditions from listing filters.

    Args:
        filters: PropertyFilters instance

    Returns:
        List of SQLAlchemy conditions, empty when nothing is filtered
    """
    conditions = []

    if filters.property_type is not None:
        conditions.append(Property.type == filters.property_type)

    # Case-insensitive substring match
    if filters.location:
        conditions.append(
            Property.location.ilike(f"%{_escape_like(filters.location)}%", escape="\\")
        )

    # Inclusive price bounds
    if filters.min_price is not None:
        conditions.append(Property.price >= filters.min_price)
    if filters.max_price is not None:
        conditions.append(Property.price <= filters.max_price)

    if filters.status is not None:
        conditions.append(Property.status == filters.status)

    return conditions


class PropertyRepository(BaseRepository[Property]):
    """
    Repository for property listings.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Property, db)

    async def create_property(self, property_data: Dict[str, Any]) -> Property:
        """
        Create a new property with model validation.

        Raises:
            ValueError: If validation fails
            SQLAlchemyError: If database operation fails
        """
        try:
            Property(**property_data).validate_all()

            created_property = await self.create(property_data)
            logger.info(f"Created property: {created_property.title} (ID: {created_property.id})")
            return created_property
        except ValueError as e:
            logger.error(f"Property validation failed: {e}")
            raise
        except Exception as e:
            logger.error(f"Failed to create property: {e}")
            raise

    async def update_property(self, property_obj: Property, update_data: Dict[str, Any]) -> Property:
        """
        Apply a partial update, validating the resulting state first.

        Raises:
            ValueError: If the updated property would be invalid
        """
        candidate = Property(**{**self._current_values(property_obj), **{
            k: v for k, v in update_data.items() if v is not None
        }})
        candidate.validate_all()

        updated = await self.update(property_obj, update_data)
        logger.info(f"Updated property: {updated.title} (ID: {updated.id})")
        return updated

    async def list_properties(self, filters: PropertyFilters) -> List[Property]:
        """
        List properties matching all supplied filters, newest first.

        Args:
            filters: PropertyFilters instance with search criteria

        Returns:
            List of matching properties
        """
        try:
            query = select(Property)

            conditions = build_property_predicates(filters)
            if conditions:
                query = query.where(and_(*conditions))

            query = query.order_by(desc(Property.created_at))

            result = await self.db.execute(query)
            properties = result.scalars().all()

            logger.debug(f"Property listing returned {len(properties)} results for {filters!r}")
            return list(properties)
        except Exception as e:
            logger.error(f"Failed to list properties: {e}")
            raise

    @staticmethod
    def _current_values(property_obj: Property) -> Dict[str, Any]:
        return {
            "title": property_obj.title,
            "type": property_obj.type,
            "description": property_obj.description,
            "location": property_obj.location,
            "price": property_obj.price,
            "status": property_obj.status,
            "images": list(property_obj.images or []),
            "bedrooms": property_obj.bedrooms,
            "bathrooms": property_obj.bathrooms,
            "parking_spaces": property_obj.parking_spaces,
            "area": property_obj.area,
        }
