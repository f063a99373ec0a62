"""
Property model for catalogue listings.
Handles listing data, pricing, media paths and search indexes.
"""

from sqlalchemy import String, Text, Integer, Numeric, JSON, Enum as SQLEnum, Index
from sqlalchemy.orm import Mapped, mapped_column
from realty.database import Base
from decimal import Decimal
from typing import List, Optional
import enum


MAX_PROPERTY_IMAGES = 12

# Upper bounds of the Numeric column precisions
MAX_PRICE = Decimal("9999999999.99")
MAX_AREA = Decimal("99999999.99")
# Upper bound of a 4-byte INTEGER column
MAX_COUNT = 2_147_483_647


class PropertyType(str, enum.Enum):
    """Kind of real-estate unit."""
    APARTMENT = "apartment"
    HOUSE = "house"
    FARM = "farm"


class PropertyStatus(str, enum.Enum):
    """Commercial status of a listing."""
    AVAILABLE = "available"
    SOLD = "sold"


def _enum_values(enum_cls) -> List[str]:
    return [member.value for member in enum_cls]


class Property(Base):
    """
    Property model for the public catalogue.
    Images are stored as an ordered list of URL paths.
    """

    __tablename__ = "properties"

    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Listing title"
    )

    type: Mapped[PropertyType] = mapped_column(
        SQLEnum(PropertyType, name="property_type", values_callable=_enum_values),
        nullable=False,
        index=True,
        comment="apartment, house or farm"
    )

    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Detailed property description"
    )

    location: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
        comment="Free-text region"
    )

    price: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2),
        nullable=False,
        index=True,
        comment="Asking price"
    )

    status: Mapped[PropertyStatus] = mapped_column(
        SQLEnum(PropertyStatus, name="property_status", values_callable=_enum_values),
        nullable=False,
        default=PropertyStatus.AVAILABLE,
        index=True,
        comment="available or sold"
    )

    images: Mapped[List[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        comment="Ordered image URL paths"
    )

    bedrooms: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    bathrooms: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    parking_spaces: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    area: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(precision=10, scale=2),
        nullable=True,
        comment="Area in square metres"
    )

    def __repr__(self) -> str:
        return f"<Property(id={self.id}, title={self.title[:30]}, price={self.price})>"

    def validate_price(self) -> None:
        """
        Validate property price.

        Raises:
            ValueError: If price is missing or negative
        """
        if self.price is None:
            raise ValueError("Property price is required")
        if self.price < 0:
            raise ValueError("Property price cannot be negative")
        if self.price > MAX_PRICE:
            raise ValueError(f"Property price cannot exceed {MAX_PRICE}")

    def validate_counts(self) -> None:
        """
        Validate the optional room and parking counts.

        Raises:
            ValueError: If any count is negative or too large
        """
        for field_name in ("bedrooms", "bathrooms", "parking_spaces"):
            value = getattr(self, field_name)
            if value is not None and value < 0:
                raise ValueError(f"{field_name} cannot be negative")
            if value is not None and value > MAX_COUNT:
                raise ValueError(f"{field_name} cannot exceed {MAX_COUNT}")

    def validate_area(self) -> None:
        if self.area is not None and self.area < 0:
            raise ValueError("Property area cannot be negative")
        if self.area is not None and self.area > MAX_AREA:
            raise ValueError(f"Property area cannot exceed {MAX_AREA}")

    def validate_images(self) -> None:
        if len(self.images or []) > MAX_PROPERTY_IMAGES:
            raise ValueError(f"A property can have at most {MAX_PROPERTY_IMAGES} images")

    def validate_all(self) -> None:
        """
        Run all validation checks on the property.

        Raises:
            ValueError: If any validation fails
        """
        self.validate_price()
        self.validate_counts()
        self.validate_area()
        self.validate_images()

    def to_dict(self) -> dict:
        """Convert property to dictionary."""
        return {
            "id": str(self.id),
            "title": self.title,
            "type": self.type.value,
            "description": self.description,
            "location": self.location,
            "price": self.price,
            "status": self.status.value,
            "images": list(self.images or []),
            "bedrooms": self.bedrooms,
            "bathrooms": self.bathrooms,
            "parking_spaces": self.parking_spaces,
            "area": self.area,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


# Listing view: status filter with newest-first ordering
status_created_index = Index(
    "idx_properties_status_created",
    Property.status,
    Property.created_at.desc()
)

# Combined type/status/price filtering
type_status_price_index = Index(
    "idx_properties_type_status_price",
    Property.type,
    Property.status,
    Property.price
)
