"""
Pydantic schemas for property responses.
Property writes arrive as multipart form fields and are parsed by the service.
"""

from pydantic import Field
from typing import Optional, List
from datetime import datetime
from decimal import Decimal
import uuid

from realty.models.property import PropertyType, PropertyStatus
from realty.schemas.common import CamelModel


class PropertyResponse(CamelModel):
    """Schema for property responses."""

    id: uuid.UUID = Field(..., description="Property unique identifier")
    title: str = Field(..., description="Listing title", examples=["Sea-view apartment"])
    type: PropertyType = Field(..., description="apartment, house or farm", examples=["apartment"])
    description: str = Field(..., description="Detailed property description")
    location: str = Field(..., description="Free-text region", examples=["North Coast"])
    price: Decimal = Field(..., description="Asking price with 2 decimal places", examples=["500000.00"])
    status: PropertyStatus = Field(..., description="available or sold", examples=["available"])
    images: List[str] = Field(
        default_factory=list,
        description="Ordered image URL paths",
        examples=[["/uploads/4f1c2b.jpg"]]
    )
    bedrooms: Optional[int] = Field(None, description="Number of bedrooms")
    bathrooms: Optional[int] = Field(None, description="Number of bathrooms")
    parking_spaces: Optional[int] = Field(None, description="Number of parking spaces")
    area: Optional[Decimal] = Field(None, description="Area in square metres")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")
