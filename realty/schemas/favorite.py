"""
Pydantic schemas for session favorites.
"""

from pydantic import Field
from typing import Optional
from datetime import datetime
import uuid

from realty.schemas.common import CamelModel
from realty.schemas.property import PropertyResponse


class FavoriteCreate(CamelModel):
    """Body of POST /favorites."""

    property_id: uuid.UUID = Field(..., description="Property to bookmark")


class FavoriteResponse(CamelModel):
    """A favorite together with the current data of its property."""

    id: uuid.UUID = Field(..., description="Favorite unique identifier")
    property_id: uuid.UUID = Field(..., description="Bookmarked property")
    session_id: str = Field(..., description="Session that owns the favorite")
    created_at: datetime = Field(..., description="When the property was bookmarked")
    property: Optional[PropertyResponse] = Field(None, description="Bookmarked property data")


class FavoriteCheckResponse(CamelModel):
    is_favorite: bool = Field(..., description="Whether the session bookmarked the property")


class SessionResponse(CamelModel):
    session_id: str = Field(..., description="Opaque anonymous session identifier")
