"""
Favorite model linking an anonymous browsing session to a property.
"""

from sqlalchemy import String, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from realty.database import Base
from typing import TYPE_CHECKING
import uuid

if TYPE_CHECKING:
    from realty.models.property import Property


MAX_SESSION_ID_LENGTH = 255


class Favorite(Base):
    """
    Bookmark of a property by a session id.

    At most one row exists per (property, session); rows disappear with
    their property through the foreign key cascade.
    """

    __tablename__ = "favorites"
    __table_args__ = (
        UniqueConstraint("property_id", "session_id", name="uq_favorites_property_session"),
    )

    property_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Bookmarked property"
    )

    session_id: Mapped[str] = mapped_column(
        String(MAX_SESSION_ID_LENGTH),
        nullable=False,
        index=True,
        comment="Opaque anonymous session identifier"
    )

    property: Mapped["Property"] = relationship(
        "Property",
        lazy="selectin",
        passive_deletes=True
    )

    def __repr__(self) -> str:
        return f"<Favorite(id={self.id}, property_id={self.property_id}, session_id={self.session_id})>"

    def to_dict(self, include_property: bool = True) -> dict:
        result = {
            "id": str(self.id),
            "property_id": str(self.property_id),
            "session_id": self.session_id,
            "created_at": self.created_at,
        }
        if include_property and self.property is not None:
            result["property"] = self.property.to_dict()
        return result
