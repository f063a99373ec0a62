"""
Admin user model with authentication and role management.
Handles back-office accounts that manage the property catalogue.
"""

from sqlalchemy import String, Boolean, JSON, ForeignKey, Uuid, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column
from realty.database import Base
from realty.utils.auth import hash_password, verify_password
from email_validator import validate_email, EmailNotValidError
from typing import Iterable, List, Optional
import enum
import uuid


class AdminRole(str, enum.Enum):
    """Admin role enumeration for role-based access control."""
    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    EDITOR = "editor"
    VIEWER = "viewer"


def normalize_permissions(permissions: Optional[Iterable[str]]) -> List[str]:
    """Return permissions as a sorted list without blanks or duplicates."""
    if not permissions:
        return []
    return sorted({p.strip() for p in permissions if p and p.strip()})


class AdminUser(Base):
    """
    Back-office account.
    Only a super_admin may create, change or delete other accounts.
    """

    __tablename__ = "admin_users"

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Display name"
    )

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        comment="Login email, stored lower-case"
    )

    hashed_password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Bcrypt hashed password"
    )

    role: Mapped[AdminRole] = mapped_column(
        SQLEnum(AdminRole, name="admin_role", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=AdminRole.ADMIN,
        index=True
    )

    permissions: Mapped[List[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        comment="Capability strings"
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        index=True
    )

    created_by: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("admin_users.id", ondelete="SET NULL"),
        nullable=True,
        comment="Admin who created this account"
    )

    def __repr__(self) -> str:
        return f"<AdminUser(id={self.id}, email={self.email}, role={self.role})>"

    @classmethod
    def validate_email_format(cls, email: str) -> str:
        """
        Validate email format using email-validator.

        Returns:
            Normalized lower-case email address

        Raises:
            ValueError: If email format is invalid
        """
        try:
            valid_email = validate_email(email, check_deliverability=False)
            return valid_email.normalized.lower()
        except EmailNotValidError as e:
            raise ValueError(f"Invalid email format: {str(e)}")

    def set_password(self, password: str) -> None:
        self.hashed_password = hash_password(password)

    def verify_password(self, password: str) -> bool:
        return verify_password(password, self.hashed_password)

    def to_dict(self) -> dict:
        """
        Convert admin to dictionary (excluding the password hash).
        """
        return {
            "id": str(self.id),
            "name": self.name,
            "email": self.email,
            "role": self.role.value,
            "permissions": list(self.permissions or []),
            "is_active": self.is_active,
            "created_by": str(self.created_by) if self.created_by else None,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
