"""
Pydantic schemas for admin account requests and responses.
The password hash never appears in a response.
"""

from pydantic import EmailStr, Field, field_validator
from typing import Optional, List
from datetime import datetime
import uuid

from realty.models.admin import AdminRole, normalize_permissions
from realty.schemas.common import CamelModel


class AdminCreate(CamelModel):
    """Schema for creating an admin account."""

    name: str = Field(..., min_length=1, max_length=255, description="Display name", examples=["Jane Doe"])
    email: EmailStr = Field(..., description="Login email", examples=["jane@example.com"])
    password: str = Field(
        ...,
        min_length=8,
        max_length=128,
        description="Password (minimum 8 characters)"
    )
    role: AdminRole = Field(AdminRole.ADMIN, description="Account role")
    permissions: List[str] = Field(default_factory=list, description="Capability strings")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError("Name cannot be empty")
        return v.strip()

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        """Normalize email to lowercase."""
        return v.lower().strip()

    @field_validator("permissions")
    @classmethod
    def validate_permissions(cls, v):
        return normalize_permissions(v)


class AdminUpdate(CamelModel):
    """Partial update; omitted fields keep their value, an omitted password keeps the hash."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=8, max_length=128)
    role: Optional[AdminRole] = None
    permissions: Optional[List[str]] = None
    is_active: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if v is not None and not v.strip():
            raise ValueError("Name cannot be empty")
        return v.strip() if v else v

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return v.lower().strip() if v else v

    @field_validator("password", mode="before")
    @classmethod
    def blank_password_is_omitted(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("permissions")
    @classmethod
    def validate_permissions(cls, v):
        return normalize_permissions(v) if v is not None else v


class AdminStatusUpdate(CamelModel):
    is_active: bool = Field(..., description="New active flag")


class AdminResponse(CamelModel):
    """Schema for admin account responses."""

    id: uuid.UUID = Field(..., description="Admin unique identifier")
    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Login email")
    role: AdminRole = Field(..., description="Account role")
    permissions: List[str] = Field(default_factory=list, description="Capability strings")
    is_active: bool = Field(..., description="Whether the account may log in")
    created_by: Optional[uuid.UUID] = Field(None, description="Admin who created this account")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")
