"""
Pydantic schemas for admin login.
"""

from pydantic import EmailStr, Field, field_validator

from realty.schemas.common import CamelModel
from realty.schemas.admin import AdminResponse


class LoginRequest(CamelModel):
    """Login request schema."""

    email: EmailStr = Field(..., description="Admin email address", examples=["admin@example.com"])
    password: str = Field(..., min_length=1, max_length=128, description="Admin password")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        """Normalize email to lowercase."""
        return v.lower().strip()


class LoginResponse(CamelModel):
    """Bearer token plus the authenticated account."""

    token: str = Field(..., description="JWT access token", examples=["eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9..."])
    admin: AdminResponse = Field(..., description="Authenticated admin account")
