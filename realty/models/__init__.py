"""
Database models for the Realty Catalogue API.
Includes Property, Favorite and AdminUser models.
"""

from realty.models.property import Property, PropertyType, PropertyStatus, MAX_PROPERTY_IMAGES
from realty.models.favorite import Favorite
from realty.models.admin import AdminUser, AdminRole

__all__ = [
    "Property",
    "PropertyType",
    "PropertyStatus",
    "MAX_PROPERTY_IMAGES",
    "Favorite",
    "AdminUser",
    "AdminRole",
]
