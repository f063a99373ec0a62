"""
Repository layer for data access operations.
"""

from realty.repositories.base import BaseRepository
from realty.repositories.property import PropertyRepository, PropertyFilters, build_property_predicates
from realty.repositories.favorite import FavoriteRepository
from realty.repositories.admin import AdminRepository

__all__ = [
    "BaseRepository",
    "PropertyRepository",
    "PropertyFilters",
    "build_property_predicates",
    "FavoriteRepository",
    "AdminRepository",
]
