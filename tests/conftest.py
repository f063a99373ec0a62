"""
Test configuration and fixtures for the Realty Catalogue API.
Provides database fixtures, test data factories, tokens and image helpers.
"""

import os
import tempfile

# Settings are read at import time, so the environment is prepared first
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-that-is-long-enough-for-hs256")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="realty-uploads-"))

import io
import uuid
from datetime import timedelta
from decimal import Decimal
from typing import AsyncGenerator, Dict, List, Optional

import pytest
from httpx import AsyncClient, ASGITransport
from PIL import Image as PILImage
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from realty.main import app
from realty.database import Base, get_db, enable_sqlite_foreign_keys
from realty.models.admin import AdminUser, AdminRole
from realty.models.property import Property, PropertyType, PropertyStatus
from realty.repositories.admin import AdminRepository
from realty.repositories.property import PropertyRepository
from realty.services.admin import AdminService
from realty.services.auth import AuthService
from realty.services.favorite import FavoriteService
from realty.services.image import ImageService
from realty.services.property import PropertyService
from realty.events import EventChannel
from realty.utils.auth import create_access_token, hash_password
from realty.utils.file_utils import FileStorage


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_PASSWORD = "testpassword123"


@pytest.fixture
async def test_engine():
    """Fresh in-memory database per test with foreign keys enforced."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False}
    )
    enable_sqlite_foreign_keys(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine) -> async_sessionmaker:
    return async_sessionmaker(bind=test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.rollback()
            await session.close()


@pytest.fixture
async def async_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client with database session override."""
    def override_get_db():
        return db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def storage(tmp_path) -> FileStorage:
    """Upload storage in a per-test directory."""
    return FileStorage(base_dir=tmp_path / "uploads", url_prefix="/uploads")


@pytest.fixture
def image_service(storage: FileStorage) -> ImageService:
    return ImageService(storage=storage)


@pytest.fixture
def event_channel() -> EventChannel:
    return EventChannel()


# Repository fixtures
@pytest.fixture
def property_repository(db_session: AsyncSession) -> PropertyRepository:
    return PropertyRepository(db_session)


@pytest.fixture
def admin_repository(db_session: AsyncSession) -> AdminRepository:
    return AdminRepository(db_session)


# Service fixtures
@pytest.fixture
def property_service(
    db_session: AsyncSession,
    image_service: ImageService,
    event_channel: EventChannel
) -> PropertyService:
    return PropertyService(db_session, image_service=image_service, events=event_channel)


@pytest.fixture
def favorite_service(db_session: AsyncSession) -> FavoriteService:
    return FavoriteService(db_session)


@pytest.fixture
def auth_service(db_session: AsyncSession) -> AuthService:
    return AuthService(db_session)


@pytest.fixture
def admin_service(db_session: AsyncSession) -> AdminService:
    return AdminService(db_session)


# Test data factories
class PropertyFactory:
    """Factory for creating test properties."""

    @staticmethod
    def create_property_data(
        title: str = "Test Property",
        description: str = "A beautiful test property",
        property_type: PropertyType = PropertyType.APARTMENT,
        location: str = "North Coast",
        price: Decimal = Decimal("500000.00"),
        status: PropertyStatus = PropertyStatus.AVAILABLE,
        images: Optional[List[str]] = None,
        bedrooms: Optional[int] = 2,
        bathrooms: Optional[int] = 1,
        parking_spaces: Optional[int] = None,
        area: Optional[Decimal] = None
    ) -> dict:
        return {
            "title": title,
            "description": description,
            "type": property_type,
            "location": location,
            "price": price,
            "status": status,
            "images": list(images or []),
            "bedrooms": bedrooms,
            "bathrooms": bathrooms,
            "parking_spaces": parking_spaces,
            "area": area,
        }

    @staticmethod
    async def create_property(property_repo: PropertyRepository, **kwargs) -> Property:
        """Create a test property in the database."""
        return await property_repo.create_property(PropertyFactory.create_property_data(**kwargs))


class AdminFactory:
    """Factory for creating test admin accounts."""

    @staticmethod
    async def create_admin(
        admin_repo: AdminRepository,
        email: Optional[str] = None,
        password: str = TEST_PASSWORD,
        name: str = "Test Admin",
        role: AdminRole = AdminRole.ADMIN,
        is_active: bool = True,
        permissions: Optional[List[str]] = None
    ) -> AdminUser:
        return await admin_repo.create({
            "name": name,
            "email": email or f"admin{uuid.uuid4().hex[:8]}@example.com",
            "hashed_password": hash_password(password),
            "role": role,
            "permissions": permissions or [],
            "is_active": is_active,
        })


def make_token(admin: AdminUser, expires_delta: Optional[timedelta] = None) -> str:
    return create_access_token(
        admin_id=admin.id,
        email=admin.email,
        role=admin.role.value,
        permissions=admin.permissions,
        expires_delta=expires_delta
    )


def auth_headers(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def make_image_bytes(image_format: str = "PNG", size=(8, 8), color=(200, 30, 30)) -> bytes:
    """Encode a tiny solid-colour image."""
    buffer = io.BytesIO()
    PILImage.new("RGB", size, color).save(buffer, format=image_format)
    return buffer.getvalue()


# Common test fixtures
@pytest.fixture
async def super_admin(admin_repository: AdminRepository) -> AdminUser:
    return await AdminFactory.create_admin(
        admin_repository,
        email="root@example.com",
        name="Root",
        role=AdminRole.SUPER_ADMIN
    )


@pytest.fixture
async def regular_admin(admin_repository: AdminRepository) -> AdminUser:
    return await AdminFactory.create_admin(admin_repository, email="staff@example.com", name="Staff")


@pytest.fixture
def super_admin_headers(super_admin: AdminUser) -> Dict[str, str]:
    return auth_headers(make_token(super_admin))


@pytest.fixture
def admin_headers(regular_admin: AdminUser) -> Dict[str, str]:
    return auth_headers(make_token(regular_admin))


@pytest.fixture
async def catalogue(property_repository: PropertyRepository) -> Dict[str, Property]:
    """Three listings used by the filtering scenarios."""
    apartment = await PropertyFactory.create_property(
        property_repository,
        title="Sea-view apartment",
        property_type=PropertyType.APARTMENT,
        location="North Coast",
        price=Decimal("500000")
    )
    house = await PropertyFactory.create_property(
        property_repository,
        title="Family house",
        property_type=PropertyType.HOUSE,
        location="Cairo",
        price=Decimal("2000000")
    )
    farm = await PropertyFactory.create_property(
        property_repository,
        title="Sold farm",
        property_type=PropertyType.FARM,
        location="north coast",
        price=Decimal("300000"),
        status=PropertyStatus.SOLD
    )
    return {"apartment": apartment, "house": house, "farm": farm}
