"""
Async engine, session factory and declarative base.
PostgreSQL runs on asyncpg; SQLite (aiosqlite) is supported for development and tests.
"""

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy import text, event, DateTime, Uuid, func
from realty.config import settings
from datetime import datetime, timezone
from typing import Any, AsyncGenerator, Dict
import logging
import uuid

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    """Timezone-aware current time used for row timestamps."""
    return datetime.now(timezone.utc)


def engine_options(database_url: str) -> Dict[str, Any]:
    """
    Build engine keyword arguments for the configured backend.

    SQLite does not accept the pool sizing options used for PostgreSQL.
    """
    if database_url.startswith("sqlite"):
        return {"echo": settings.debug}

    return {
        "echo": settings.debug,
        "pool_size": 10,
        "max_overflow": 20,
        "pool_pre_ping": True,
        "pool_recycle": 3600,
        "pool_timeout": 30,
        "connect_args": {
            "server_settings": {
                "application_name": "realty_api",
            }
        },
    }


def enable_sqlite_foreign_keys(target_engine: AsyncEngine) -> None:
    """
    Turn on foreign key enforcement for every SQLite connection.

    Favorites rely on ON DELETE CASCADE, which SQLite ignores unless the
    pragma is set per connection.
    """

    @event.listens_for(target_engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


engine = create_async_engine(settings.database_url, **engine_options(settings.database_url))
if settings.is_sqlite:
    enable_sqlite_foreign_keys(engine)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Declarative base: every table gets a UUID key and UTC created/updated stamps."""

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, server_default=func.now(), index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now, server_default=func.now()
    )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.id}>"


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one session per request, rolled back if the handler raises."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def check_database_connection() -> bool:
    """Run ``SELECT 1``; False when the database cannot be reached."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        return False
    logger.debug("Database connection OK")
    return True


async def create_tables(target_engine: AsyncEngine = engine) -> None:
    import realty.models  # noqa: F401  (registers the mappers)

    async with target_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info(f"Created tables: {', '.join(sorted(Base.metadata.tables))}")


async def drop_tables(target_engine: AsyncEngine = engine) -> None:
    """Drop every table. Refused when running in production."""
    if settings.is_production:
        raise RuntimeError("Refusing to drop tables in production")

    import realty.models  # noqa: F401

    async with target_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    logger.info("Dropped all tables")


async def close_db_connection() -> None:
    await engine.dispose()
    logger.info("Database engine disposed")
