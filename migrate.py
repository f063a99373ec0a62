#!/usr/bin/env python3
"""
Database bootstrap script.
Creates or drops the schema and seeds the initial super admin account.
"""

import asyncio
import sys
import argparse
import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker

from realty.config import settings
from realty.database import engine, AsyncSessionLocal, create_tables, drop_tables
from realty.models.admin import AdminUser, AdminRole

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


class MigrationManager:
    """Manages schema creation and the bootstrap super admin."""

    def __init__(
        self,
        target_engine: AsyncEngine = engine,
        session_factory: async_sessionmaker = AsyncSessionLocal
    ):
        self.engine = target_engine
        self.session_factory = session_factory

    async def create_schema(self) -> None:
        logger.info("Creating database tables")
        await create_tables(self.engine)

    async def drop_schema(self) -> None:
        """Drop all tables (refused in production)."""
        logger.warning("Dropping all tables - all data will be lost!")
        await drop_tables(self.engine)

    async def seed_admin(
        self,
        email: Optional[str] = None,
        password: Optional[str] = None,
        name: Optional[str] = None
    ) -> Optional[AdminUser]:
        """
        Create the initial super admin unless an account with the email exists.

        Args:
            email: Login email (defaults to SUPER_ADMIN_EMAIL)
            password: Password (defaults to SUPER_ADMIN_PASSWORD)
            name: Display name (defaults to SUPER_ADMIN_NAME)

        Returns:
            Created admin, or None when it already existed

        Raises:
            ValueError: If no password is configured or the email is invalid
        """
        email = AdminUser.validate_email_format(email or settings.super_admin_email)
        password = password or settings.super_admin_password
        name = name or settings.super_admin_name

        if not password:
            raise ValueError("A password is required (--password or SUPER_ADMIN_PASSWORD)")

        async with self.session_factory() as session:
            try:
                result = await session.execute(select(AdminUser).where(AdminUser.email == email))
                if result.scalar_one_or_none():
                    logger.info(f"Admin {email} already exists, skipping seed")
                    return None

                admin = AdminUser(
                    name=name,
                    email=email,
                    role=AdminRole.SUPER_ADMIN,
                    permissions=[],
                    is_active=True
                )
                admin.set_password(password)

                session.add(admin)
                await session.commit()

                logger.info(f"Super admin created: {email}")
                return admin
            except Exception as e:
                await session.rollback()
                logger.error(f"Failed to seed admin: {e}")
                raise


def main():
    """CLI interface for database bootstrap."""
    parser = argparse.ArgumentParser(description="Database bootstrap for the Realty Catalogue API")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("create", help="Create all tables")

    drop_parser = subparsers.add_parser("drop", help="Drop all tables (not in production)")
    drop_parser.add_argument("--confirm", action="store_true", help="Confirm dropping all tables")

    seed_parser = subparsers.add_parser("seed-admin", help="Create the initial super admin")
    seed_parser.add_argument("--email", help="Login email")
    seed_parser.add_argument("--password", help="Password (at least 8 characters)")
    seed_parser.add_argument("--name", help="Display name")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return

    manager = MigrationManager()

    try:
        if args.command == "create":
            asyncio.run(manager.create_schema())

        elif args.command == "drop":
            if not args.confirm:
                print("Dropping tables requires --confirm flag")
                return
            asyncio.run(manager.drop_schema())

        elif args.command == "seed-admin":
            asyncio.run(manager.seed_admin(email=args.email, password=args.password, name=args.name))

    except Exception as e:
        logger.error(f"Command failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
