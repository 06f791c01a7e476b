"""Bootstrap admin account.

Run with: python -m datadesk.demo.seed
Or automatically on startup when ADMIN_EMAIL and ADMIN_PASSWORD are set.
"""

from __future__ import annotations

import os

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from datadesk.core.auth.password import hash_password
from datadesk.core.auth.types import UserRole
from datadesk.models import User

logger = structlog.get_logger()


async def seed_admin(session: AsyncSession, email: str, password: str, name: str) -> bool:
    """Create the admin account if no user has this email yet.

    Idempotent - safe to run multiple times. An existing account is left
    untouched, including its role and password.

    Args:
        session: SQLAlchemy async session.
        email: Admin email address.
        password: Plain text password, stored as a bcrypt hash.
        name: Display name.

    Returns:
        True if the account was created.
    """
    result = await session.execute(select(User).where(User.email == email))
    if result.scalar_one_or_none() is not None:
        logger.info("admin_seed_skipped", email=email)
        return False

    session.add(
        User(
            name=name,
            email=email,
            password_hash=hash_password(password),
            role=UserRole.ADMIN.value,
        )
    )
    await session.commit()
    logger.info("admin_seeded", email=email)
    return True


if __name__ == "__main__":
    """Allow running seed script directly."""
    import asyncio

    from datadesk.adapters.db.app_db import AppDatabase

    async def main() -> None:
        """Seed the admin account into APP_DATABASE_URL."""
        db_url = os.getenv("APP_DATABASE_URL") or os.getenv(
            "DATABASE_URL", "postgresql://localhost:5432/datadesk"
        )
        app_db = AppDatabase(db_url)
        await app_db.create_tables()
        async with app_db.sessionmaker() as session:
            await seed_admin(
                session,
                email=os.environ["ADMIN_EMAIL"],
                password=os.environ["ADMIN_PASSWORD"],
                name=os.getenv("ADMIN_NAME", "Administrator"),
            )
        await app_db.close()

    asyncio.run(main())
