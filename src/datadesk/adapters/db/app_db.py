"""Application database: users, audit history, admin logs and requests."""

from __future__ import annotations

import structlog
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine

from datadesk.adapters.db.engine import to_async_dsn
from datadesk.models import BaseModel

logger = structlog.get_logger()


class AppDatabase:
    """Owns the async engine and session factory for the app database.

    Attributes:
        engine: The async engine.
        sessionmaker: Factory for ``AsyncSession`` objects.
    """

    def __init__(self, dsn: str, echo: bool = False) -> None:
        """Initialize the database.

        Args:
            dsn: Database URL.
            echo: Log every statement SQLAlchemy emits.
        """
        self.engine: AsyncEngine = create_async_engine(
            to_async_dsn(dsn), pool_pre_ping=True, echo=echo
        )
        self.sessionmaker = async_sessionmaker(self.engine, expire_on_commit=False)

    async def create_tables(self) -> None:
        """Create any missing tables."""
        async with self.engine.begin() as conn:
            await conn.run_sync(BaseModel.metadata.create_all)
        logger.info("app_tables_ready", tables=sorted(BaseModel.metadata.tables))

    async def close(self) -> None:
        """Dispose of the connection pool."""
        await self.engine.dispose()
