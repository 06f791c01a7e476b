"""Admin log repository."""

from __future__ import annotations

from typing import Any
from uuid import UUID

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from datadesk.models import AdminLog

logger = structlog.get_logger()

_UPDATABLE_FIELDS = frozenset({"admin_id", "action", "endpoint"})


class AdminLogRepository:
    """Repository for admin log operations."""

    def __init__(self, sessionmaker: async_sessionmaker[AsyncSession]) -> None:
        """Initialize the repository.

        Args:
            sessionmaker: Session factory for the app database.
        """
        self._sessionmaker = sessionmaker

    async def record(self, admin_id: UUID, action: str, endpoint: str) -> AdminLog:
        """Record an admin API call.

        Args:
            admin_id: The admin who made the call.
            action: HTTP method.
            endpoint: Request path.

        Returns:
            The stored entry.
        """
        entry = AdminLog(admin_id=admin_id, action=action, endpoint=endpoint)
        async with self._sessionmaker() as session:
            session.add(entry)
            await session.commit()
        return entry

    async def list(self) -> list[AdminLog]:
        """List every entry, newest first."""
        async with self._sessionmaker() as session:
            result = await session.execute(select(AdminLog).order_by(AdminLog.created_at.desc()))
            return list(result.scalars().all())

    async def get(self, log_id: UUID) -> AdminLog | None:
        """Get an entry by ID."""
        async with self._sessionmaker() as session:
            return await session.get(AdminLog, log_id)

    async def update(self, log_id: UUID, changes: dict[str, Any]) -> AdminLog | None:
        """Apply ``changes`` to an entry.

        Unknown keys are ignored.

        Returns:
            The updated entry, or None if it does not exist.
        """
        async with self._sessionmaker() as session:
            entry = await session.get(AdminLog, log_id)
            if entry is None:
                return None
            for key, value in changes.items():
                if key in _UPDATABLE_FIELDS:
                    setattr(entry, key, value)
            await session.commit()
            await session.refresh(entry)
            return entry

    async def delete(self, log_id: UUID) -> bool:
        """Delete an entry.

        Returns:
            True if an entry was deleted.
        """
        async with self._sessionmaker() as session:
            entry = await session.get(AdminLog, log_id)
            if entry is None:
                return False
            await session.delete(entry)
            await session.commit()
        logger.info("admin_log_deleted", log_id=str(log_id))
        return True
