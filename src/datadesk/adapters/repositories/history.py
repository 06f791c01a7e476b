"""Request history repository."""

from __future__ import annotations

from datetime import datetime

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from datadesk.models import RequestHistory

logger = structlog.get_logger()


class RequestHistoryRepository:
    """Audit trail of executed exports, backed by the app database."""

    def __init__(self, sessionmaker: async_sessionmaker[AsyncSession]) -> None:
        """Initialize the repository.

        Args:
            sessionmaker: Session factory for the app database.
        """
        self._sessionmaker = sessionmaker

    async def append(self, query: str, timestamp: datetime) -> None:
        """Persist one audit record.

        Errors propagate to the caller unchanged.
        """
        async with self._sessionmaker() as session:
            session.add(RequestHistory(sql=query, date=timestamp))
            await session.commit()
        logger.debug("request_history_recorded", date=timestamp.isoformat())

    async def list(
        self,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[RequestHistory]:
        """List audit records, oldest first.

        Args:
            start: Only records at or after this moment.
            end: Only records at or before this moment.

        Returns:
            Matching records ordered by date ascending.
        """
        stmt = select(RequestHistory)
        if start is not None:
            stmt = stmt.where(RequestHistory.date >= start)
        if end is not None:
            stmt = stmt.where(RequestHistory.date <= end)
        stmt = stmt.order_by(RequestHistory.date.asc())

        async with self._sessionmaker() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())
