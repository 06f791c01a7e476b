"""Email history repository."""

from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from datadesk.models import EmailHistory


class EmailHistoryRepository:
    """Stores one row per email send attempt."""

    def __init__(self, sessionmaker: async_sessionmaker[AsyncSession]) -> None:
        self._sessionmaker = sessionmaker

    async def record(
        self,
        sender: str,
        recipient: str,
        subject: str,
        body: str,
        status: str,
        error_message: str | None = None,
        sent_at: datetime | None = None,
    ) -> EmailHistory:
        """Record an email send attempt."""
        entry = EmailHistory(
            sender=sender,
            recipient=recipient,
            subject=subject,
            body=body,
            status=status,
            error_message=error_message,
            retry_count=0,
            sent_at=sent_at,
        )
        async with self._sessionmaker() as session:
            session.add(entry)
            await session.commit()
        return entry
