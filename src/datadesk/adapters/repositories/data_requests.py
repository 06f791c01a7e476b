"""Data request repository."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any
from uuid import UUID

import structlog
from sqlalchemy import Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from datadesk.models import DataRequest, DataRequestStatus

logger = structlog.get_logger()

SORTABLE_COLUMNS = frozenset(
    {
        "created_at",
        "updated_at",
        "name",
        "nim",
        "email",
        "format",
        "status",
        "year_from",
        "year_to",
    }
)

_UPDATABLE_FIELDS = frozenset(
    {
        "name",
        "nim",
        "phone_number",
        "email",
        "format",
        "purpose",
        "status",
        "year_from",
        "year_to",
        "table",
        "columns",
        "sql_query",
    }
)


class InvalidSortError(ValueError):
    """Raised when a sort expression names an unknown column or direction."""


def parse_sort(sort_by: str | None) -> Any:
    """Turn ``"column [ASC|DESC]"`` into an ORDER BY clause.

    Only columns in SORTABLE_COLUMNS are accepted; an empty value sorts
    newest first.

    Raises:
        InvalidSortError: If the expression is not recognised.
    """
    if not sort_by or not sort_by.strip():
        return DataRequest.created_at.desc()

    parts = sort_by.split()
    column_name = parts[0].lower()
    direction = parts[1].lower() if len(parts) > 1 else "asc"
    if len(parts) > 2 or column_name not in SORTABLE_COLUMNS or direction not in ("asc", "desc"):
        raise InvalidSortError(f"Unsupported sort: {sort_by}")

    column = getattr(DataRequest, column_name)
    return column.desc() if direction == "desc" else column.asc()


def _within(stmt: Select[Any], date_from: datetime | None, date_to: datetime | None) -> Select[Any]:
    if date_from is not None:
        stmt = stmt.where(DataRequest.created_at >= date_from)
    if date_to is not None:
        stmt = stmt.where(DataRequest.created_at <= date_to)
    return stmt


class DataRequestRepository:
    """Repository for data requests and their dashboard aggregates."""

    def __init__(self, sessionmaker: async_sessionmaker[AsyncSession]) -> None:
        """Initialize the repository.

        Args:
            sessionmaker: Session factory for the app database.
        """
        self._sessionmaker = sessionmaker

    async def create(self, fields: dict[str, Any]) -> DataRequest:
        """Create a data request in ``PENDING`` state."""
        request = DataRequest(
            status=DataRequestStatus.PENDING.value,
            **{k: v for k, v in fields.items() if k in _UPDATABLE_FIELDS and k != "status"},
        )
        async with self._sessionmaker() as session:
            session.add(request)
            await session.commit()
        logger.info("data_request_created", request_id=str(request.id))
        return request

    async def list(self) -> list[DataRequest]:
        """List every data request."""
        async with self._sessionmaker() as session:
            result = await session.execute(select(DataRequest))
            return list(result.scalars().all())

    async def search(
        self,
        search: str | None = None,
        sort_by: str | None = None,
        page: int | None = None,
        limit: int | None = None,
    ) -> list[DataRequest]:
        """Filter, sort and paginate data requests.

        Args:
            search: Case-insensitive substring of name, NIM or email.
            sort_by: ``"column [ASC|DESC]"``; defaults to newest first.
            page: 1-indexed page; pagination applies only with ``limit``.
            limit: Page size.

        Raises:
            InvalidSortError: If ``sort_by`` is not allowed.
        """
        stmt = select(DataRequest)
        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(
                or_(
                    DataRequest.name.ilike(pattern),
                    DataRequest.nim.ilike(pattern),
                    DataRequest.email.ilike(pattern),
                )
            )
        stmt = stmt.order_by(parse_sort(sort_by))
        if page and limit:
            stmt = stmt.offset((page - 1) * limit).limit(limit)

        async with self._sessionmaker() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def get(self, request_id: UUID) -> DataRequest | None:
        """Get a data request by ID."""
        async with self._sessionmaker() as session:
            return await session.get(DataRequest, request_id)

    async def update(self, request_id: UUID, changes: dict[str, Any]) -> DataRequest | None:
        """Apply ``changes`` to a data request.

        Returns:
            The updated request, or None if it does not exist.
        """
        async with self._sessionmaker() as session:
            request = await session.get(DataRequest, request_id)
            if request is None:
                return None
            for key, value in changes.items():
                if key in _UPDATABLE_FIELDS:
                    setattr(request, key, value)
            await session.commit()
            await session.refresh(request)
        logger.info("data_request_updated", request_id=str(request_id), fields=sorted(changes))
        return request

    async def delete(self, request_id: UUID) -> bool:
        """Delete a data request.

        Returns:
            True if a request was deleted.
        """
        async with self._sessionmaker() as session:
            request = await session.get(DataRequest, request_id)
            if request is None:
                return False
            await session.delete(request)
            await session.commit()
        logger.info("data_request_deleted", request_id=str(request_id))
        return True

    # Aggregates for the analytics dashboard

    async def count(
        self, date_from: datetime | None = None, date_to: datetime | None = None
    ) -> int:
        """Count requests created in the window."""
        stmt = _within(select(func.count()).select_from(DataRequest), date_from, date_to)
        async with self._sessionmaker() as session:
            return int((await session.execute(stmt)).scalar_one())

    async def count_by(
        self,
        column: str,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
    ) -> dict[str, int]:
        """Count requests grouped by ``status`` or ``format``."""
        if column not in ("status", "format"):
            raise ValueError(f"Cannot group by {column}")
        field = getattr(DataRequest, column)
        stmt = _within(select(field, func.count()).group_by(field), date_from, date_to)
        async with self._sessionmaker() as session:
            rows = (await session.execute(stmt)).all()
        return {key: int(count) for key, count in rows}

    async def daily_counts(self, since: datetime) -> list[tuple[date, int]]:
        """Count requests per calendar day since ``since``, oldest first."""
        day = func.date(DataRequest.created_at)
        stmt = (
            select(day, func.count())
            .where(DataRequest.created_at >= since)
            .group_by(day)
            .order_by(day)
        )
        async with self._sessionmaker() as session:
            rows = (await session.execute(stmt)).all()
        return [(d, int(count)) for d, count in rows]

    async def recent(self, limit: int = 10) -> list[DataRequest]:
        """Return the newest requests."""
        stmt = select(DataRequest).order_by(DataRequest.created_at.desc()).limit(limit)
        async with self._sessionmaker() as session:
            return list((await session.execute(stmt)).scalars().all())

    async def completed_spans(self) -> list[tuple[datetime, datetime]]:
        """Return (created_at, updated_at) of completed requests."""
        stmt = select(DataRequest.created_at, DataRequest.updated_at).where(
            DataRequest.status == DataRequestStatus.COMPLETED.value,
            DataRequest.updated_at > DataRequest.created_at,
        )
        async with self._sessionmaker() as session:
            rows = (await session.execute(stmt)).all()
        return [(created, updated) for created, updated in rows]

    async def year_range_counts(self, limit: int = 10) -> list[tuple[int, int, int]]:
        """Return the most requested (year_from, year_to) pairs with counts."""
        count = func.count().label("count")
        stmt = (
            select(DataRequest.year_from, DataRequest.year_to, count)
            .where(DataRequest.year_from.is_not(None), DataRequest.year_to.is_not(None))
            .group_by(DataRequest.year_from, DataRequest.year_to)
            .order_by(count.desc())
            .limit(limit)
        )
        async with self._sessionmaker() as session:
            rows = (await session.execute(stmt)).all()
        return [(int(a), int(b), int(c)) for a, b, c in rows]
