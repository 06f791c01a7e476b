"""Unit tests for the SQLAlchemy query engine helpers."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy import text
from sqlalchemy.exc import DBAPIError, OperationalError

from datadesk.adapters.db.engine import (
    SqlAlchemyQueryEngine,
    driver_message,
    escape_bind_markers,
    to_async_dsn,
)
from datadesk.core.exceptions import QueryExecutionError


class TestToAsyncDsn:
    """Tests for to_async_dsn."""

    @pytest.mark.parametrize(
        ("dsn", "expected"),
        [
            ("postgresql://u:p@h:5432/db", "postgresql+asyncpg://u:p@h:5432/db"),
            ("postgres://h/db", "postgresql+asyncpg://h/db"),
            ("postgresql+asyncpg://h/db", "postgresql+asyncpg://h/db"),
            ("sqlite+aiosqlite:///x.db", "sqlite+aiosqlite:///x.db"),
        ],
    )
    def test_mapping(self, dsn: str, expected: str) -> None:
        """Test that plain postgres URLs get the asyncpg driver."""
        assert to_async_dsn(dsn) == expected


class TestEscapeBindMarkers:
    """Tests for escape_bind_markers."""

    def test_colon_words_are_not_parameters(self) -> None:
        """Test that :name and casts survive text() unchanged."""
        sql = "SELECT created_at::date, ':literal' FROM t WHERE x = :y"

        clause = text(escape_bind_markers(sql))

        assert clause.compile().params == {}
        assert str(clause) == sql


class TestDriverMessage:
    """Tests for driver_message."""

    def test_uses_driver_error(self) -> None:
        """Test that the DBAPI message is preferred."""
        orig = Exception('relation "nope" does not exist')
        error = DBAPIError("SELECT * FROM nope", {}, orig)

        assert driver_message(error) == 'relation "nope" does not exist'


class TestSqlAlchemyQueryEngine:
    """Tests for SqlAlchemyQueryEngine."""

    def test_requires_dsn_or_engine(self) -> None:
        """Test that construction without a target fails."""
        with pytest.raises(ValueError):
            SqlAlchemyQueryEngine()

    async def test_connection_failure_maps_to_query_error(self) -> None:
        """Test that a refused connection becomes QueryExecutionError."""
        engine = MagicMock()
        engine.connect = AsyncMock(
            side_effect=OperationalError("connect", {}, Exception("connection refused"))
        )
        query_engine = SqlAlchemyQueryEngine(engine=engine)

        with pytest.raises(QueryExecutionError, match="connection refused"):
            async with query_engine.execute_read("SELECT 1"):
                pass

    async def test_close_disposes_pool(self) -> None:
        """Test that close disposes the engine."""
        engine = MagicMock()
        engine.dispose = AsyncMock()

        await SqlAlchemyQueryEngine(engine=engine).close()

        engine.dispose.assert_awaited_once()
