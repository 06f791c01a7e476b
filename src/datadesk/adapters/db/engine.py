"""SQLAlchemy-backed query engine for user supplied SQL.

Queries are streamed with a server-side cursor so large exports never
hold the whole result set in memory.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from typing import Any

import structlog
from sqlalchemy import inspect, text
from sqlalchemy.exc import DBAPIError, NoSuchTableError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncResult, create_async_engine

from datadesk.core.domain_types import ColumnInfo, ResultSet
from datadesk.core.exceptions import QueryExecutionError

logger = structlog.get_logger()

_DRIVER_PREFIXES = {
    "postgres://": "postgresql+asyncpg://",
    "postgresql://": "postgresql+asyncpg://",
}


def to_async_dsn(dsn: str) -> str:
    """Point a plain ``postgresql://`` URL at the asyncpg driver.

    URLs that already name a driver are returned unchanged.
    """
    for prefix, replacement in _DRIVER_PREFIXES.items():
        if dsn.startswith(prefix):
            return replacement + dsn[len(prefix) :]
    return dsn


def escape_bind_markers(sql: str) -> str:
    """Escape colons so ``text()`` does not read ``:name`` as a parameter."""
    return sql.replace(":", r"\:")


def driver_message(error: SQLAlchemyError) -> str:
    """Return the database's own error text when there is one."""
    if isinstance(error, DBAPIError) and error.orig is not None:
        return str(error.orig)
    return str(error)


class SqlAlchemyQueryEngine:
    """Runs read queries against the data database.

    Attributes:
        engine: The underlying async engine.
    """

    def __init__(self, dsn: str | None = None, engine: AsyncEngine | None = None) -> None:
        """Initialize from a DSN or an existing engine.

        Args:
            dsn: Database URL; ``postgresql://`` is mapped to asyncpg.
            engine: Pre-built engine, mainly for tests.
        """
        if engine is None:
            if not dsn:
                raise ValueError("Either dsn or engine is required")
            engine = create_async_engine(to_async_dsn(dsn), pool_pre_ping=True)
        self.engine = engine

    @asynccontextmanager
    async def execute_read(self, sql: str) -> AsyncIterator[ResultSet]:
        """Execute ``sql`` and yield a lazily streamed result set.

        The cursor and connection are released when the block exits,
        whether it finished, raised or was cancelled.

        Raises:
            QueryExecutionError: If the database rejects the query or
                fails while rows are being fetched.
        """
        try:
            conn = await self.engine.connect()
        except SQLAlchemyError as e:
            logger.error("query_connection_failed", error=driver_message(e))
            raise QueryExecutionError(driver_message(e)) from e

        try:
            try:
                result = await conn.stream(text(escape_bind_markers(sql)))
            except SQLAlchemyError as e:
                message = driver_message(e)
                logger.warning("query_execution_failed", error=message, sql_prefix=sql[:80])
                raise QueryExecutionError(message) from e

            rows = _stream_rows(result)
            try:
                yield ResultSet(columns=tuple(result.keys()), rows=rows)
            finally:
                await rows.aclose()
                await result.close()
        finally:
            await conn.close()

    async def describe_table(self, table: str) -> list[ColumnInfo]:
        """List the columns of ``table`` in ordinal order.

        Args:
            table: Table name, optionally ``schema.table``.

        Raises:
            QueryExecutionError: If the table does not exist or cannot be read.
        """
        schema, _, name = table.rpartition(".")

        def _columns(sync_conn: Any) -> list[dict[str, Any]]:
            return inspect(sync_conn).get_columns(name, schema=schema or None)

        try:
            async with self.engine.connect() as conn:
                columns = await conn.run_sync(_columns)
        except NoSuchTableError:
            raise QueryExecutionError(f"Table not found: {table}") from None
        except SQLAlchemyError as e:
            raise QueryExecutionError(driver_message(e)) from e

        return [ColumnInfo(column_name=c["name"], data_type=str(c["type"])) for c in columns]

    async def close(self) -> None:
        """Dispose of the connection pool."""
        await self.engine.dispose()


async def _stream_rows(result: AsyncResult) -> AsyncIterator[Sequence[Any]]:
    try:
        async for row in result:
            yield tuple(row)
    except SQLAlchemyError as e:
        message = driver_message(e)
        logger.warning("query_stream_failed", error=message)
        raise QueryExecutionError(message) from e
