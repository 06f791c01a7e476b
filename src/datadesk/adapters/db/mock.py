"""Mock query engine for testing."""

from __future__ import annotations

from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any

from datadesk.core.domain_types import ColumnInfo, ResultSet
from datadesk.core.exceptions import QueryExecutionError


@dataclass
class MockResult:
    """Canned response for a query pattern.

    Any Exception instance placed in ``rows`` is raised when iteration
    reaches it, which simulates a failure in the middle of a stream.
    """

    columns: list[str]
    rows: list[Sequence[Any] | Exception] = field(default_factory=list)
    error: Exception | None = None


class MockQueryEngine:
    """Mock engine that returns canned results.

    This engine is useful for:
    - Unit testing the export pipeline without a database
    - Development without database setup

    Attributes:
        responses: Map of query substrings to results.
        tables: Map of table names to their columns.
        executed_queries: Log of all executed queries.
        open_results: Number of result sets not yet released.
    """

    def __init__(
        self,
        responses: dict[str, MockResult] | None = None,
        tables: dict[str, list[ColumnInfo]] | None = None,
    ) -> None:
        """Initialize the mock engine.

        Args:
            responses: Map of query substrings to results.
            tables: Columns returned by describe_table.
        """
        self.responses = responses or {}
        self.tables = tables or {}
        self.executed_queries: list[str] = []
        self.open_results = 0

    @asynccontextmanager
    async def execute_read(self, sql: str) -> AsyncIterator[ResultSet]:
        """Execute a mock query.

        Matches the SQL against registered substrings (case-insensitive)
        and yields the first match, or an empty result.
        """
        self.executed_queries.append(sql)
        response = self._match(sql)
        if response.error is not None:
            raise response.error

        self.open_results += 1
        try:
            yield ResultSet(columns=tuple(response.columns), rows=_iterate(response.rows))
        finally:
            self.open_results -= 1

    async def describe_table(self, table: str) -> list[ColumnInfo]:
        """Return the registered columns for ``table``."""
        try:
            return list(self.tables[table])
        except KeyError:
            raise QueryExecutionError(f"Table not found: {table}") from None

    async def close(self) -> None:
        """No-op for mock engine."""
        pass

    def _match(self, sql: str) -> MockResult:
        for pattern, response in self.responses.items():
            if pattern.lower() in sql.lower():
                return response
        return MockResult(columns=[])


async def _iterate(rows: list[Sequence[Any] | Exception]) -> AsyncIterator[Sequence[Any]]:
    for row in rows:
        if isinstance(row, Exception):
            raise row
        yield row
