"""Protocol definitions for the collaborators of the export pipeline.

The core only depends on these protocols, never on concrete
implementations, so it can be exercised with in-memory fakes.
"""

from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from datetime import datetime
from typing import TYPE_CHECKING, BinaryIO, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .domain_types import ResultSet


@runtime_checkable
class QueryEngine(Protocol):
    """Interface for the database that user queries run against.

    Implementations must stream rows lazily and release the underlying
    cursor and connection when the returned context manager exits,
    whatever the exit path.
    """

    def execute_read(self, sql: str) -> AbstractAsyncContextManager[ResultSet]:
        """Execute a query and expose its result set.

        Args:
            sql: The query text, passed to the database verbatim.

        Returns:
            Async context manager yielding the ResultSet.

        Raises:
            QueryExecutionError: If the database rejects or fails the query.
        """
        ...


@runtime_checkable
class ArtifactStorage(Protocol):
    """Interface for where CSV artifacts live."""

    def create(self, name: str) -> BinaryIO:
        """Open a new writable byte sink for ``name``."""
        ...

    def open(self, name: str) -> BinaryIO:
        """Open the stored bytes for ``name``.

        Raises:
            ArtifactNotFoundError: If no artifact has that name.
        """
        ...

    def delete(self, name: str) -> None:
        """Remove ``name``; a missing artifact is not an error."""
        ...

    def exists(self, name: str) -> bool:
        """Return True if an artifact called ``name`` is stored."""
        ...


@runtime_checkable
class HistoryStore(Protocol):
    """Interface for the audit trail of executed exports."""

    async def append(self, query: str, timestamp: datetime) -> None:
        """Persist one audit record.

        Raises:
            Exception: Any persistence failure; the pipeline wraps it.
        """
        ...
