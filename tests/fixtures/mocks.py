"""Mock objects for testing."""

from __future__ import annotations

from datetime import datetime
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from datadesk.adapters.db.mock import MockQueryEngine, MockResult
from datadesk.adapters.storage.memory import InMemoryArtifactStorage
from datadesk.core.domain_types import ColumnInfo
from datadesk.core.export import ExportPipeline


class RecordingHistoryStore:
    """History store that keeps records in a list.

    ``error`` is raised from append when set. ``on_append`` runs before
    the record is stored, so tests can inspect state at that moment.
    """

    def __init__(self) -> None:
        self.records: list[tuple[str, datetime]] = []
        self.error: Exception | None = None
        self.on_append: Any = None

    async def append(self, query: str, timestamp: datetime) -> None:
        if self.on_append is not None:
            self.on_append(query, timestamp)
        if self.error is not None:
            raise self.error
        self.records.append((query, timestamp))


@pytest.fixture
def mock_query_engine() -> MockQueryEngine:
    """Return a mock engine with a small students table."""
    responses = {
        "FROM students": MockResult(
            columns=["id", "name", "gpa"],
            rows=[(1, "Ana", 3.5), (2, None, 3.9), (3, "Budi, Jr.", None)],
        ),
        "FROM empty_table": MockResult(columns=["id", "name"], rows=[]),
    }
    tables = {
        "students": [
            ColumnInfo(column_name="id", data_type="integer"),
            ColumnInfo(column_name="name", data_type="character varying(255)"),
            ColumnInfo(column_name="gpa", data_type="numeric(3,2)"),
        ]
    }
    return MockQueryEngine(responses=responses, tables=tables)


@pytest.fixture
def memory_storage() -> InMemoryArtifactStorage:
    """Return an empty in-memory artifact store."""
    return InMemoryArtifactStorage()


@pytest.fixture
def history_store() -> RecordingHistoryStore:
    """Return a history store that records in memory."""
    return RecordingHistoryStore()


@pytest.fixture
def pipeline(
    mock_query_engine: MockQueryEngine,
    memory_storage: InMemoryArtifactStorage,
    history_store: RecordingHistoryStore,
) -> ExportPipeline:
    """Return a pipeline wired to in-memory collaborators."""
    return ExportPipeline(
        engine=mock_query_engine,
        storage=memory_storage,
        history=history_store,
    )


@pytest.fixture
def mock_session() -> MagicMock:
    """Return a mock AsyncSession."""
    session = MagicMock()
    session.add = MagicMock()
    session.commit = AsyncMock()
    session.refresh = AsyncMock()
    session.delete = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    return session


@pytest.fixture
def mock_sessionmaker(mock_session: MagicMock) -> MagicMock:
    """Return a session factory whose sessions are ``mock_session``."""
    factory = MagicMock()
    factory.return_value.__aenter__ = AsyncMock(return_value=mock_session)
    factory.return_value.__aexit__ = AsyncMock(return_value=None)
    return factory
