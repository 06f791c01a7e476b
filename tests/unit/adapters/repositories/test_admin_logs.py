"""Unit tests for AdminLogRepository."""

from __future__ import annotations

from unittest.mock import MagicMock
from uuid import uuid4

import pytest

from datadesk.adapters.repositories.admin_logs import AdminLogRepository
from datadesk.models import AdminLog


class TestAdminLogRepository:
    """Tests for AdminLogRepository."""

    @pytest.fixture
    def repository(self, mock_sessionmaker: MagicMock) -> AdminLogRepository:
        """Create repository with a mock session factory."""
        return AdminLogRepository(mock_sessionmaker)

    async def test_record(self, repository: AdminLogRepository, mock_session: MagicMock) -> None:
        """Test that record stores method and path."""
        admin_id = uuid4()

        entry = await repository.record(admin_id, "POST", "/sql")

        assert entry.admin_id == admin_id
        assert entry.action == "POST"
        assert entry.endpoint == "/sql"
        mock_session.commit.assert_awaited_once()

    async def test_get_missing(
        self, repository: AdminLogRepository, mock_session: MagicMock
    ) -> None:
        """Test that a missing entry returns None."""
        mock_session.get.return_value = None

        assert await repository.get(uuid4()) is None

    async def test_delete_missing(
        self, repository: AdminLogRepository, mock_session: MagicMock
    ) -> None:
        """Test that deleting a missing entry returns False."""
        mock_session.get.return_value = None

        assert await repository.delete(uuid4()) is False
        mock_session.delete.assert_not_awaited()

    async def test_update(self, repository: AdminLogRepository, mock_session: MagicMock) -> None:
        """Test that update changes the endpoint."""
        entry = AdminLog(id=uuid4(), admin_id=uuid4(), action="GET", endpoint="/old")
        mock_session.get.return_value = entry

        updated = await repository.update(entry.id, {"endpoint": "/new"})

        assert updated is entry
        assert entry.endpoint == "/new"
        mock_session.refresh.assert_awaited_once_with(entry)
