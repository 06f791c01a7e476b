"""Tests for the admin log routes."""

from __future__ import annotations

from datetime import UTC, datetime
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from datadesk.models import AdminLog, User


@pytest.fixture
def admin_log(admin_user: User) -> AdminLog:
    """Return a stored admin log entry."""
    return AdminLog(
        id=uuid4(),
        admin_id=admin_user.id,
        action="POST",
        endpoint="/sql",
        created_at=datetime(2024, 5, 1, tzinfo=UTC),
    )


class TestAdminLogRoutes:
    """Tests for /admin-logs."""

    def test_every_call_is_logged(
        self,
        client: TestClient,
        auth_headers: dict[str, str],
        mock_admin_logs: AsyncMock,
        admin_user: User,
    ) -> None:
        """Test that the admin gate records the call itself."""
        mock_admin_logs.list.return_value = []

        client.get("/admin-logs", headers=auth_headers)

        mock_admin_logs.record.assert_awaited_once_with(
            admin_id=admin_user.id, action="GET", endpoint="/admin-logs"
        )

    def test_list(
        self,
        client: TestClient,
        auth_headers: dict[str, str],
        mock_admin_logs: AsyncMock,
        admin_log: AdminLog,
    ) -> None:
        """Test that entries are returned."""
        mock_admin_logs.list.return_value = [admin_log]

        response = client.get("/admin-logs", headers=auth_headers)

        assert response.status_code == 200
        (item,) = response.json()
        assert item["endpoint"] == "/sql"

    def test_get_missing(
        self,
        client: TestClient,
        auth_headers: dict[str, str],
        mock_admin_logs: AsyncMock,
    ) -> None:
        """Test that unknown IDs return 404."""
        mock_admin_logs.get.return_value = None

        response = client.get(f"/admin-logs/{uuid4()}", headers=auth_headers)

        assert response.status_code == 404

    def test_update(
        self,
        client: TestClient,
        auth_headers: dict[str, str],
        mock_admin_logs: AsyncMock,
        admin_log: AdminLog,
    ) -> None:
        """Test that only sent fields are updated."""
        admin_log.endpoint = "/sql/preview"
        mock_admin_logs.update.return_value = admin_log

        response = client.put(
            f"/admin-logs/{admin_log.id}",
            json={"endpoint": "/sql/preview"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json()["endpoint"] == "/sql/preview"
        mock_admin_logs.update.assert_awaited_once_with(
            admin_log.id, {"endpoint": "/sql/preview"}
        )

    def test_delete_missing(
        self,
        client: TestClient,
        auth_headers: dict[str, str],
        mock_admin_logs: AsyncMock,
    ) -> None:
        """Test that deleting an unknown entry returns 404."""
        mock_admin_logs.delete.return_value = False

        response = client.delete(f"/admin-logs/{uuid4()}", headers=auth_headers)

        assert response.status_code == 404
