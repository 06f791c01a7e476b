"""Tests for the request history route."""

from __future__ import annotations

from datetime import UTC, datetime
from unittest.mock import AsyncMock
from uuid import uuid4

from fastapi.testclient import TestClient

from datadesk.models import RequestHistory


class TestRequestHistory:
    """Tests for GET /request-history."""

    def test_list_with_window(
        self,
        client: TestClient,
        auth_headers: dict[str, str],
        mock_history_repo: AsyncMock,
    ) -> None:
        """Test that the date window reaches the repository."""
        mock_history_repo.list.return_value = [
            RequestHistory(
                id=uuid4(), sql="SELECT 1", date=datetime(2024, 3, 2, 8, tzinfo=UTC)
            )
        ]

        response = client.get(
            "/request-history",
            params={"start_date": "2024-03-01", "end_date": "2024-03-31T23:59:59Z"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        (item,) = response.json()
        assert item["sql"] == "SELECT 1"
        mock_history_repo.list.assert_awaited_once_with(
            start=datetime(2024, 3, 1, tzinfo=UTC),
            end=datetime(2024, 3, 31, 23, 59, 59, tzinfo=UTC),
        )

    def test_invalid_date(self, client: TestClient, auth_headers: dict[str, str]) -> None:
        """Test that malformed dates return 400."""
        response = client.get(
            "/request-history", params={"start_date": "yesterday"}, headers=auth_headers
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "invalid start_date format"

    def test_requires_admin(self, client: TestClient) -> None:
        """Test that history is not public."""
        assert client.get("/request-history").status_code == 401
