"""Tests for the SQL export, preview and download routes."""

from __future__ import annotations

import csv
import io
from datetime import datetime
from decimal import Decimal

from fastapi.testclient import TestClient

from datadesk.adapters.db.mock import MockQueryEngine, MockResult
from datadesk.adapters.storage.memory import InMemoryArtifactStorage
from datadesk.core.naming import is_valid_artifact_name
from tests.fixtures.mocks import RecordingHistoryStore


class TestExport:
    """Tests for POST /sql."""

    def test_export_returns_identifier(
        self,
        client: TestClient,
        auth_headers: dict[str, str],
        memory_storage: InMemoryArtifactStorage,
        history_store: RecordingHistoryStore,
    ) -> None:
        """Test that a SELECT produces an artifact and an audit record."""
        response = client.post(
            "/sql", json={"sql": "SELECT * FROM students"}, headers=auth_headers
        )

        assert response.status_code == 200
        body = response.json()
        assert set(body) == {"csv_id"}
        assert is_valid_artifact_name(body["csv_id"])
        assert body["csv_id"] in memory_storage.artifacts
        assert [query for query, _ in history_store.records] == ["SELECT * FROM students"]

    def test_requires_token(self, client: TestClient) -> None:
        """Test that anonymous exports are refused."""
        response = client.post("/sql", json={"sql": "SELECT 1"})

        assert response.status_code == 401

    def test_forbidden_statement(
        self,
        client: TestClient,
        auth_headers: dict[str, str],
        memory_storage: InMemoryArtifactStorage,
    ) -> None:
        """Test that non-SELECT statements are refused with 403."""
        response = client.post(
            "/sql", json={"sql": "DELETE FROM students"}, headers=auth_headers
        )

        assert response.status_code == 403
        assert response.json()["detail"] == "Only SELECT statements are allowed"
        assert memory_storage.artifacts == {}

    def test_history_failure_returns_warning(
        self,
        client: TestClient,
        auth_headers: dict[str, str],
        history_store: RecordingHistoryStore,
        memory_storage: InMemoryArtifactStorage,
    ) -> None:
        """Test that the artifact id survives a failed audit write."""
        history_store.error = RuntimeError("history table locked")

        response = client.post(
            "/sql", json={"sql": "SELECT * FROM students"}, headers=auth_headers
        )

        assert response.status_code == 200
        body = response.json()
        assert body["csv_id"] in memory_storage.artifacts
        assert body["warning"]

    def test_empty_sql_is_rejected(self, client: TestClient, auth_headers: dict[str, str]) -> None:
        """Test request validation."""
        response = client.post("/sql", json={"sql": ""}, headers=auth_headers)

        assert response.status_code == 422


class TestDownload:
    """Tests for GET /sql/{name}."""

    def test_download_round_trip(self, client: TestClient, auth_headers: dict[str, str]) -> None:
        """Test that an exported artifact downloads as CSV."""
        csv_id = client.post(
            "/sql", json={"sql": "SELECT * FROM students"}, headers=auth_headers
        ).json()["csv_id"]

        response = client.get(f"/sql/{csv_id}")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert (
            response.headers["content-disposition"] == f'attachment; filename="req-{csv_id}.csv"'
        )
        rows = list(csv.reader(io.StringIO(response.text)))
        assert rows[0] == ["id", "name", "gpa"]
        assert rows[3] == ["3", "Budi, Jr.", ""]

    def test_unknown_artifact(self, client: TestClient) -> None:
        """Test that unknown identifiers return 404."""
        response = client.get("/sql/AAAAAAAAAAAAAAAA")

        assert response.status_code == 404
        assert response.json()["detail"] == "File not found"


class TestPreview:
    """Tests for POST /sql/preview."""

    def test_preview_table(self, client: TestClient, auth_headers: dict[str, str]) -> None:
        """Test that the header row comes first."""
        response = client.post(
            "/sql/preview", json={"sql": "SELECT * FROM students"}, headers=auth_headers
        )

        assert response.status_code == 200
        body = response.json()
        assert body["table"][0] == ["id", "name", "gpa"]
        assert body["table"][1] == [1, "Ana", 3.5]
        assert body["table"][2] == [2, None, 3.9]
        assert body["truncated"] is False

    def test_preview_cells_keep_json_types(
        self,
        client: TestClient,
        auth_headers: dict[str, str],
        mock_query_engine: MockQueryEngine,
    ) -> None:
        """Test that decimals, booleans, timestamps and bytes are encoded natively."""
        mock_query_engine.responses["FROM payments"] = MockResult(
            columns=["amount", "paid", "at", "note", "refund"],
            rows=[(Decimal("12.50"), True, datetime(2024, 1, 2, 3, 4, 5), b"ok", None)],
        )

        response = client.post(
            "/sql/preview", json={"sql": "SELECT * FROM payments"}, headers=auth_headers
        )

        assert response.status_code == 200
        assert response.json()["table"][1] == [12.5, True, "2024-01-02T03:04:05", "ok", None]

    def test_preview_forbidden(self, client: TestClient, auth_headers: dict[str, str]) -> None:
        """Test that preview applies the same classifier."""
        response = client.post(
            "/sql/preview", json={"sql": "UPDATE students SET gpa = 4"}, headers=auth_headers
        )

        assert response.status_code == 403
