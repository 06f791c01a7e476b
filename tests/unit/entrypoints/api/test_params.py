"""Unit tests for query parameter parsing."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

import pytest
from fastapi import HTTPException

from datadesk.entrypoints.api.params import parse_date_param


class TestParseDateParam:
    """Tests for parse_date_param."""

    @pytest.mark.parametrize("value", [None, ""])
    def test_empty_is_none(self, value: str | None) -> None:
        """Test that absent values mean no bound."""
        assert parse_date_param(value, "start_date") is None

    def test_bare_date_is_utc_midnight(self) -> None:
        """Test the YYYY-MM-DD form."""
        assert parse_date_param("2024-03-01", "start_date") == datetime(2024, 3, 1, tzinfo=UTC)

    def test_rfc3339_keeps_offset(self) -> None:
        """Test that an explicit offset is preserved."""
        parsed = parse_date_param("2024-03-01T10:00:00+07:00", "end_date")

        assert parsed == datetime(2024, 3, 1, 10, tzinfo=timezone(timedelta(hours=7)))

    def test_invalid_value(self) -> None:
        """Test that garbage raises 400 naming the parameter."""
        with pytest.raises(HTTPException) as exc_info:
            parse_date_param("last tuesday", "end_date")

        assert exc_info.value.status_code == 400
        assert exc_info.value.detail == "invalid end_date format"
