"""Unit tests for the simple request query builder."""

from __future__ import annotations

import pytest

from datadesk.core.query_builder import build_simple_query


class TestBuildSimpleQuery:
    """Tests for build_simple_query."""

    def test_select_only(self) -> None:
        """Test a bare column list."""
        assert build_simple_query("students", ["id", "name"]) == "SELECT id, name FROM students"

    def test_all_clauses(self) -> None:
        """Test WHERE, ORDER BY and LIMIT together."""
        query = build_simple_query(
            "students",
            ["id", "name", "year"],
            where=["year > 2020", "department = 'CS'"],
            order_by=["year DESC", "name ASC"],
            limit=100,
        )
        assert query == (
            "SELECT id, name, year FROM students"
            " WHERE year > 2020 AND department = 'CS'"
            " ORDER BY year DESC, name ASC LIMIT 100"
        )

    def test_zero_limit_is_ignored(self) -> None:
        """Test that a zero limit adds no LIMIT clause."""
        assert "LIMIT" not in build_simple_query("students", ["id"], limit=0)

    def test_requires_columns(self) -> None:
        """Test that an empty column list raises."""
        with pytest.raises(ValueError):
            build_simple_query("students", [])
