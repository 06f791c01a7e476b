"""Domain types - immutable containers passed between core and adapters.

Result sets are dataclasses because they carry a live async iterator;
everything that crosses the HTTP boundary is a frozen Pydantic model.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict


@dataclass(frozen=True)
class ResultSet:
    """Column names plus a forward-only row cursor.

    The row iterator is lazy and non-restartable; it belongs to a single
    request and is released when the engine's context manager exits.

    Attributes:
        columns: Ordered column names, fixed for the whole result set.
        rows: Async iterator yielding one row (ordered values) at a time.
    """

    columns: tuple[str, ...]
    rows: AsyncIterator[Sequence[Any]]


@dataclass(frozen=True)
class ColumnInfo:
    """A column of an inspected table.

    Attributes:
        column_name: Column name.
        data_type: Database type rendered as text.
    """

    column_name: str
    data_type: str


class ExportResult(BaseModel):
    """Outcome of a successful export.

    Attributes:
        artifact_id: Opaque name of the written CSV artifact.
        row_count: Number of data rows written (header excluded).
        recorded_at: Timestamp stored in the audit record.
    """

    model_config = ConfigDict(frozen=True)

    artifact_id: str
    row_count: int
    recorded_at: datetime


class PreviewTable(BaseModel):
    """First rows of a query result, for on-screen preview.

    Attributes:
        columns: Ordered column names.
        rows: Row values as returned by the database, bytes decoded.
        truncated: True if the result had more rows than were returned.
    """

    model_config = ConfigDict(frozen=True)

    columns: list[str]
    rows: list[list[Any]]
    truncated: bool = False
