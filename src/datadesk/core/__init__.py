"""Core domain - export pipeline, naming, analytics and auth."""

from .domain_types import ColumnInfo, ExportResult, PreviewTable, ResultSet
from .exceptions import (
    ArtifactNotFoundError,
    ArtifactWriteError,
    DatadeskError,
    ForbiddenStatementError,
    HistoryPersistError,
    QueryExecutionError,
)
from .export import ExportPipeline
from .interfaces import ArtifactStorage, HistoryStore, QueryEngine

__all__ = [
    "ArtifactNotFoundError",
    "ArtifactStorage",
    "ArtifactWriteError",
    "ColumnInfo",
    "DatadeskError",
    "ExportPipeline",
    "ExportResult",
    "ForbiddenStatementError",
    "HistoryPersistError",
    "HistoryStore",
    "PreviewTable",
    "QueryEngine",
    "QueryExecutionError",
    "ResultSet",
]
