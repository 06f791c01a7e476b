"""Export pipeline - classify, execute, stream to CSV, record history.

Flow for one request:
    Received -> Classified -> Executing -> Streaming -> Written
    -> HistoryRecording -> Done

A failure at any step ends the request; nothing is retried. The audit
record is only written once the artifact has been completely written,
and a partially written artifact is always deleted.
"""

from __future__ import annotations

import csv
import io
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any, BinaryIO

import structlog

from datadesk.core.domain_types import ExportResult, PreviewTable, ResultSet
from datadesk.core.exceptions import (
    ArtifactNotFoundError,
    ArtifactWriteError,
    ForbiddenStatementError,
    HistoryPersistError,
)
from datadesk.core.interfaces import ArtifactStorage, HistoryStore, QueryEngine
from datadesk.core.naming import (
    ARTIFACT_NAME_LENGTH,
    generate_artifact_name,
    is_valid_artifact_name,
)
from datadesk.safety import is_select_only

logger = structlog.get_logger()

FORBIDDEN_MESSAGE = "Only SELECT statements are allowed"
MAX_NAME_ATTEMPTS = 5
DEFAULT_PREVIEW_MAX_ROWS = 1000


def stringify_value(value: Any) -> str:
    """Render a database value as a CSV field.

    None becomes an empty field, raw bytes are decoded as UTF-8 and
    everything else uses its ``str()`` form.
    """
    if value is None:
        return ""
    if isinstance(value, bytes | bytearray | memoryview):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)


def preview_value(value: Any) -> Any:
    """Return a database value for the JSON preview.

    Raw bytes are decoded as UTF-8; None and every other value are kept
    as they are, for the HTTP layer to encode.
    """
    if isinstance(value, bytes | bytearray | memoryview):
        return bytes(value).decode("utf-8", errors="replace")
    return value


def _utcnow() -> datetime:
    return datetime.now(UTC)


class ExportPipeline:
    """Turns read-only SQL into a downloadable CSV artifact.

    Collaborators are passed in so the pipeline can run against fakes.
    """

    def __init__(
        self,
        engine: QueryEngine,
        storage: ArtifactStorage,
        history: HistoryStore,
        name_length: int = ARTIFACT_NAME_LENGTH,
        preview_max_rows: int = DEFAULT_PREVIEW_MAX_ROWS,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """Initialize the pipeline.

        Args:
            engine: Database the queries run against.
            storage: Where CSV artifacts are written.
            history: Audit trail for successful exports.
            name_length: Length of generated artifact names.
            preview_max_rows: Row cap for previews.
            clock: Source of audit timestamps.
        """
        self._engine = engine
        self._storage = storage
        self._history = history
        self._name_length = name_length
        self._preview_max_rows = preview_max_rows
        self._clock = clock

    async def submit(self, sql: str) -> ExportResult:
        """Export the result of ``sql`` as a CSV artifact.

        Args:
            sql: Query text supplied by the caller.

        Returns:
            ExportResult with the artifact identifier.

        Raises:
            ForbiddenStatementError: If the classifier rejects the query.
            QueryExecutionError: If the database fails the query.
            ArtifactWriteError: If the artifact could not be written.
            HistoryPersistError: If the audit record failed; the artifact
                is still retrievable under ``exc.artifact_id``.
        """
        if not is_select_only(sql):
            logger.warning("sql_export_forbidden", sql_length=len(sql))
            raise ForbiddenStatementError(FORBIDDEN_MESSAGE)

        async with self._engine.execute_read(sql) as result:
            name = self._allocate_name()
            row_count = await self._write_artifact(name, result)

        recorded_at = self._clock()
        try:
            await self._history.append(sql, recorded_at)
        except Exception as e:
            logger.error(
                "request_history_persist_failed",
                artifact_id=name,
                error=str(e),
            )
            raise HistoryPersistError(
                "Failed to save request history", artifact_id=name
            ) from e

        logger.info(
            "sql_export_completed",
            artifact_id=name,
            row_count=row_count,
            column_count=len(result.columns),
        )
        return ExportResult(artifact_id=name, row_count=row_count, recorded_at=recorded_at)

    def fetch(self, artifact_id: str) -> BinaryIO:
        """Open a previously exported artifact.

        Args:
            artifact_id: Identifier returned by submit.

        Returns:
            Readable byte stream; the caller closes it.

        Raises:
            ArtifactNotFoundError: If the identifier is malformed or unknown.
        """
        if not is_valid_artifact_name(artifact_id):
            raise ArtifactNotFoundError("File not found")
        return self._storage.open(artifact_id)

    async def preview(self, sql: str, max_rows: int | None = None) -> PreviewTable:
        """Run ``sql`` and return its first rows without writing anything.

        Args:
            sql: Query text supplied by the caller.
            max_rows: Row cap; defaults to the pipeline's preview limit.

        Returns:
            PreviewTable with at most ``max_rows`` rows.

        Raises:
            ForbiddenStatementError: If the classifier rejects the query.
            QueryExecutionError: If the database fails the query.
        """
        if not is_select_only(sql):
            logger.warning("sql_preview_forbidden", sql_length=len(sql))
            raise ForbiddenStatementError(FORBIDDEN_MESSAGE)

        limit = max_rows if max_rows is not None else self._preview_max_rows
        rows: list[list[str]] = []
        truncated = False

        async with self._engine.execute_read(sql) as result:
            async for row in result.rows:
                if len(rows) >= limit:
                    truncated = True
                    break
                rows.append([preview_value(value) for value in row])

        return PreviewTable(columns=list(result.columns), rows=rows, truncated=truncated)

    def _allocate_name(self) -> str:
        for _ in range(MAX_NAME_ATTEMPTS):
            name = generate_artifact_name(self._name_length)
            if not self._storage.exists(name):
                return name
        raise ArtifactWriteError("Could not allocate a unique artifact name")

    async def _write_artifact(self, name: str, result: ResultSet) -> int:
        """Stream the result set into a new artifact, row by row.

        The artifact is deleted unless every row was written and the
        sink closed cleanly, including on cancellation.
        """
        try:
            sink = self._storage.create(name)
        except OSError as e:
            raise ArtifactWriteError(f"Failed to create artifact: {e}") from e

        row_count = 0
        completed = False
        try:
            with io.TextIOWrapper(sink, encoding="utf-8", newline="") as text:
                writer = csv.writer(text, lineterminator="\n")
                writer.writerow(result.columns)
                async for row in result.rows:
                    writer.writerow([stringify_value(value) for value in row])
                    row_count += 1
            completed = True
        except OSError as e:
            raise ArtifactWriteError(f"Failed to write artifact: {e}") from e
        finally:
            if not completed:
                self._discard(name)

        return row_count

    def _discard(self, name: str) -> None:
        try:
            self._storage.delete(name)
        except OSError as e:
            logger.error("artifact_discard_failed", artifact_id=name, error=str(e))
        else:
            logger.info("partial_artifact_discarded", artifact_id=name)
