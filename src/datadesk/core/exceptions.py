"""Domain-specific exceptions.

All exceptions in the datadesk system inherit from DatadeskError,
making it easy to catch all system errors while still being able
to handle specific error types.
"""

from __future__ import annotations


class DatadeskError(Exception):
    """Base exception for all datadesk errors.

    All custom exceptions in the system should inherit from this class
    to enable catching all datadesk-specific errors with a single except clause.
    """

    pass


class ForbiddenStatementError(DatadeskError):
    """Query text was rejected by the safety classifier.

    Raised before anything touches the database. The caller is expected
    to correct the query; nothing has been executed or persisted.
    """

    pass


class QueryExecutionError(DatadeskError):
    """The database rejected or failed the query.

    The message is the engine's own error text and is surfaced to the
    caller verbatim. Raised both when the statement fails to execute
    and when fetching rows from the cursor fails mid-stream.
    """

    pass


class ArtifactWriteError(DatadeskError):
    """Storage I/O failed while writing a CSV artifact.

    The partial artifact has already been discarded by the time this
    propagates, and no history has been recorded.
    """

    pass


class HistoryPersistError(DatadeskError):
    """The audit record for a completed export could not be written.

    This is a partial failure: the artifact was fully written and is
    retrievable under ``artifact_id``.

    Attributes:
        artifact_id: Identifier of the artifact that was exported.
    """

    def __init__(self, message: str, artifact_id: str) -> None:
        """Initialize HistoryPersistError.

        Args:
            message: Error description.
            artifact_id: Identifier of the already-written artifact.
        """
        super().__init__(message)
        self.artifact_id = artifact_id


class ArtifactNotFoundError(DatadeskError):
    """No artifact exists for the requested identifier.

    Raised for unknown identifiers, deleted artifacts and identifiers
    that are not well-formed artifact names.
    """

    pass
