"""Local filesystem storage for CSV artifacts."""

from __future__ import annotations

from pathlib import Path
from typing import BinaryIO

import structlog

from datadesk.core.exceptions import ArtifactNotFoundError

logger = structlog.get_logger()


class LocalArtifactStorage:
    """Stores each artifact as ``req-<name>.csv`` under a root directory.

    Attributes:
        root: Directory holding the artifacts.
    """

    def __init__(self, root: str | Path) -> None:
        """Initialize the storage, creating the root directory if needed.

        Args:
            root: Directory for artifacts (e.g. ``uploads``).
        """
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def path_for(self, name: str) -> Path:
        """Return the file path used for ``name``."""
        return self.root / f"req-{name}.csv"

    def create(self, name: str) -> BinaryIO:
        """Create the artifact file, failing if it already exists."""
        return self.path_for(name).open("xb")

    def open(self, name: str) -> BinaryIO:
        """Open an artifact for reading.

        Raises:
            ArtifactNotFoundError: If the file does not exist.
        """
        try:
            return self.path_for(name).open("rb")
        except FileNotFoundError:
            raise ArtifactNotFoundError("File not found") from None

    def delete(self, name: str) -> None:
        """Remove an artifact; missing files are ignored."""
        self.path_for(name).unlink(missing_ok=True)
        logger.debug("artifact_deleted", artifact_id=name)

    def exists(self, name: str) -> bool:
        """Return True if the artifact file exists."""
        return self.path_for(name).is_file()
