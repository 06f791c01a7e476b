"""In-memory artifact storage for tests and development."""

from __future__ import annotations

import io
from typing import BinaryIO

from datadesk.core.exceptions import ArtifactNotFoundError


class _CommittingBuffer(io.BytesIO):
    """BytesIO that hands its contents to the store when closed."""

    def __init__(self, store: InMemoryArtifactStorage, name: str) -> None:
        super().__init__()
        self._store = store
        self._name = name

    def close(self) -> None:
        if not self.closed:
            self._store._commit(self._name, self.getvalue())
        super().close()


class InMemoryArtifactStorage:
    """Keeps artifacts in a dict.

    An artifact becomes visible to ``open`` once its sink is closed.
    ``fail_after_bytes`` makes writes raise OSError once that many bytes
    have been written, to simulate a full disk.
    """

    def __init__(self, fail_after_bytes: int | None = None) -> None:
        """Initialize an empty store."""
        self.artifacts: dict[str, bytes] = {}
        self._pending: set[str] = set()
        self._fail_after_bytes = fail_after_bytes

    def create(self, name: str) -> BinaryIO:
        """Return a writable buffer for ``name``."""
        if name in self.artifacts or name in self._pending:
            raise FileExistsError(name)
        self._pending.add(name)
        if self._fail_after_bytes is not None:
            return _FailingBuffer(self, name, self._fail_after_bytes)
        return _CommittingBuffer(self, name)

    def open(self, name: str) -> BinaryIO:
        """Return a fresh reader over the stored bytes."""
        try:
            return io.BytesIO(self.artifacts[name])
        except KeyError:
            raise ArtifactNotFoundError("File not found") from None

    def delete(self, name: str) -> None:
        """Forget ``name``."""
        self.artifacts.pop(name, None)
        self._pending.discard(name)

    def exists(self, name: str) -> bool:
        """Return True if ``name`` is stored or being written."""
        return name in self.artifacts or name in self._pending

    def _commit(self, name: str, data: bytes) -> None:
        if name in self._pending:
            self._pending.discard(name)
            self.artifacts[name] = data


class _FailingBuffer(_CommittingBuffer):
    def __init__(self, store: InMemoryArtifactStorage, name: str, limit: int) -> None:
        super().__init__(store, name)
        self._limit = limit

    def write(self, data: bytes) -> int:  # type: ignore[override]
        if self.tell() + len(data) > self._limit:
            raise OSError(28, "No space left on device")
        return super().write(data)
