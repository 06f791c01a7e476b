"""Artifact storage adapters."""

from .local import LocalArtifactStorage
from .memory import InMemoryArtifactStorage

__all__ = ["InMemoryArtifactStorage", "LocalArtifactStorage"]
