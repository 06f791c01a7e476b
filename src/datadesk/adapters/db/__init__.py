"""Database adapters."""

from .engine import SqlAlchemyQueryEngine
from .mock import MockQueryEngine, MockResult

__all__ = ["MockQueryEngine", "MockResult", "SqlAlchemyQueryEngine"]
