"""SQLAlchemy adapter package for notegraph."""

from __future__ import annotations

from .mappings import create_all_tables, documents_table, metadata
from .store import SqlAlchemyDocumentStore
from .unit_of_work import (
    SqlAlchemyUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyDocumentStore",
    "SqlAlchemyUnitOfWork",
    "StartupError",
    "configured_engine",
    "create_all_tables",
    "documents_table",
    "is_started",
    "metadata",
    "shutdown",
    "startup",
]
