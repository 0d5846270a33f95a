from __future__ import annotations

import os
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002

from notegraph.adapters.memory import InMemoryDocumentStore
from notegraph.adapters.sqlalchemy import SqlAlchemyDocumentStore, shutdown, startup

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    moment = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)
    return lambda: moment


@pytest.fixture
def memory_store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sql_store(sqlite_engine: Engine) -> Iterator[SqlAlchemyDocumentStore]:
    startup(engine=sqlite_engine, force=True)
    try:
        yield SqlAlchemyDocumentStore()
    finally:
        shutdown()
