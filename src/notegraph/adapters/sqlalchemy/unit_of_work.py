"""Engine lifecycle for the document store and the session scope it writes through.

``startup()`` must run once per process before a ``SqlAlchemyDocumentStore`` is used.
Tests call it with their own engine and ``force=True``; ``shutdown()`` disposes it.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Any, Literal

from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker

from notegraph.config.storage import get_database_config

from .mappings import create_all_tables

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine

log = getLogger(__name__)

# Notes ingested in parallel share one SQLite file; wait for the writer lock
# instead of failing with "database is locked".
SQLITE_BUSY_TIMEOUT_MS = 5000


class StartupError(RuntimeError):
    """The SQL adapter was used before ``startup()`` or configured twice."""


class _Registry:
    __slots__ = ("engine", "sessions")

    def __init__(self) -> None:
        self.engine: Engine | None = None
        self.sessions: sessionmaker[Session] | None = None

    def install(self, engine: Engine) -> None:
        self.engine = engine
        self.sessions = sessionmaker(bind=engine, expire_on_commit=False)

    def clear(self) -> None:
        if self.engine is not None:
            self.engine.dispose()
        self.engine = None
        self.sessions = None

    def session_factory(self) -> sessionmaker[Session]:
        if self.sessions is None:
            raise StartupError(
                "The document database is not initialised; call "
                "notegraph.adapters.sqlalchemy.startup() first."
            )
        return self.sessions


_REGISTRY = _Registry()


def _set_sqlite_busy_timeout(dbapi_connection: Any, connection_record: Any) -> None:
    _ = connection_record
    cursor = dbapi_connection.cursor()
    cursor.execute(f"PRAGMA busy_timeout={SQLITE_BUSY_TIMEOUT_MS}")
    cursor.close()


def _create_engine(database_uri: str | None) -> Engine:
    config = get_database_config()
    uri = database_uri or config.uri
    engine = create_engine(uri, echo=config.echo, future=True)
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _set_sqlite_busy_timeout)
    log.info("Opened document database %s", engine.url.render_as_string(hide_password=True))
    return engine


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Bind the adapter to an engine and make sure the ``documents`` table exists."""

    if _REGISTRY.engine is not None:
        if not force:
            raise StartupError("The document database is already initialised; pass force=True")
        _REGISTRY.clear()

    resolved = engine if engine is not None else _create_engine(database_uri)
    create_all_tables(resolved)
    _REGISTRY.install(resolved)


def configured_engine() -> Engine | None:
    return _REGISTRY.engine


def is_started() -> bool:
    return _REGISTRY.engine is not None


def shutdown() -> None:
    _REGISTRY.clear()


class SqlAlchemyUnitOfWork:
    """One session per ``with`` block; nothing is written unless ``commit()`` is called."""

    def __init__(self) -> None:
        self._factory = _REGISTRY.session_factory()
        self._session: Session | None = None

    def __enter__(self) -> SqlAlchemyUnitOfWork:
        if self._session is not None:
            raise StartupError("Unit of work is already open")
        self._session = self._factory()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        session, self._session = self.session, None
        try:
            if exc_type is not None:
                session.rollback()
        finally:
            session.close()
        return False

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work used outside its with block")
        return self._session

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()
