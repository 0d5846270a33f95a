"""Where notegraph keeps its SQLite files."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from .env import env_flag

APP_DIR_NAME = "notegraph"
DOCUMENT_DB_FILENAME = "notegraph.db"
HTTP_CACHE_FILENAME = "http_cache.db"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    """Data directory holding the document database and the Messages API cache."""

    data_dir: Path

    def file_path(self, filename: str, *, ensure: bool = True) -> Path:
        directory = self.data_dir.expanduser().resolve()
        if ensure:
            directory.mkdir(parents=True, exist_ok=True)
        return directory / filename

    def http_cache_path(self, *, ensure: bool = True) -> Path:
        return self.file_path(HTTP_CACHE_FILENAME, ensure=ensure)

    def document_database_uri(self) -> str:
        return f"sqlite+pysqlite:///{self.file_path(DOCUMENT_DB_FILENAME)}"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str
    echo: bool = False


def _platform_data_home() -> Path:
    if os.name == "nt":
        local = os.getenv("LOCALAPPDATA")
        return Path(local) if local else Path.home() / "AppData" / "Local"
    xdg = os.getenv("XDG_DATA_HOME")
    return Path(xdg) if xdg else Path.home() / ".local" / "share"


def get_storage_config() -> StorageConfig:
    override = (os.getenv("NOTEGRAPH_DATA_DIR") or "").strip()
    data_dir = Path(override) if override else _platform_data_home() / APP_DIR_NAME
    return StorageConfig(data_dir=data_dir)


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    """``DATABASE_URI`` wins; otherwise the document database lives in the data dir."""

    echo = env_flag("NOTEGRAPH_SQL_ECHO", default=False)
    uri = (os.getenv("DATABASE_URI") or "").strip()
    if uri:
        return DatabaseConfig(uri=uri, echo=echo)
    return DatabaseConfig(uri=(storage or get_storage_config()).document_database_uri(), echo=echo)
