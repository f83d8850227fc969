"""Where mechdata keeps its database, HTTP cache, raw MUL store and run reports."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Final

APP_DIR_NAME: Final[str] = "mechdata"
DEFAULT_DB_FILENAME: Final[str] = "mechdata.db"
HTTP_CACHE_FILENAME: Final[str] = "http_cache.db"
MUL_RAW_DIRNAME: Final[str] = "mul"
REPORTS_DIRNAME: Final[str] = "reports"

DATA_DIR_ENV: Final[str] = "MECHDATA_DATA_DIR"
DATABASE_URI_ENV: Final[str] = "DATABASE_URI"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    """Layout below one data directory. Nothing is created until a path is requested
    with ``ensure=True`` or ``ensure_data_dir`` is called."""

    data_dir: Path
    database_filename: str = DEFAULT_DB_FILENAME
    http_cache_filename: str = HTTP_CACHE_FILENAME
    mul_raw_dirname: str = MUL_RAW_DIRNAME
    reports_dirname: str = REPORTS_DIRNAME

    def resolve_data_dir(self) -> Path:
        return self.data_dir.expanduser().resolve()

    def ensure_data_dir(self) -> Path:
        root = self.resolve_data_dir()
        root.mkdir(parents=True, exist_ok=True)
        return root

    def _file(self, filename: str, *, ensure: bool) -> Path:
        root = self.ensure_data_dir() if ensure else self.resolve_data_dir()
        return root / filename

    def database_path(self, *, ensure: bool = True) -> Path:
        return self._file(self.database_filename, ensure=ensure)

    def http_cache_path(self, *, ensure: bool = True) -> Path:
        return self._file(self.http_cache_filename, ensure=ensure)

    def mul_raw_dir(self) -> Path:
        """Raw QuickList JSON and detail HTML, kept between fetch runs."""

        return self.resolve_data_dir() / self.mul_raw_dirname

    def reports_dir(self) -> Path:
        return self.resolve_data_dir() / self.reports_dirname

    def database_uri(self) -> str:
        return f"sqlite+pysqlite:///{self.database_path()}"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str


def _default_data_dir() -> Path:
    if sys.platform == "win32":
        local = os.getenv("LOCALAPPDATA")
        base = Path(local) if local else Path.home() / "AppData" / "Local"
    else:
        xdg = os.getenv("XDG_DATA_HOME")
        base = Path(xdg) if xdg else Path.home() / ".local" / "share"
    return (base / APP_DIR_NAME).expanduser().resolve()


def get_storage_config() -> StorageConfig:
    configured = os.getenv(DATA_DIR_ENV)
    return StorageConfig(data_dir=Path(configured) if configured else _default_data_dir())


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    """``DATABASE_URI`` wins; otherwise a SQLite file in the data directory."""

    uri = os.getenv(DATABASE_URI_ENV)
    if not uri:
        uri = (storage or get_storage_config()).database_uri()
    return DatabaseConfig(uri=uri)
