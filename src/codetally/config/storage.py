"""Where codetally keeps its state database and the optional HTTP cache."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import optional_env_var

DATA_DIR_ENV: Final = "CODETALLY_DATA_DIR"
DATABASE_URI_ENV: Final = "DATABASE_URI"
DEFAULT_DB_FILENAME: Final = "codetally.db"
HTTP_CACHE_FILENAME: Final = "http_cache.db"


def _platform_data_home() -> Path:
    if os.name == "nt":
        local = os.getenv("LOCALAPPDATA")
        return Path(local) if local else Path.home() / "AppData" / "Local"
    xdg = os.getenv("XDG_DATA_HOME")
    return Path(xdg) if xdg else Path.home() / ".local" / "share"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path

    def file(self, filename: str) -> Path:
        """Return ``filename`` inside the data directory, creating the directory."""

        directory = self.data_dir.expanduser().resolve()
        directory.mkdir(parents=True, exist_ok=True)
        return directory / filename

    def database_uri(self) -> str:
        return f"sqlite+pysqlite:///{self.file(DEFAULT_DB_FILENAME)}"

    def http_cache_path(self) -> Path:
        return self.file(HTTP_CACHE_FILENAME)


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str


def get_storage_config() -> StorageConfig:
    override = optional_env_var(DATA_DIR_ENV)
    return StorageConfig(data_dir=Path(override) if override else _platform_data_home() / "codetally")


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    uri = optional_env_var(DATABASE_URI_ENV)
    if uri is None:
        uri = (storage or get_storage_config()).database_uri()
    return DatabaseConfig(uri=uri)
