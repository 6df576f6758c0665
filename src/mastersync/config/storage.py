"""Local cache storage configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

APP_DIR_NAME: Final[str] = "mastersync"
CACHE_DB_FILENAME: Final[str] = "cache.db"
_TRUTHY: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})


@dataclass(frozen=True, slots=True)
class CacheConfig:
    """Where the local master-data mirror lives and how the engine is built."""

    database_uri: str
    echo: bool = False

    @property
    def is_in_memory(self) -> bool:
        return ":memory:" in self.database_uri


def default_data_dir() -> Path:
    env_dir = os.getenv("MASTERSYNC_DATA_DIR")
    if env_dir:
        return Path(env_dir).expanduser().resolve()
    if os.name == "nt":
        base = os.getenv("LOCALAPPDATA")
        base_path = Path(base) if base else (Path.home() / "AppData" / "Local")
    else:
        base = os.getenv("XDG_DATA_HOME")
        base_path = Path(base) if base else (Path.home() / ".local" / "share")
    return (base_path / APP_DIR_NAME).expanduser().resolve()


def sqlite_uri_for(data_dir: Path) -> str:
    data_dir.mkdir(parents=True, exist_ok=True)
    return f"sqlite+pysqlite:///{data_dir / CACHE_DB_FILENAME}"


def get_cache_config() -> CacheConfig:
    """Resolve the cache location, preferring ``DATABASE_URI`` over the data directory."""

    echo = os.getenv("MASTERSYNC_SQL_ECHO", "").strip().lower() in _TRUTHY
    env_uri = os.getenv("DATABASE_URI")
    if env_uri:
        return CacheConfig(database_uri=env_uri, echo=echo)
    return CacheConfig(database_uri=sqlite_uri_for(default_data_dir()), echo=echo)
