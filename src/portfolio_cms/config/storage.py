"""Where portfolio-cms keeps local files (currently only the public HTTP cache)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from logging import getLogger
from pathlib import Path
from typing import Final

log = getLogger(__name__)

APP_DIR_NAME: Final[str] = "portfolio-cms"
HTTP_CACHE_FILENAME: Final[str] = "http_cache.db"
DATA_DIR_VAR: Final[str] = "PORTFOLIO_CMS_DATA_DIR"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path

    def resolve_data_dir(self) -> Path:
        return self.data_dir.expanduser().resolve()

    def http_cache_path(self, *, ensure: bool = True) -> Path:
        data_dir = self.resolve_data_dir()
        if ensure:
            data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir / HTTP_CACHE_FILENAME

    def clear_http_cache(self) -> bool:
        """Delete the cached public responses; False when there was nothing to delete."""
        path = self.http_cache_path(ensure=False)
        removed = False
        # sqlite keeps its journal next to the database
        journals = (path.with_name(path.name + suffix) for suffix in ("-wal", "-shm"))
        for candidate in (path, *journals):
            if candidate.exists():
                candidate.unlink()
                removed = True
        if removed:
            log.info("Cleared HTTP cache at %s", path)
        return removed


def _cache_home() -> Path:
    if os.name == "nt":
        local = os.getenv("LOCALAPPDATA")
        return Path(local) if local else Path.home() / "AppData" / "Local"
    xdg = os.getenv("XDG_CACHE_HOME")
    return Path(xdg) if xdg else Path.home() / ".cache"


def get_storage_config() -> StorageConfig:
    override = os.getenv(DATA_DIR_VAR)
    return StorageConfig(data_dir=Path(override) if override else _cache_home() / APP_DIR_NAME)
