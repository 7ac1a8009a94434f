"""Environment-driven runtime settings."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path


logger = logging.getLogger(__name__)

DB_PATH_ENV = "PLAYERSNAP_DB_PATH"
LOG_LEVEL_ENV = "PLAYERSNAP_LOG_LEVEL"

DEFAULT_DB_PATH = Path("playersnap.sqlite")
DEFAULT_LOG_LEVEL = "WARNING"

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


@dataclass(frozen=True)
class Settings:
    db_path: Path
    log_level: str


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return Path(raw.strip())


def _env_log_level(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip().upper()
    if value not in _LOG_LEVELS:
        logger.warning("Invalid log level for %s: %s; using default %s", name, raw, default)
        return default
    return value


def load_settings() -> Settings:
    """Resolve settings from the environment, falling back to defaults."""

    return Settings(
        db_path=_env_path(DB_PATH_ENV, DEFAULT_DB_PATH),
        log_level=_env_log_level(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL),
    )
