# src/habittrack/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- Everything has a default; the app runs with no environment at all.
- Local data lives under a gitignored directory.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "HABIT"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Connector flags ----
    console_enabled: bool

    # ---- Notifications ----
    notifications_enabled: bool
    reminder_poll_seconds: float

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    local_db_path: Path
    shared_db_path: Path

    @staticmethod
    def from_env() -> "Settings":
        data_dir = _env_path(_k("DATA_DIR"), Path(".local/habittrack"))
        return Settings(
            app_name=_env(_k("APP_NAME"), "HabitTrack"),
            log_level=_env(_k("LOG_LEVEL"), "INFO"),
            console_enabled=_env_bool(_k("CONSOLE_ENABLED"), True),
            notifications_enabled=_env_bool(_k("NOTIFICATIONS_ENABLED"), True),
            reminder_poll_seconds=max(1.0, _env_float(_k("REMINDER_POLL_SECONDS"), 30.0)),
            data_dir=data_dir,
            local_db_path=_env_path(_k("LOCAL_DB_PATH"), data_dir / "app.sqlite3"),
            # The "app group" partition the widget reads.
            shared_db_path=_env_path(_k("SHARED_DB_PATH"), data_dir / "shared" / "group.sqlite3"),
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
