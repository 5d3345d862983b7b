# src/quest_clock/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Nothing required at import time; every value has a default.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "QUEST_CLOCK"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_list(name: str, default: list[str]) -> list[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default)
    return [p.strip() for p in raw.replace(",", " ").split() if p.strip()]


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

    # ---- Local data ----
    data_dir: Path
    db_path: Path
    db_timeout_seconds: float

    # ---- Sweep tuning ----
    expand_concurrency: int
    reconcile_concurrency: int

    # ---- `quest-clock watch` (external invoker) ----
    watch_interval_seconds: float
    watch_teams: list[str]

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "quest-clock")
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/quest_clock"))
        db_path = _env_path(_k("DB_PATH"), data_dir / "quest_clock.sqlite3")
        db_timeout_seconds = max(0.1, _env_float(_k("DB_TIMEOUT_SECONDS"), 30.0))

        expand_concurrency = max(1, _env_int(_k("EXPAND_CONCURRENCY"), 8))
        reconcile_concurrency = max(1, _env_int(_k("RECONCILE_CONCURRENCY"), 8))

        watch_interval_seconds = max(1.0, _env_float(_k("WATCH_INTERVAL_SECONDS"), 3600.0))
        watch_teams = _env_list(_k("WATCH_TEAMS"), [])

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            db_path=db_path,
            db_timeout_seconds=db_timeout_seconds,
            expand_concurrency=expand_concurrency,
            reconcile_concurrency=reconcile_concurrency,
            watch_interval_seconds=watch_interval_seconds,
            watch_teams=watch_teams,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
