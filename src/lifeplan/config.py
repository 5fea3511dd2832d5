# src/lifeplan/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- Every value has a local default; nothing is required at import time.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "LIFEPLAN"

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


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
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

    # ---- Local data (ignored by git) ----
    data_dir: Path
    store_db_path: Path
    tasks_key: str
    tags_key: str

    # ---- Behaviour ----
    completion_sound: bool
    duplicate_when_dragging: bool
    focus_session_minutes: int
    seed_demo: bool

    # ---- Connectors ----
    console_enabled: bool

    @staticmethod
    def from_env() -> "Settings":
        data_dir = _env_path(_k("DATA_DIR"), Path(".local/lifeplan"))

        return Settings(
            app_name=_env(_k("APP_NAME"), "lifeplan") or "lifeplan",
            log_level=_env(_k("LOG_LEVEL"), "INFO"),
            data_dir=data_dir,
            store_db_path=_env_path(_k("STORE_DB_PATH"), data_dir / "store.sqlite3"),
            tasks_key=_env(_k("TASKS_KEY"), "task-store") or "task-store",
            tags_key=_env(_k("TAGS_KEY"), "tags-store") or "tags-store",
            completion_sound=_env_bool(_k("COMPLETION_SOUND"), True),
            duplicate_when_dragging=_env_bool(_k("DUPLICATE_WHEN_DRAGGING"), False),
            focus_session_minutes=max(1, _env_int(_k("FOCUS_SESSION_MINUTES"), 25)),
            seed_demo=_env_bool(_k("SEED_DEMO"), False),
            console_enabled=_env_bool(_k("CONSOLE_ENABLED"), True),
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
