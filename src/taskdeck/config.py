# src/taskdeck/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- No secrets required at import time.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TASKDECK"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


# Local .env never overrides the real environment.
load_dotenv(override=False)


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

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    tasks_db_path: Path

    # ---- Auth callback ----
    callback_timeout_seconds: float

    # ---- Task views ----
    upcoming_limit: int
    show_completed: bool
    default_sort: str
    default_sort_order: str

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "taskdeck") or "taskdeck"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskdeck"))
        tasks_db_path = _env_path(_k("TASKS_DB_PATH"), data_dir / "tasks.sqlite3")

        # The callback screen listens for a redirect URL for a few seconds only.
        callback_timeout_seconds = max(0.0, _env_float(_k("CALLBACK_TIMEOUT_SECONDS"), 5.0))

        upcoming_limit = _env_int(_k("UPCOMING_LIMIT"), 5)
        show_completed = _env_bool(_k("SHOW_COMPLETED"), False)
        default_sort = _env(_k("DEFAULT_SORT"), "dueDate")
        default_sort_order = _env(_k("DEFAULT_SORT_ORDER"), "asc")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            tasks_db_path=tasks_db_path,
            callback_timeout_seconds=callback_timeout_seconds,
            upcoming_limit=upcoming_limit,
            show_completed=show_completed,
            default_sort=default_sort,
            default_sort_order=default_sort_order,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
