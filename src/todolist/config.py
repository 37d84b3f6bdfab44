# src/todolist/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Nothing is read at import time; get_settings() builds the object on first use.
- Components receive settings by injection (tests pass their own).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

ENV_PREFIX = "TODOLIST"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv() -> None:
    """Load .env from the working directory; variables already set in the environment win."""
    load_dotenv(find_dotenv(usecwd=True), override=False)


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


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
    log_dir: Path

    # ---- Storage ----
    database_url: str
    data_dir: Path
    tasks_file_name: str
    db_timeout_seconds: float

    # ---- Shell ----
    console_enabled: bool

    @staticmethod
    def from_env() -> "Settings":
        _load_dotenv()

        app_name = _env(_k("APP_NAME"), "todolist") or "todolist"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        # Accept the conventional DATABASE_URL too.
        database_url = (_first_env(_k("DATABASE_URL"), "DATABASE_URL", default="") or "").strip()

        data_dir = _env_path(_k("DATA_DIR"), Path.home() / ".todolist")
        tasks_file_name = _env(_k("TASKS_FILE"), "tasks.json").strip() or "tasks.json"
        log_dir = _env_path(_k("LOG_DIR"), data_dir)
        db_timeout_seconds = _env_float(_k("DB_TIMEOUT"), 30.0)

        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            log_dir=log_dir,
            database_url=database_url,
            data_dir=data_dir,
            tasks_file_name=tasks_file_name,
            db_timeout_seconds=db_timeout_seconds,
            console_enabled=console_enabled,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS
