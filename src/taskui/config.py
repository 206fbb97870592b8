# src/taskui/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Everything has a safe default; nothing is required at import time.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TASKUI"

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
    log_to_console: bool

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    tasks_db_path: Path
    log_dir: Path

    # ---- Behaviour ----
    input_char_limit: int
    visible_hours: int

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "taskui").strip() or "taskui"
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        log_to_console = _env_bool(_k("LOG_TO_CONSOLE"), False)

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskui"))
        tasks_db_path = _env_path(_k("DB_PATH"), data_dir / "taskui.db")
        log_dir = _env_path(_k("LOG_DIR"), data_dir)

        # Same limit as the original text field.
        input_char_limit = max(1, _env_int(_k("INPUT_CHAR_LIMIT"), 156))
        visible_hours = max(0, _env_int(_k("VISIBLE_HOURS"), 24))

        return Settings(
            app_name=app_name,
            log_level=log_level,
            log_to_console=log_to_console,
            data_dir=data_dir,
            tasks_db_path=tasks_db_path,
            log_dir=log_dir,
            input_char_limit=input_char_limit,
            visible_hours=visible_hours,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
