# src/tasklist/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Settings are passed explicitly into AppState; nothing reads them at import time
  except get_settings().
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

ENV_PREFIX = "TASKLIST"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except Exception:
        return
    load_dotenv(override=False)


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
    storage_db_path: Path

    # ---- Durable slot ----
    storage_key: str

    # ---- View ----
    search_debounce_ms: int

    @property
    def search_debounce_seconds(self) -> float:
        return max(0, self.search_debounce_ms) / 1000.0

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "tasklist").strip() or "tasklist"
        log_level = _env(_k("LOG_LEVEL"), "WARNING")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/tasklist"))
        storage_db_path = _env_path(_k("STORAGE_DB_PATH"), data_dir / "storage.sqlite3")

        storage_key = _env(_k("STORAGE_KEY"), "tasksStorage").strip() or "tasksStorage"
        search_debounce_ms = _env_int(_k("SEARCH_DEBOUNCE_MS"), 300)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            storage_db_path=storage_db_path,
            storage_key=storage_key,
            search_debounce_ms=search_debounce_ms,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        _load_dotenv_if_available()
        _SETTINGS = Settings.from_env()
    return _SETTINGS
