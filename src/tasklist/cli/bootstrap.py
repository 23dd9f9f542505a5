# src/tasklist/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations into AppState (storage backend, task store, view filters).
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.debounce import AsyncioScheduler
from ..core.ports import KeyValueBackend, Scheduler
from ..core.state import AppState, ViewFilters
from ..storage.kv_store import DurableStore, SqliteKeyValueBackend
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.storage_db_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(
    *,
    settings=None,
    backend: KeyValueBackend | None = None,
    scheduler: Scheduler | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings (and the backend/scheduler) injectable makes the app easier
    to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    if backend is None:
        _ensure_local_dirs(settings)
        backend = SqliteKeyValueBackend(settings.storage_db_path)

    durable = DurableStore(backend)
    task_store = TaskStore(durable, key=settings.storage_key)
    filters = ViewFilters(
        scheduler=scheduler or AsyncioScheduler(),
        debounce_seconds=settings.search_debounce_seconds,
    )

    return AppState(
        settings=settings,
        durable=durable,
        task_store=task_store,
        filters=filters,
    )
