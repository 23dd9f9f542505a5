# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from tasklist.cli.bootstrap import create_initial_state
from tasklist.core.state import AppState
from tasklist.storage.kv_store import DurableStore

from .fakes import ManualScheduler, RecordingBackend


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="tasklist",
        log_level="WARNING",
        data_dir=tmp_path,
        storage_db_path=tmp_path / "storage.sqlite3",
        storage_key="tasksStorage",
        search_debounce_ms=300,
        search_debounce_seconds=0.3,
    )


@pytest.fixture()
def backend() -> RecordingBackend:
    return RecordingBackend()


@pytest.fixture()
def durable(backend: RecordingBackend) -> DurableStore:
    return DurableStore(backend)


@pytest.fixture()
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture()
def state(settings: SimpleNamespace, backend: RecordingBackend, scheduler: ManualScheduler) -> AppState:
    """
    AppState wired with an in-memory backend and a manual clock.

    The real SQLite backend has its own tests in test_kv_store.py.
    """
    return create_initial_state(settings=settings, backend=backend, scheduler=scheduler)
