# src/tasklist/core/state.py

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from ..storage.kv_store import DurableStore
from ..tasks.task_models import Task
from ..tasks.task_store import TaskStore
from ..tasks.task_view import ViewCache
from .debounce import Debounced
from .flag import BooleanFlag
from .ports import Scheduler


class ViewFilters:
    """
    Session-only view inputs: raw search text, its debounced copy, hide-completed.

    Nothing here is persisted; a fresh ViewFilters starts from "", "", False.
    """

    def __init__(
        self,
        *,
        scheduler: Scheduler,
        debounce_seconds: float,
        on_search_settled: Callable[[str], None] | None = None,
    ) -> None:
        self._on_search_settled = on_search_settled
        self.search = Debounced("", debounce_seconds, scheduler, on_change=self._settled)
        self.hide_completed = BooleanFlag(False)

    @property
    def raw_search(self) -> str:
        return self.search.source

    def edit_search(self, text: str) -> None:
        self.search.set(text)

    def set_search_listener(self, listener: Callable[[str], None] | None) -> None:
        self._on_search_settled = listener

    def _settled(self, value: str) -> None:
        if self._on_search_settled is not None:
            self._on_search_settled(value)

    def close(self) -> None:
        self.search.close()


@dataclass
class AppState:
    # Settings object (tasklist.config.Settings or a test stand-in).
    settings: Any

    durable: DurableStore
    task_store: TaskStore
    filters: ViewFilters
    view_cache: ViewCache = field(default_factory=ViewCache)

    def visible_tasks(self) -> tuple[Task, ...]:
        store = self.task_store
        return self.view_cache.get(
            store.version,
            store.tasks,
            self.filters.search.value,
            self.filters.hide_completed.value,
        )
