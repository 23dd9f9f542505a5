# src/tasklist/tasks/task_store.py

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable
from dataclasses import replace
from typing import Any

from ..storage.kv_store import DurableStore
from .task_models import DEFAULT_TASKS, Priority, Task, TaskId

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "tasksStorage"


class TaskStore:
    """
    In-memory task collection mirrored to a durable slot.

    The collection is an immutable tuple in insertion order. Every mutation
    builds a new tuple, bumps `version` and saves the whole snapshot.
    Operations that would not change anything return early: same tuple,
    same version, no write.

    Persistence is best-effort: a failed save is logged and recorded in
    `last_save_ok`, the in-memory collection stays authoritative.
    """

    def __init__(
        self,
        durable: DurableStore,
        *,
        key: str = DEFAULT_STORAGE_KEY,
        defaults: Iterable[Task] = DEFAULT_TASKS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._durable = durable
        self._key = key
        self._clock = clock

        self._tasks: tuple[Task, ...] = self._restore(tuple(defaults))
        self._version = 0
        self._last_id = self._highest_int_id(self._tasks)
        self.last_save_ok = True

        logger.info("TaskStore ready key=%s total=%s", self._key, len(self._tasks))

    # ---- read side ----

    @property
    def tasks(self) -> tuple[Task, ...]:
        return self._tasks

    @property
    def version(self) -> int:
        return self._version

    @property
    def total(self) -> int:
        return len(self._tasks)

    @property
    def completed_count(self) -> int:
        return sum(1 for t in self._tasks if t.completed)

    def get(self, task_id: TaskId) -> Task | None:
        for t in self._tasks:
            if t.id == task_id:
                return t
        return None

    # ---- restore ----

    def _restore(self, defaults: tuple[Task, ...]) -> tuple[Task, ...]:
        raw = self._durable.load(self._key, None)
        if raw is None:
            return defaults

        if not isinstance(raw, list):
            logger.warning(
                "Stored snapshot under %r is %s, not a list; using defaults.",
                self._key,
                type(raw).__name__,
            )
            return defaults

        out: list[Task] = []
        seen: set[TaskId] = set()
        for item in raw:
            if not isinstance(item, dict):
                logger.warning("Skipping non-object task record: %r", item)
                continue
            try:
                task = Task.from_dict(item)
            except ValueError as e:
                logger.warning("Skipping malformed task record %r: %s", item, e)
                continue
            if task.id in seen:
                logger.warning("Skipping duplicate task id=%r", task.id)
                continue
            seen.add(task.id)
            out.append(task)

        logger.debug("Restored %d task(s) from %r", len(out), self._key)
        return tuple(out)

    # ---- id assignment ----

    @staticmethod
    def _highest_int_id(tasks: Iterable[Task]) -> int:
        ids = [t.id for t in tasks if isinstance(t.id, int)]
        return max(ids, default=0)

    def _next_id(self) -> int:
        # Millisecond timestamp, but never at or below an id already handed out.
        now_ms = int(self._clock() * 1000)
        self._last_id = max(now_ms, self._last_id + 1)
        return self._last_id

    # ---- mutation ----

    def _commit(self, new_tasks: tuple[Task, ...], op: str) -> None:
        self._tasks = new_tasks
        self._version += 1
        self.last_save_ok = self._persist()
        logger.debug("TaskStore %s -> version=%s total=%s", op, self._version, len(new_tasks))

    def _persist(self) -> bool:
        payload: list[dict[str, Any]] = [t.to_dict() for t in self._tasks]
        ok = self._durable.save(self._key, payload)
        if not ok:
            logger.warning("Tasks not persisted; keeping in-memory state (total=%s).", len(payload))
        return ok

    def add(self, text: str, priority: Priority = Priority.MEDIA) -> Task | None:
        clean = (text or "").strip()
        if not clean:
            return None

        task = Task(id=self._next_id(), text=clean, completed=False, priority=Priority(priority))
        self._commit(self._tasks + (task,), "add")
        logger.info("Task added id=%s priority=%s", task.id, task.priority.value)
        return task

    def remove(self, task_id: TaskId) -> bool:
        remaining = tuple(t for t in self._tasks if t.id != task_id)
        if len(remaining) == len(self._tasks):
            return False
        self._commit(remaining, "remove")
        return True

    def toggle(self, task_id: TaskId) -> bool:
        found = False
        new_tasks: list[Task] = []
        for t in self._tasks:
            if t.id == task_id:
                found = True
                new_tasks.append(replace(t, completed=not t.completed))
            else:
                new_tasks.append(t)
        if not found:
            return False
        self._commit(tuple(new_tasks), "toggle")
        return True

    def clear_completed(self) -> int:
        remaining = tuple(t for t in self._tasks if not t.completed)
        removed = len(self._tasks) - len(remaining)
        if removed == 0:
            return 0
        self._commit(remaining, "clear_completed")
        return removed

    def reset(self) -> None:
        """Drop every task. Confirmation is the caller's job."""
        if not self._tasks:
            return
        self._commit((), "reset")
        logger.info("TaskStore reset.")
