# src/tasklist/tasks/task_view.py

from __future__ import annotations

import logging
from collections.abc import Iterable

from .task_models import Task

logger = logging.getLogger(__name__)


def matches(task: Task, needle: str, hide_completed: bool) -> bool:
    if hide_completed and task.completed:
        return False
    if not needle:
        return True
    return needle in task.text.casefold()


def derive_view(tasks: Iterable[Task], search: str, hide_completed: bool) -> tuple[Task, ...]:
    """
    Filter then order tasks for display.

    - keep a task if its text contains `search` (case-insensitive; empty matches all)
      and it is not completed while `hide_completed` is set
    - order by priority rank; sorted() is stable, so equal priorities keep input order
    """
    needle = (search or "").casefold()
    visible = [t for t in tasks if matches(t, needle, hide_completed)]
    return tuple(sorted(visible, key=lambda t: t.priority.rank))


class ViewCache:
    """
    Memoized derive_view.

    Keyed on (collection version, search, hide_completed). The version comes from
    TaskStore and changes on every real mutation, so the tuple itself is never hashed.
    """

    def __init__(self) -> None:
        self._key: tuple[int, str, bool] | None = None
        self._value: tuple[Task, ...] = ()
        self.computations = 0

    def get(
        self,
        version: int,
        tasks: Iterable[Task],
        search: str,
        hide_completed: bool,
    ) -> tuple[Task, ...]:
        key = (version, search, bool(hide_completed))
        if key == self._key:
            return self._value

        self._value = derive_view(tasks, search, hide_completed)
        self._key = key
        self.computations += 1
        logger.debug(
            "View recomputed version=%s search=%r hide_completed=%s -> %d task(s)",
            version,
            search,
            hide_completed,
            len(self._value),
        )
        return self._value

    def invalidate(self) -> None:
        self._key = None
