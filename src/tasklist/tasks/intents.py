# src/tasklist/tasks/intents.py

"""
User intents and the single dispatch point that applies them.

The presentation layer never touches TaskStore or ViewFilters directly: it
builds one of these messages and hands it to dispatch().
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..core.state import AppState
from .task_models import Priority, TaskId

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AddTask:
    text: str
    priority: Priority = Priority.MEDIA


@dataclass(frozen=True, slots=True)
class RemoveTask:
    id: TaskId


@dataclass(frozen=True, slots=True)
class ToggleTask:
    id: TaskId


@dataclass(frozen=True, slots=True)
class ClearCompleted:
    pass


@dataclass(frozen=True, slots=True)
class ResetApp:
    pass


@dataclass(frozen=True, slots=True)
class EditSearch:
    text: str


@dataclass(frozen=True, slots=True)
class ToggleHideCompleted:
    pass


Intent = AddTask | RemoveTask | ToggleTask | ClearCompleted | ResetApp | EditSearch | ToggleHideCompleted


def dispatch(state: AppState, intent: Intent) -> object:
    """
    Apply one intent. Returns whatever the underlying operation returns
    (the new Task for AddTask, a bool/int for the rest, None for view intents).
    """
    store = state.task_store
    logger.debug("dispatch %r", intent)

    if isinstance(intent, AddTask):
        return store.add(intent.text, intent.priority)
    if isinstance(intent, RemoveTask):
        return store.remove(intent.id)
    if isinstance(intent, ToggleTask):
        return store.toggle(intent.id)
    if isinstance(intent, ClearCompleted):
        return store.clear_completed()
    if isinstance(intent, ResetApp):
        return store.reset()
    if isinstance(intent, EditSearch):
        state.filters.edit_search(intent.text)
        return None
    if isinstance(intent, ToggleHideCompleted):
        state.filters.hide_completed.toggle()
        return None

    raise TypeError(f"Unknown intent: {intent!r}")
