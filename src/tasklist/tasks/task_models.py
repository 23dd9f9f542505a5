# src/tasklist/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

TaskId = int | str


class Priority(StrEnum):
    """
    Task priority. Values are the stored wire labels.

    Display order: alta (high) first, then media, then baja.
    """

    ALTA = "alta"
    MEDIA = "media"
    BAJA = "baja"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]

    @classmethod
    def from_wire(cls, raw: Any) -> Priority:
        if not raw:
            return cls.MEDIA
        try:
            return cls(str(raw).strip().lower())
        except Exception:
            return cls.MEDIA

    @classmethod
    def parse(cls, raw: str) -> Priority:
        """Strict parse for user input; accepts English aliases too."""
        s = (raw or "").strip().lower()
        alias = {"high": cls.ALTA, "medium": cls.MEDIA, "low": cls.BAJA}
        if s in alias:
            return alias[s]
        return cls(s)


_PRIORITY_RANK = {Priority.ALTA: 1, Priority.MEDIA: 2, Priority.BAJA: 3}


@dataclass(frozen=True, slots=True)
class Task:
    id: TaskId
    text: str
    completed: bool = False
    priority: Priority = Priority.MEDIA

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "completed": self.completed,
            "priority": self.priority.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Task:
        """
        Build a Task from a stored record.

        Raises ValueError for records that cannot be a task (missing id, empty text).
        """
        raw_id = data.get("id")
        if isinstance(raw_id, bool) or not isinstance(raw_id, (int, str)):
            raise ValueError(f"invalid task id: {raw_id!r}")
        if isinstance(raw_id, str) and not raw_id.strip():
            raise ValueError("empty task id")

        text = data.get("text")
        if not isinstance(text, str) or not text.strip():
            raise ValueError("task text is required")

        return cls(
            id=raw_id,
            text=text,
            completed=bool(data.get("completed", False)),
            priority=Priority.from_wire(data.get("priority")),
        )


DEFAULT_TASKS: tuple[Task, ...] = (
    Task(id=1, text="Learn the fundamentals", completed=False, priority=Priority.ALTA),
    Task(id=2, text="Build a task list app", completed=False, priority=Priority.MEDIA),
)
