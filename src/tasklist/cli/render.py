# src/tasklist/cli/render.py

"""Plain-text rendering of the board. Pure: state in, string out."""

from __future__ import annotations

from ..core.state import AppState
from ..tasks.task_models import Priority, Task

PRIORITY_ICONS = {
    Priority.ALTA: "🔴",
    Priority.MEDIA: "🟡",
    Priority.BAJA: "🟢",
}


def render_task(task: Task) -> str:
    box = "[x]" if task.completed else "[ ]"
    icon = PRIORITY_ICONS.get(task.priority, " ")
    text = f"~{task.text}~" if task.completed else task.text
    return f"{box} {icon} #{task.id}  {text}  ({task.priority.value})"


def render_status(state: AppState) -> str:
    store = state.task_store
    return f"Total: {store.total} tasks | Completed: {store.completed_count}"


def render_board(state: AppState) -> str:
    filters = state.filters
    lines: list[str] = ["My task list"]

    active: list[str] = []
    if filters.search.value:
        active.append(f"search={filters.search.value!r}")
    if filters.hide_completed.value:
        active.append("hiding completed")
    if active:
        lines.append(f"  filters: {', '.join(active)}")

    visible = state.visible_tasks()
    if visible:
        lines.extend(f"  {render_task(t)}" for t in visible)
    elif state.task_store.total:
        lines.append("  (no tasks match the current filters)")
    else:
        lines.append("  (no tasks yet)")

    lines.append(render_status(state))

    done = state.task_store.completed_count
    if done:
        lines.append(f"  /clear removes {done} completed task(s)")

    return "\n".join(lines)
