# src/tasklist/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Callable

from ..core.ports import ConsoleIO
from ..core.state import AppState
from ..tasks.intents import (
    AddTask,
    ClearCompleted,
    EditSearch,
    RemoveTask,
    ResetApp,
    ToggleHideCompleted,
    ToggleTask,
    dispatch,
)
from ..tasks.task_models import Priority, TaskId
from .render import render_board, render_status

CommandHandler = Callable[[AppState, list[str], ConsoleIO], str]

logger = logging.getLogger(__name__)

RESET_QUESTION = "Delete ALL tasks? This cannot be undone."
SAVE_WARNING = "(warning: changes could not be saved; they are kept for this session only)"


class CommandRegistry:
    """Slash-command registry used by the console connector (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, line: str, io: ConsoleIO) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        return handler(state, args, io)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("  Any line that is not a command is added as a new task.")
        return "\n".join(lines)


registry = CommandRegistry()


def _resolve_id(state: AppState, raw: str) -> TaskId | None:
    """Match user input to an existing id (ints first, then restored string ids)."""
    raw = raw.strip().lstrip("#")
    candidates: list[TaskId] = []
    try:
        candidates.append(int(raw))
    except ValueError:
        pass
    candidates.append(raw)
    for c in candidates:
        if state.task_store.get(c) is not None:
            return c
    return None


def _after_mutation(state: AppState) -> str:
    board = render_board(state)
    if not state.task_store.last_save_ok:
        return f"{board}\n{SAVE_WARNING}"
    return board


def add_text(state: AppState, text: str, priority: Priority = Priority.MEDIA) -> str:
    task = dispatch(state, AddTask(text=text, priority=priority))
    if task is None:
        return "Nothing to add: task text is empty."
    return _after_mutation(state)


def cmd_help(state: AppState, args: list[str], io: ConsoleIO) -> str:
    return registry.build_help()


def cmd_add(state: AppState, args: list[str], io: ConsoleIO) -> str:
    """
    /add <text>                 -> add with medium priority
    /add -p alta|media|baja <text>
    """
    priority = Priority.MEDIA
    if args and args[0] in ("-p", "--priority"):
        if len(args) < 2:
            return "Usage: /add [-p alta|media|baja] <text>"
        try:
            priority = Priority.parse(args[1])
        except ValueError:
            return f"Unknown priority: {args[1]}. Use alta, media or baja."
        args = args[2:]
    return add_text(state, " ".join(args), priority)


def _cmd_for_id(label: str, make_intent: Callable[[TaskId], object]) -> CommandHandler:
    def handler(state: AppState, args: list[str], io: ConsoleIO) -> str:
        if len(args) != 1:
            return f"Usage: /{label} <id>"
        task_id = _resolve_id(state, args[0])
        if task_id is None:
            return f"No task with id {args[0]}."
        dispatch(state, make_intent(task_id))  # type: ignore[arg-type]
        return _after_mutation(state)

    handler.__name__ = f"cmd_{label}"
    return handler


cmd_remove = _cmd_for_id("rm", RemoveTask)
cmd_toggle = _cmd_for_id("done", ToggleTask)


def cmd_clear(state: AppState, args: list[str], io: ConsoleIO) -> str:
    removed = dispatch(state, ClearCompleted())
    if not removed:
        return "No completed tasks to clear."
    return _after_mutation(state)


def cmd_reset(state: AppState, args: list[str], io: ConsoleIO) -> str:
    if not io.confirm(RESET_QUESTION):
        logger.debug("Reset declined by user.")
        return "Reset cancelled."
    dispatch(state, ResetApp())
    return _after_mutation(state)


def cmd_search(state: AppState, args: list[str], io: ConsoleIO) -> str:
    """
    /search <term>  -> filter by text (applied once typing settles)
    /search         -> clear the filter
    """
    term = " ".join(args)
    dispatch(state, EditSearch(text=term))
    if not term:
        return "Clearing search..."
    return f"Searching for {term!r}..."


def cmd_hide(state: AppState, args: list[str], io: ConsoleIO) -> str:
    dispatch(state, ToggleHideCompleted())
    return render_board(state)


def cmd_list(state: AppState, args: list[str], io: ConsoleIO) -> str:
    return render_board(state)


def cmd_stats(state: AppState, args: list[str], io: ConsoleIO) -> str:
    return render_status(state)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("add", cmd_add, help_text="Add a task: /add [-p alta|media|baja] <text>.", aliases=["a"])
registry.register("rm", cmd_remove, help_text="Delete a task: /rm <id>.", aliases=["del"])
registry.register("done", cmd_toggle, help_text="Toggle completed: /done <id>.", aliases=["toggle", "t"])
registry.register("clear", cmd_clear, help_text="Remove all completed tasks.")
registry.register("reset", cmd_reset, help_text="Delete ALL tasks (asks for confirmation).")
registry.register("search", cmd_search, help_text="Filter by text: /search <term> (no term clears).", aliases=["s"])
registry.register("hide", cmd_hide, help_text="Show/hide completed tasks.")
registry.register("list", cmd_list, help_text="Show the task list.", aliases=["ls"])
registry.register("stats", cmd_stats, help_text="Show total and completed counts.")
