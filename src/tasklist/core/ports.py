# src/tasklist/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps storage backends, timers and the console swappable and makes testing easier.
"""

from collections.abc import Callable
from typing import Protocol


class KeyValueBackend(Protocol):
    """
    Raw string slots, localStorage-style.

    Implementations may raise on any call; DurableStore is the layer that
    turns failures into logged fallbacks.
    """

    def get_item(self, key: str) -> str | None: ...
    def set_item(self, key: str, value: str) -> None: ...
    def remove_item(self, key: str) -> None: ...


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Single-shot deferred callbacks (asyncio.AbstractEventLoop fits this shape)."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class ConsoleIO(Protocol):
    """
    Presentation-side port used by command handlers.

    - emit: immediate user-visible output
    - confirm: blocking yes/no prompt, True only on explicit consent
    """

    def emit(self, text: str) -> None: ...
    def confirm(self, question: str) -> bool: ...
