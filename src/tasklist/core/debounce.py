# src/tasklist/core/debounce.py

from __future__ import annotations

"""
Debounced values and the asyncio-backed scheduler they run on.

A Debounced value trails its source: it only takes the source's latest value
once the source has stayed unchanged for `delay` seconds. Every new source
value cancels the pending timer and starts a fresh one.
"""

import asyncio
import logging
from collections.abc import Callable
from typing import Generic, TypeVar

from .ports import Scheduler, TimerHandle

logger = logging.getLogger(__name__)

T = TypeVar("T")


class AsyncioScheduler:
    """
    Scheduler on the currently running asyncio loop.

    The loop is looked up on each call, so the scheduler can be created before
    the loop starts (at bootstrap) and used from inside it later.
    """

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        loop = asyncio.get_running_loop()
        return loop.call_later(max(0.0, float(delay)), callback)


class Debounced(Generic[T]):
    def __init__(
        self,
        initial: T,
        delay: float,
        scheduler: Scheduler,
        on_change: Callable[[T], None] | None = None,
    ) -> None:
        self._value = initial
        self._source = initial
        self._delay = max(0.0, float(delay))
        self._scheduler = scheduler
        self._on_change = on_change
        self._handle: TimerHandle | None = None

    @property
    def value(self) -> T:
        return self._value

    @property
    def source(self) -> T:
        return self._source

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def set(self, value: T) -> None:
        self._source = value
        self.cancel()
        self._handle = self._scheduler.call_later(self._delay, self._fire)

    def _fire(self) -> None:
        self._handle = None
        self._emit()

    def _emit(self) -> None:
        self._value = self._source
        if self._on_change is not None:
            try:
                self._on_change(self._value)
            except Exception:
                logger.exception("Debounced on_change callback failed.")

    def flush(self) -> None:
        """Emit the pending value now, if any."""
        if self._handle is None:
            return
        self.cancel()
        self._emit()

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def close(self) -> None:
        """Teardown: drop any pending update without emitting it."""
        self.cancel()
        self._on_change = None
