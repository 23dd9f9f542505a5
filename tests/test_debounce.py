# tests/test_debounce.py

from __future__ import annotations

import asyncio
import time

import pytest

from tasklist.core.debounce import AsyncioScheduler, Debounced

from .fakes import ManualScheduler


def test_rapid_updates_emit_once_with_last_value() -> None:
    scheduler = ManualScheduler()
    emitted: list[tuple[float, str]] = []
    search = Debounced("", 0.3, scheduler, on_change=lambda v: emitted.append((scheduler.now, v)))

    for text in ["b", "bu", "buy"]:
        search.set(text)
        scheduler.advance(0.1)

    assert emitted == []
    assert search.value == ""
    assert search.source == "buy"

    scheduler.advance(0.3)

    assert len(emitted) == 1
    when, value = emitted[0]
    assert value == "buy"
    # Last change at t=0.2, so the emission is no earlier than t=0.5.
    assert when >= 0.2 + 0.3 - 1e-9
    assert search.value == "buy"


def test_each_set_supersedes_pending_timer() -> None:
    scheduler = ManualScheduler()
    search = Debounced("", 0.3, scheduler)

    search.set("a")
    search.set("ab")

    assert len(scheduler.live_timers) == 1
    assert search.pending is True


def test_separate_quiet_periods_emit_separately() -> None:
    scheduler = ManualScheduler()
    emitted: list[str] = []
    search = Debounced("", 0.3, scheduler, on_change=emitted.append)

    search.set("milk")
    scheduler.advance(0.5)
    search.set("")
    scheduler.advance(0.5)

    assert emitted == ["milk", ""]


def test_close_cancels_pending_update() -> None:
    scheduler = ManualScheduler()
    emitted: list[str] = []
    search = Debounced("", 0.3, scheduler, on_change=emitted.append)

    search.set("abandoned")
    search.close()
    scheduler.advance(1.0)

    assert emitted == []
    assert search.value == ""
    assert scheduler.live_timers == []


def test_flush_emits_pending_value_now() -> None:
    scheduler = ManualScheduler()
    emitted: list[str] = []
    search = Debounced("", 0.3, scheduler, on_change=emitted.append)

    search.flush()
    assert emitted == []

    search.set("now")
    search.flush()

    assert emitted == ["now"]
    assert search.pending is False
    scheduler.advance(1.0)
    assert emitted == ["now"]


def test_failing_listener_does_not_break_the_value(caplog) -> None:
    scheduler = ManualScheduler()

    def boom(_value: str) -> None:
        raise RuntimeError("listener failed")

    search = Debounced("", 0.1, scheduler, on_change=boom)
    search.set("x")
    scheduler.advance(0.2)

    assert search.value == "x"
    assert "on_change callback failed" in caplog.text


@pytest.mark.asyncio
async def test_asyncio_scheduler_debounces_on_real_loop() -> None:
    delay = 0.2
    emitted: list[tuple[float, str]] = []
    search = Debounced("", delay, AsyncioScheduler(), on_change=lambda v: emitted.append((time.monotonic(), v)))

    last_change = 0.0
    for text in ["m", "mi", "mil", "milk"]:
        search.set(text)
        last_change = time.monotonic()
        await asyncio.sleep(0.01)

    await asyncio.sleep(delay * 3)

    assert [v for _, v in emitted] == ["milk"]
    assert emitted[0][0] >= last_change + delay - 0.01
