# tests/test_task_store.py

from __future__ import annotations

import json
import logging
import random

from tasklist.storage.kv_store import DurableStore
from tasklist.tasks.task_models import DEFAULT_TASKS, Priority, Task
from tasklist.tasks.task_store import TaskStore

from .fakes import FailingBackend, RecordingBackend


def _frozen_clock() -> float:
    # Every add lands in the same millisecond.
    return 1_700_000_000.0


def _store(backend: RecordingBackend | FailingBackend | None = None, **kwargs) -> TaskStore:
    return TaskStore(DurableStore(backend or RecordingBackend()), **kwargs)


def _stored(backend: RecordingBackend) -> list[dict]:
    return json.loads(backend.items["tasksStorage"])


def test_empty_slot_starts_from_seed_tasks_without_writing() -> None:
    backend = RecordingBackend()
    store = _store(backend)

    assert store.tasks == DEFAULT_TASKS
    assert [t.priority for t in store.tasks] == [Priority.ALTA, Priority.MEDIA]
    assert backend.writes == []


def test_corrupt_slot_starts_from_seed_tasks() -> None:
    backend = RecordingBackend({"tasksStorage": "<<garbage>>"})
    store = _store(backend)

    assert store.tasks == DEFAULT_TASKS
    assert backend.writes == []


def test_non_list_snapshot_starts_from_seed_tasks(caplog) -> None:
    backend = RecordingBackend({"tasksStorage": '{"id": 1}'})
    with caplog.at_level(logging.WARNING, logger="tasklist.tasks.task_store"):
        store = _store(backend)

    assert store.tasks == DEFAULT_TASKS
    assert "not a list" in caplog.text


def test_restore_skips_bad_records_and_duplicate_ids() -> None:
    raw = [
        {"id": 5, "text": "keep", "completed": True, "priority": "baja"},
        {"id": 5, "text": "duplicate", "completed": False, "priority": "alta"},
        {"id": 6, "text": "   ", "completed": False, "priority": "alta"},
        "not a record",
        {"id": "abc", "text": "string id", "priority": "urgent"},
    ]
    store = _store(RecordingBackend({"tasksStorage": json.dumps(raw)}))

    assert [t.id for t in store.tasks] == [5, "abc"]
    assert store.tasks[0] == Task(id=5, text="keep", completed=True, priority=Priority.BAJA)
    assert store.tasks[1].priority is Priority.MEDIA


def test_add_appends_and_persists() -> None:
    backend = RecordingBackend()
    store = _store(backend, clock=_frozen_clock)

    task = store.add("  Buy milk  ", Priority.BAJA)

    assert task is not None
    assert task.text == "Buy milk"
    assert task.completed is False
    assert store.tasks[-1] == task
    assert store.version == 1
    assert _stored(backend)[-1] == {"id": task.id, "text": "Buy milk", "completed": False, "priority": "baja"}


def test_add_defaults_to_medium_priority() -> None:
    store = _store()
    task = store.add("Walk the dog")
    assert task is not None
    assert task.priority is Priority.MEDIA


def test_add_rejects_empty_and_whitespace_text() -> None:
    backend = RecordingBackend()
    store = _store(backend)
    before = store.tasks

    assert store.add("", Priority.ALTA) is None
    assert store.add("   ", Priority.BAJA) is None

    assert store.tasks is before
    assert store.version == 0
    assert backend.writes == []


def test_rapid_adds_in_same_tick_get_distinct_ids() -> None:
    store = _store(clock=_frozen_clock)

    ids = [store.add(f"task {i}").id for i in range(50)]  # type: ignore[union-attr]

    assert len(set(ids)) == 50
    assert ids == sorted(ids)


def test_new_ids_never_collide_with_restored_ids() -> None:
    far_future_id = 9_999_999_999_999
    raw = [{"id": far_future_id, "text": "from last session", "completed": False, "priority": "media"}]
    store = _store(RecordingBackend({"tasksStorage": json.dumps(raw)}), clock=_frozen_clock)

    task = store.add("new one")

    assert task is not None
    assert task.id == far_future_id + 1


def test_ids_stay_distinct_under_random_operations() -> None:
    rng = random.Random(1234)
    store = _store(clock=_frozen_clock)

    for step in range(300):
        op = rng.choice(["add", "add", "remove", "toggle"])
        if op == "add":
            store.add(f"task {step}", rng.choice(list(Priority)))
        elif store.tasks:
            target = rng.choice(store.tasks).id
            if op == "remove":
                store.remove(target)
            else:
                store.toggle(target)

        ids = [t.id for t in store.tasks]
        assert len(ids) == len(set(ids))


def test_remove_missing_id_is_a_noop() -> None:
    backend = RecordingBackend()
    store = _store(backend)
    before = store.tasks

    assert store.remove(12345) is False

    assert store.tasks is before
    assert store.version == 0
    assert backend.writes == []


def test_remove_existing_id() -> None:
    backend = RecordingBackend()
    store = _store(backend)

    assert store.remove(1) is True

    assert [t.id for t in store.tasks] == [2]
    assert [r["id"] for r in _stored(backend)] == [2]


def test_toggle_flips_completed_only_for_target() -> None:
    store = _store()

    assert store.toggle(2) is True
    assert [t.completed for t in store.tasks] == [False, True]

    assert store.toggle(2) is True
    assert [t.completed for t in store.tasks] == [False, False]

    before = store.tasks
    assert store.toggle(999) is False
    assert store.tasks is before


def test_clear_completed_keeps_order_of_the_rest() -> None:
    store = _store(clock=_frozen_clock)
    a = store.add("a")
    b = store.add("b")
    c = store.add("c")
    assert a and b and c
    store.toggle(1)
    store.toggle(b.id)

    removed = store.clear_completed()

    assert removed == 2
    assert not any(t.completed for t in store.tasks)
    assert [t.id for t in store.tasks] == [2, a.id, c.id]


def test_clear_completed_without_completed_tasks_is_a_noop() -> None:
    backend = RecordingBackend()
    store = _store(backend)

    assert store.clear_completed() == 0
    assert backend.writes == []


def test_reset_empties_and_persists() -> None:
    backend = RecordingBackend()
    store = _store(backend)

    store.reset()

    assert store.tasks == ()
    assert _stored(backend) == []

    # A fresh session sees the empty collection, not the seeds.
    assert _store(backend).tasks == ()


def test_persistence_failure_keeps_in_memory_state(caplog) -> None:
    backend = FailingBackend()
    store = _store(backend)

    with caplog.at_level(logging.WARNING, logger="tasklist"):
        task = store.add("still here")

    assert task is not None
    assert store.tasks[-1] == task
    assert store.last_save_ok is False
    assert backend.write_attempts == 1
    assert "not persisted" in caplog.text

    # Later successful operations keep working on the in-memory collection.
    assert store.toggle(task.id) is True
    assert store.get(task.id).completed is True  # type: ignore[union-attr]


def test_counts() -> None:
    store = _store()
    store.toggle(1)
    assert store.total == 2
    assert store.completed_count == 1
