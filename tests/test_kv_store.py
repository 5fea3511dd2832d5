# tests/test_kv_store.py

from __future__ import annotations

from pathlib import Path

from lifeplan.storage.kv_store import SqliteKeyValueStorage
from lifeplan.tasks.task_models import Task
from lifeplan.tasks.task_store import TaskStore


def test_set_get_overwrite_remove(tmp_path: Path) -> None:
    kv = SqliteKeyValueStorage(tmp_path / "nested" / "store.sqlite3")

    assert kv.get_item("k") is None
    kv.set_item("k", "v1")
    kv.set_item("k", "v2")
    kv.set_item("other", "x")

    assert kv.get_item("k") == "v2"
    assert kv.count_keys() == 2

    kv.remove_item("k")
    kv.remove_item("k")
    assert kv.get_item("k") is None
    assert kv.count_keys() == 1


def test_task_store_survives_restart(tmp_path: Path) -> None:
    db = tmp_path / "store.sqlite3"
    store = TaskStore(SqliteKeyValueStorage(db))
    store.add_task(Task(id="a", name="Läuft", due_date="2024-05-06", repeated_days=("Monday",)))
    store.toggle_complete("a", "2024-05-13")

    again = TaskStore(SqliteKeyValueStorage(db))

    assert again.get_task("a") == store.get_task("a")
    assert again.is_task_completed_on_date("a", "2024-05-13") is True
