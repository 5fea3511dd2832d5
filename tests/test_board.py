# tests/test_board.py

from __future__ import annotations

import pytest

from lifeplan.tasks.board import Bucket, bucket_ids, instance_id, move_item
from lifeplan.tasks.task_api import (
    add_focus_minutes,
    duplicate_task,
    move_to_next_day,
    move_to_next_week,
    new_task,
)
from lifeplan.tasks.task_models import Priority, Task, TaskType
from lifeplan.tasks.task_store import TaskStore


def _day(store: TaskStore, day: str) -> list[str]:
    return bucket_ids(store, Bucket.parse(day))


def test_bucket_parse() -> None:
    assert Bucket.parse("2024-05-06") == Bucket(TaskType.DAILY, "2024-05-06")
    assert Bucket.parse("weekly:2024-W19").bucket_id == "weekly:2024-W19"
    assert Bucket.parse("life:life").task_type is TaskType.LIFE

    for bad in ("daily:2024-05-06", "weekly:2024-13", "tomorrow", "chores:2024"):
        with pytest.raises(ValueError):
            Bucket.parse(bad)


def test_instance_ids_distinguish_overlay_occurrences() -> None:
    one_off = Task(id="a", name="A", due_date="2024-05-06")
    habit = Task(id="h", name="H", due_date="2024-05-06", repeated_days=("Monday",))

    assert instance_id(one_off, "2024-05-06") == "a"
    assert instance_id(habit, "2024-05-13") == "h:2024-05-13"


def test_reorder_within_a_day(store: TaskStore) -> None:
    for i in ("a", "b", "c"):
        store.add_task(Task(id=i, name=i, due_date="2024-05-06"))

    move_item(store, "c", "2024-05-06", "2024-05-06", 0)

    assert _day(store, "2024-05-06") == ["c", "a", "b"]


def test_move_one_off_to_another_day(store: TaskStore) -> None:
    for i in ("a", "b"):
        store.add_task(Task(id=i, name=i, due_date="2024-05-06"))
    store.add_task(Task(id="x", name="x", due_date="2024-05-07"))

    moved = move_item(store, "a", "2024-05-06", "2024-05-07", 0)

    assert moved is not None and moved.id == "a"
    assert moved.due_date == "2024-05-07"
    assert _day(store, "2024-05-06") == ["b"]
    assert store.get_task("b").position == 1
    assert _day(store, "2024-05-07") == ["a", "x"]


def test_moving_a_recurring_task_forks_a_one_off(store: TaskStore) -> None:
    store.add_task(Task(id="h", name="Run", due_date="2024-05-06", repeated_days=("Monday",), focus_minutes=30))

    copy = move_item(store, "h:2024-05-13", "2024-05-13", "2024-05-14", 0)

    assert copy is not None and copy.id != "h"
    assert copy.name == "Run"
    assert copy.due_date == "2024-05-14"
    assert copy.repeated_days == ()
    assert copy.focus_minutes == 30
    # the template is untouched and still shows on Mondays
    assert store.get_task("h").due_date == "2024-05-06"
    assert "h" in _day(store, "2024-05-13")


def test_move_day_task_into_goal_bucket_retypes_it(store: TaskStore) -> None:
    store.add_task(Task(id="a", name="A", due_date="2024-05-06"))

    moved = move_item(store, "a", "2024-05-06", "weekly:2024-W19", 0)

    assert moved is not None and moved.id == "a"
    assert moved.type is TaskType.WEEKLY
    assert moved.due_date is None
    assert moved.time_frame_key == "2024-W19"
    assert _day(store, "2024-05-06") == []


def test_duplicate_when_dragging_copies_goal_moves(store: TaskStore) -> None:
    store.add_task(Task(id="g", name="G", type=TaskType.MONTHLY, time_frame_key="2024-05"))

    copy = move_item(store, "g", "monthly:2024-05", "2024-05-06", 0, duplicate_when_dragging=True)

    assert copy is not None and copy.id != "g"
    assert copy.type is TaskType.DAILY
    assert copy.due_date == "2024-05-06"
    assert store.get_task("g").time_frame_key == "2024-05"


def test_duplicate_when_dragging_still_moves_between_days(store: TaskStore) -> None:
    store.add_task(Task(id="a", name="A", due_date="2024-05-06"))

    moved = move_item(store, "a", "2024-05-06", "2024-05-08", 0, duplicate_when_dragging=True)

    assert moved is not None and moved.id == "a"
    assert store.count_tasks() == 1


def test_move_unknown_id_is_noop(store: TaskStore) -> None:
    assert move_item(store, "nope", "2024-05-06", "2024-05-07", 0) is None


def test_new_task_factory() -> None:
    g = new_task(" Ship it ", task_type="yearly", time_frame_key="2024", due_date="2024-01-01", recurring_goal=True)

    assert g.name == "Ship it"
    assert g.type is TaskType.YEARLY
    assert g.due_date is None
    assert g.repeated_days == ("yearly",)
    assert g.is_recurring
    assert new_task("x").id != new_task("x").id


def test_duplicate_and_postpone(store: TaskStore) -> None:
    store.add_task(Task(id="a", name="A", due_date="2024-05-06", priority=Priority.HIGH, is_completed=True))

    copy = duplicate_task(store, "a")
    assert copy is not None
    assert copy.id != "a"
    assert copy.is_completed is False
    assert copy.priority is Priority.LOW
    assert copy.position == 2

    assert move_to_next_day(store, "a") is True
    assert store.get_task("a").due_date == "2024-05-07"
    assert move_to_next_week(store, "a") is True
    assert store.get_task("a").due_date == "2024-05-14"
    assert move_to_next_day(store, "missing") is False
    assert duplicate_task(store, "missing") is None


def test_add_focus_minutes(store: TaskStore) -> None:
    store.add_task(Task(id="a", name="A", due_date="2024-05-06", focus_minutes=25))

    assert add_focus_minutes(store, "a", 25) == 50
    assert store.get_task("a").focus_minutes == 50
    assert add_focus_minutes(store, "a", 0) is None
    assert add_focus_minutes(store, "missing", 10) is None
