# tests/test_analytics.py

from __future__ import annotations

from datetime import date

import pytest

from lifeplan.tasks import analytics
from lifeplan.tasks.task_models import Priority, Task, TaskType
from lifeplan.tasks.task_store import TaskStore


def test_completion_rate_is_weighted_by_priority(store: TaskStore) -> None:
    store.add_task(Task(id="h", name="H", due_date="2024-05-06", priority=Priority.HIGH, focus_minutes=90))
    store.add_task(Task(id="l", name="L", due_date="2024-05-06"))
    store.toggle_complete("h", "2024-05-06")

    rate = analytics.completion_rate(store, "2024-05-06")

    assert (rate.completed, rate.total) == (1, 2)
    assert (rate.points, rate.max_points) == (3, 4)
    assert rate.rate == 75.0
    assert rate.focus_hours == 1.5
    assert analytics.completion_rate(store, "2024-05-07").total == 0


def test_streaks(store: TaskStore) -> None:
    store.add_task(Task(id="h", name="H", due_date="2024-05-01", repeated_days=("Wednesday", "Thursday", "Friday")))
    for day in ("2024-05-01", "2024-05-02", "2024-05-03", "2024-05-09", "2024-05-10"):
        store.toggle_complete("h", day)

    # 05-08 (Wed) was missed, so the run ending on Friday 05-10 is two days long
    assert analytics.current_streak(store, date(2024, 5, 10)) == 2
    assert analytics.current_streak(store, date(2024, 5, 11)) == 0
    assert analytics.longest_streak(store, date(2024, 5, 10)) == 3


def test_totals_and_goal_stats() -> None:
    tasks = [
        Task(id="a", name="A", due_date="2024-05-06", is_completed=True, focus_minutes=25),
        Task(id="h", name="H", due_date="2024-05-06", repeated_days=("Monday",), completed_dates=("2024-05-06", "2024-05-13")),
        Task(id="g1", name="G1", type=TaskType.WEEKLY, time_frame_key="2024-W19", is_completed=True, focus_minutes=50),
        Task(id="g2", name="G2", type=TaskType.LIFE, time_frame_key="life"),
    ]

    assert analytics.total_completed(tasks) == 3
    assert analytics.total_focus_minutes(tasks) == 75
    assert analytics.focus_sessions(tasks, 25) == 3
    assert analytics.focus_sessions(tasks, 0) == 0

    goals = analytics.goal_stats(tasks)
    assert (goals.total, goals.completed, goals.rate) == (2, 1, 50.0)


def test_breakdowns() -> None:
    tasks = [
        Task(id="a", name="A", due_date="2024-05-06", priority=Priority.HIGH, is_completed=True, tags=("Work",)),
        Task(id="b", name="B", due_date="2024-05-06", tags=("Work", "Health")),
        Task(id="c", name="C", due_date="2024-05-07", priority=Priority.MEDIUM),
    ]

    by_day = {s.name: s for s in analytics.completion_by_weekday(tasks)}
    assert (by_day["Monday"].completed, by_day["Monday"].total) == (1, 2)
    assert by_day["Monday"].rate == 75.0
    assert by_day["Tuesday"].rate == 0.0
    assert by_day["Sunday"].total == 0

    by_priority = [(s.name, s.completed, s.total) for s in analytics.completion_by_priority(tasks)]
    assert by_priority == [("High", 1, 1), ("Medium", 0, 1), ("Low", 0, 1)]

    tags = analytics.tag_stats(tasks, known_tags=("Study",))
    assert [(t.tag, t.usage, t.productivity) for t in tags] == [
        ("Work", 67, 50),
        ("Health", 33, 0),
        ("Study", 0, 0),
    ]


def test_habits_and_habit_streak() -> None:
    low = Task(id="l", name="L", due_date="2024-05-01", repeated_days=("Monday",))
    high = Task(
        id="h",
        name="H",
        due_date="2024-05-01",
        priority=Priority.HIGH,
        repeated_days=("Monday", "Tuesday", "Wednesday"),
        completed_dates=("2024-05-06", "2024-05-08", "2024-05-07", "2024-05-01"),
    )
    one_off = Task(id="o", name="O", due_date="2024-05-01")

    assert [t.id for t in analytics.habits([low, one_off, high])] == ["h", "l"]
    assert analytics.habit_streak(high) == 3
    assert analytics.habit_streak(low) == 0


def test_achievements() -> None:
    items = {a.id: a for a in analytics.achievements(longest=8, goals_completed=5, sessions=120)}

    assert set(items) == {"streak-7", "streak-30", "streak-100", "goals-10", "goals-50", "goals-100", "focus-100", "focus-500"}
    assert items["streak-7"].achieved is True
    assert items["streak-7"].progress == 100
    assert items["streak-30"].achieved is False
    assert items["goals-10"].progress == 50.0
    assert items["focus-100"].achieved is True
    assert items["focus-500"].progress == pytest.approx(24.0)


def test_breakdowns_skip_unparseable_dates() -> None:
    tasks = [
        Task(id="a", name="A", due_date="2024-05-06", is_completed=True),
        Task(id="b", name="B", due_date="2024-02-30"),
        Task(id="c", name="C", due_date="05/06/2024"),
    ]

    by_day = {s.name: s for s in analytics.completion_by_weekday(tasks)}
    assert sum(s.total for s in by_day.values()) == 1
    assert (by_day["Monday"].completed, by_day["Monday"].total) == (1, 1)

    habit = Task(
        id="h",
        name="H",
        due_date="2024-05-01",
        repeated_days=("Monday",),
        completed_dates=("2024-05-06", "2024-05-05", "not-a-day", "2024-02-30"),
    )
    assert analytics.habit_streak(habit) == 2
