# src/lifeplan/tasks/demo.py

from __future__ import annotations

import logging
from datetime import date, timedelta

from .task_models import Priority, Task, TaskType
from .task_store import TaskStore
from .timeframes import format_date, month_key, week_key, year_key

logger = logging.getLogger(__name__)


def demo_tasks(today: date) -> list[Task]:
    """A small starter board: a few tasks around today plus one goal per horizon."""
    tomorrow = today + timedelta(days=1)
    return [
        Task(
            id="demo-1",
            name="Complete project proposal",
            description="Finish the draft and send it to the team for review",
            due_date=format_date(today),
            tags=("Work",),
            priority=Priority.HIGH,
            repeated_days=("Monday", "Wednesday", "Friday"),
            position=1,
        ),
        Task(
            id="demo-2",
            name="Go for a run",
            description="30 minutes jogging in the park",
            due_date=format_date(today),
            tags=("Health",),
            priority=Priority.MEDIUM,
            repeated_days=("Monday", "Tuesday", "Wednesday", "Thursday", "Friday"),
            position=2,
        ),
        Task(
            id="demo-3",
            name="Buy groceries",
            description="Milk, eggs, bread, and vegetables",
            due_date=format_date(tomorrow),
            tags=("Personal",),
            priority=Priority.LOW,
            position=1,
        ),
        Task(
            id="demo-4",
            name="Complete online course",
            description="Finish the advanced course",
            type=TaskType.WEEKLY,
            time_frame_key=week_key(today),
            tags=("Learning",),
            priority=Priority.MEDIUM,
            repeated_days=("weekly",),
            position=1,
        ),
        Task(
            id="demo-5",
            name="Read 2 books",
            description="Fiction and non-fiction",
            type=TaskType.MONTHLY,
            time_frame_key=month_key(today),
            tags=("Personal",),
            repeated_days=("monthly",),
            position=1,
        ),
        Task(
            id="demo-6",
            name="Learn a new language",
            description="Reach intermediate level in Spanish",
            type=TaskType.YEARLY,
            time_frame_key=year_key(today),
            tags=("Learning",),
            priority=Priority.HIGH,
            repeated_days=("yearly",),
            position=1,
        ),
    ]


def seed_if_empty(store: TaskStore, today: date) -> bool:
    if store.count_tasks() > 0:
        return False
    for task in demo_tasks(today):
        store.add_task(task)
    logger.info("Seeded demo tasks: %d", store.count_tasks())
    return True
