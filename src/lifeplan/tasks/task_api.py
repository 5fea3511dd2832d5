# src/lifeplan/tasks/task_api.py

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable
from dataclasses import replace

from ..core.ports import TaskRepo
from .task_models import Priority, Task, TaskType
from .timeframes import add_days

logger = logging.getLogger(__name__)


def new_task_id() -> str:
    return str(uuid.uuid4())


def new_task(
    name: str,
    *,
    task_type: TaskType | str = TaskType.DAILY,
    due_date: str | None = None,
    time_frame_key: str | None = None,
    description: str = "",
    priority: Priority | str = Priority.LOW,
    tags: Iterable[str] = (),
    repeated_days: Iterable[str] = (),
    recurring_goal: bool = False,
    position: int | None = None,
) -> Task:
    """
    Convenience factory: a fresh record with a generated id.

    `recurring_goal=True` marks a goal as repeating every period.
    """
    tt = TaskType(task_type)
    days = list(repeated_days)
    if recurring_goal and tt.is_goal and tt.value not in days:
        days = [tt.value]

    return Task(
        id=new_task_id(),
        name=name.strip(),
        type=tt,
        description=description,
        due_date=due_date if tt is TaskType.DAILY else None,
        time_frame_key=None if tt is TaskType.DAILY else time_frame_key,
        repeated_days=tuple(days),
        priority=Priority(priority),
        tags=tuple(tags),
        position=position,
    )


def duplicate_task(store: TaskRepo, task_id: str) -> Task | None:
    """Copy a record under a new id; the copy starts uncompleted at the end of its bucket."""
    src = store.get_task(task_id)
    if src is None:
        return None
    copy = replace(
        src,
        id=new_task_id(),
        is_completed=False,
        completed_dates=(),
        position=None,
        positions_by_date={},
        positions_by_time_frame={},
        priority=Priority.LOW,
    )
    return store.add_task(copy)


def _shift_due_date(store: TaskRepo, task_id: str, days: int) -> bool:
    task = store.get_task(task_id)
    if task is None or task.type is not TaskType.DAILY or not task.due_date:
        return False
    store.update_task(task_id, due_date=add_days(task.due_date, days))
    return True


def move_to_next_day(store: TaskRepo, task_id: str) -> bool:
    return _shift_due_date(store, task_id, 1)


def move_to_next_week(store: TaskRepo, task_id: str) -> bool:
    return _shift_due_date(store, task_id, 7)


def add_focus_minutes(store: TaskRepo, task_id: str, minutes: int) -> int | None:
    """
    Credit focused minutes to a record (the focus timer calls this on completion).

    Returns the new total, or None if the id is unknown or minutes <= 0.
    """
    if not task_id or minutes <= 0:
        return None
    task = store.get_task(task_id)
    if task is None:
        return None
    total = task.focus_minutes + int(minutes)
    store.update_task(task_id, focus_minutes=total)
    logger.debug("Focus minutes added id=%s +%s total=%s", task_id, minutes, total)
    return total
