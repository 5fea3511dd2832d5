# src/lifeplan/tasks/board.py

"""
Drag-and-drop moves composed from TaskStore operations.

Buckets (drop targets) are addressed by string ids:
- a day column:   "2025-04-10"
- a goal column:  "<type>:<time-frame key>", e.g. "weekly:2025-W15", "life:life"

Recurring items are templates: dragging one to another bucket never touches
the source record, a one-off copy is created in the destination instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from ..core.ports import TaskRepo
from .task_api import new_task_id
from .task_models import Task, TaskType
from .timeframes import is_date_string, parse_date, parse_time_frame_key

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class Bucket:
    task_type: TaskType
    key: str  # date for day columns, time-frame key for goal columns

    @classmethod
    def parse(cls, bucket_id: str) -> Bucket:
        if ":" in bucket_id:
            raw_type, key = bucket_id.split(":", 1)
            tt = TaskType(raw_type)
            if not tt.is_goal:
                raise ValueError(f"goal bucket needs a goal type: {bucket_id!r}")
            parse_time_frame_key(key)
            return cls(tt, key)
        if not is_date_string(bucket_id):
            raise ValueError(f"not a bucket id: {bucket_id!r}")
        parse_date(bucket_id)
        return cls(TaskType.DAILY, bucket_id)

    @property
    def is_day(self) -> bool:
        return self.task_type is TaskType.DAILY

    @property
    def bucket_id(self) -> str:
        return self.key if self.is_day else f"{self.task_type.value}:{self.key}"


def instance_id(task: Task, occurrence: str) -> str:
    """Draggable id: overlay occurrences get "<id>:<occurrence>" so copies stay distinct."""
    return f"{task.id}:{occurrence}" if task.uses_overlay(occurrence) else task.id


def extract_task_id(draggable_id: str) -> str:
    return draggable_id.split(":", 1)[0]


def bucket_tasks(store: TaskRepo, bucket: Bucket) -> list[Task]:
    if bucket.is_day:
        return store.get_tasks_for_date(bucket.key)
    return store.get_tasks_by_type(bucket.task_type, bucket.key)


def bucket_ids(store: TaskRepo, bucket: Bucket) -> list[str]:
    return [t.id for t in bucket_tasks(store, bucket)]


def _insert_and_reorder(store: TaskRepo, bucket: Bucket, task_id: str, index: int) -> None:
    ids = [i for i in bucket_ids(store, bucket) if i != task_id]
    ids.insert(max(0, index), task_id)
    store.reorder_tasks(bucket.key, ids)


def _fork(task: Task, dest: Bucket) -> Task:
    return replace(
        task,
        id=new_task_id(),
        type=dest.task_type,
        due_date=dest.key if dest.is_day else None,
        time_frame_key=None if dest.is_day else dest.key,
        repeated_days=(),
        is_completed=False,
        completed_dates=(),
        position=None,
        positions_by_date={},
        positions_by_time_frame={},
    )


def move_item(
    store: TaskRepo,
    draggable_id: str,
    source_id: str,
    destination_id: str,
    index: int,
    *,
    duplicate_when_dragging: bool = False,
) -> Task | None:
    """
    Apply one drop: `draggable_id` leaves `source_id` and lands at `index` in `destination_id`.

    Returns the record now sitting in the destination (the dragged record or its fork),
    or None if the dragged id is unknown.
    """
    task_id = extract_task_id(draggable_id)
    task = store.get_task(task_id)
    if task is None:
        return None

    source = Bucket.parse(source_id)
    dest = Bucket.parse(destination_id)

    if source == dest:
        _insert_and_reorder(store, dest, task_id, index)
        return store.get_task(task_id)

    fork = task.is_recurring or (duplicate_when_dragging and not (source.is_day and dest.is_day))
    if fork:
        added = store.add_task(_fork(task, dest))
        _insert_and_reorder(store, dest, added.id, index)
        logger.info("Forked %s from %s into %s as %s", task_id, source.bucket_id, dest.bucket_id, added.id)
        return store.get_task(added.id)

    if dest.is_day:
        store.update_task(task_id, type=TaskType.DAILY, due_date=dest.key, time_frame_key=None)
    else:
        store.update_task(task_id, type=dest.task_type, due_date=None, time_frame_key=dest.key)

    store.reorder_tasks(source.key, [i for i in bucket_ids(store, source) if i != task_id])
    _insert_and_reorder(store, dest, task_id, index)
    logger.info("Moved %s from %s to %s", task_id, source.bucket_id, dest.bucket_id)
    return store.get_task(task_id)
