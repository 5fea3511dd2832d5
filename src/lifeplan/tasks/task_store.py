# src/lifeplan/tasks/task_store.py

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Sequence
from dataclasses import replace
from typing import Any

from ..core.ports import CompletionNotifier, KeyValueStorage
from .errors import DuplicateTaskError, InvalidDateError
from .task_models import POSITION_SENTINEL, UPDATABLE_FIELDS, Task, TaskType
from .timeframes import (
    WEEKDAYS,
    key_at_or_before,
    parse_date,
    parse_time_frame_key,
    validate_bucket,
    weekday_name,
)

logger = logging.getLogger(__name__)

DEFAULT_STORE_KEY = "task-store"
STORE_FORMAT_VERSION = 0


class TaskStore:
    """
    In-memory task/goal store with write-through persistence.

    Records are immutable; every mutation swaps in a new record tuple and then
    writes the full set into one storage slot (best-effort: storage errors are
    logged, the in-memory state stays authoritative).

    Occurrences:
    - daily tasks are viewed per date ("YYYY-MM-DD"),
    - goals are viewed per time-frame key ("2025-W15", "2025-04", "2025", "life").
    Completion and position of an occurrence resolve through Task.uses_overlay.

    Unknown ids are silent no-ops for every mutation.
    """

    def __init__(
        self,
        storage: KeyValueStorage | None = None,
        *,
        key: str = DEFAULT_STORE_KEY,
        notifier: CompletionNotifier | None = None,
    ) -> None:
        self._storage = storage
        self._key = key
        self._notifier = notifier
        self._tasks: tuple[Task, ...] = tuple(self._load())
        logger.info("TaskStore ready key=%s total=%s", self._key, len(self._tasks))

    # ---- persistence ----

    def _load(self) -> list[Task]:
        if self._storage is None:
            return []
        try:
            raw = self._storage.get_item(self._key)
        except Exception:
            logger.exception("Failed to read task store slot key=%s; starting empty.", self._key)
            return []
        if not raw:
            return []

        try:
            data = json.loads(raw)
        except ValueError:
            logger.exception("Task store slot key=%s is not valid JSON; starting empty.", self._key)
            return []

        if isinstance(data, dict):
            records = (data.get("state") or {}).get("tasks", [])
        else:
            records = data
        if not isinstance(records, list):
            logger.warning("Task store slot key=%s has no task list; starting empty.", self._key)
            return []

        out: list[Task] = []
        seen: set[str] = set()
        for rec in records:
            if not isinstance(rec, dict):
                continue
            try:
                task = Task.from_record(rec)
            except (TypeError, ValueError):
                logger.warning("Skipping unreadable task record: %r", rec)
                continue
            if task.id in seen:
                logger.warning("Skipping duplicate task id on load: %s", task.id)
                continue
            seen.add(task.id)
            out.append(task)
        return out

    def _dump(self) -> str:
        payload = {
            "state": {"tasks": [t.to_record() for t in self._tasks]},
            "version": STORE_FORMAT_VERSION,
        }
        return json.dumps(payload, ensure_ascii=False)

    def _persist(self) -> None:
        if self._storage is None:
            return
        try:
            self._storage.set_item(self._key, self._dump())
        except Exception:
            logger.exception("Failed to persist task store key=%s", self._key)

    def _commit(self, tasks: Iterable[Task]) -> None:
        self._tasks = tuple(tasks)
        self._persist()

    # ---- low-level helpers ----

    def _find(self, task_id: str) -> tuple[int, Task] | None:
        for i, t in enumerate(self._tasks):
            if t.id == task_id:
                return i, t
        return None

    def _replace_at(self, index: int, task: Task) -> None:
        tasks = list(self._tasks)
        tasks[index] = task
        self._commit(tasks)

    @staticmethod
    def _validate_anchor(task: Task) -> None:
        if task.due_date is not None:
            parse_date(task.due_date)
        if task.time_frame_key is not None:
            parse_time_frame_key(task.time_frame_key)

    @staticmethod
    def _with_position(task: Task, occurrence: str, position: int) -> Task:
        if not task.uses_overlay(occurrence):
            return replace(task, position=int(position))
        if task.type is TaskType.DAILY:
            by_date = {**task.positions_by_date, occurrence: int(position)}
            return replace(task, positions_by_date=by_date)
        by_frame = {**task.positions_by_time_frame, occurrence: int(position)}
        return replace(task, positions_by_time_frame=by_frame)

    def _next_position(self, task: Task) -> int:
        if task.type is TaskType.DAILY and task.due_date:
            weekday = weekday_name(task.due_date)
            bucket = [
                t
                for t in self._tasks
                if t.type is TaskType.DAILY
                and (t.due_date == task.due_date or t.recurs_on_weekday(weekday))
            ]
        else:
            bucket = [
                t
                for t in self._tasks
                if t.type is task.type and t.time_frame_key == task.time_frame_key
            ]
        positions = [t.position for t in bucket if t.position is not None]
        return max(positions, default=0) + 1

    def _notify_completed(self, task: Task, occurrence: str) -> None:
        if self._notifier is None:
            return
        try:
            self._notifier.task_completed(task, occurrence)
        except Exception:
            logger.exception("Completion notifier failed task_id=%s", task.id)

    # ---- mutations ----

    def add_task(self, task: Task) -> Task:
        """
        Append a record and return it as stored.

        - position unset -> placed after everything already in its bucket
        - recurring record -> its anchor occurrence gets a matching overlay entry
        """
        if not task.id:
            raise ValueError("id is required")
        if not task.name or not task.name.strip():
            raise ValueError("name is required")
        self._validate_anchor(task)
        if self._find(task.id) is not None:
            raise DuplicateTaskError(task.id)

        if task.position is None:
            task = replace(task, position=self._next_position(task))

        anchor = task.anchor
        if task.is_recurring and anchor and anchor not in task.overlay_positions:
            task = self._with_position(task, anchor, task.position)

        self._commit((*self._tasks, task))
        logger.debug(
            "Task added id=%s type=%s due=%s frame=%s position=%s",
            task.id,
            task.type.value,
            task.due_date,
            task.time_frame_key,
            task.position,
        )
        return task

    def update_task(self, task_id: str, **updates: Any) -> None:
        """Shallow-merge `updates` (Task attribute names) into the record."""
        if "id" in updates:
            raise ValueError("id cannot be changed")
        unknown = set(updates) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"unknown task fields: {sorted(unknown)}")
        if not updates:
            return

        found = self._find(task_id)
        if found is None:
            logger.debug("update_task: unknown id=%s", task_id)
            return
        index, task = found

        updated = replace(task, **updates)
        self._validate_anchor(updated)
        self._replace_at(index, updated)
        logger.debug("Task updated id=%s fields=%s", task_id, sorted(updates))

    def delete_task(self, task_id: str) -> None:
        remaining = [t for t in self._tasks if t.id != task_id]
        if len(remaining) == len(self._tasks):
            return
        self._commit(remaining)
        logger.debug("Task deleted id=%s", task_id)

    def toggle_complete(self, task_id: str, occurrence: str) -> None:
        """
        Flip completion of one occurrence (a date for tasks, a key for goals).

        Overlay occurrences toggle membership in completed_dates; the anchor
        occurrence of a one-off record flips is_completed.
        """
        validate_bucket(occurrence)
        found = self._find(task_id)
        if found is None:
            return
        index, task = found

        if task.uses_overlay(occurrence):
            if occurrence in task.completed_dates:
                dates = tuple(d for d in task.completed_dates if d != occurrence)
                now_done = False
            else:
                dates = (*task.completed_dates, occurrence)
                now_done = True
            updated = replace(task, completed_dates=dates)
        else:
            now_done = not task.is_completed
            updated = replace(task, is_completed=now_done)

        self._replace_at(index, updated)
        logger.debug("Task toggled id=%s occurrence=%s done=%s", task_id, occurrence, now_done)
        if now_done:
            self._notify_completed(updated, occurrence)

    def reorder_tasks(self, bucket: str, ordered_ids: Iterable[str]) -> None:
        """Give each listed id position index+1 within `bucket` (date or key)."""
        validate_bucket(bucket)
        wanted = {task_id: i + 1 for i, task_id in enumerate(ordered_ids)}
        if not wanted:
            return

        changed = False
        tasks: list[Task] = []
        for t in self._tasks:
            pos = wanted.get(t.id)
            if pos is not None:
                t = self._with_position(t, bucket, pos)
                changed = True
            tasks.append(t)

        if changed:
            self._commit(tasks)
            logger.debug("Reordered bucket=%s ids=%d", bucket, len(wanted))

    def set_task_position_for_date(self, task_id: str, day: str, position: int) -> None:
        parse_date(day)
        found = self._find(task_id)
        if found is None:
            return
        index, task = found
        self._replace_at(index, self._with_position(task, day, position))

    def set_goal_position_for_time_frame(self, task_id: str, key: str, position: int) -> None:
        parse_time_frame_key(key)
        found = self._find(task_id)
        if found is None:
            return
        index, task = found
        self._replace_at(index, self._with_position(task, key, position))

    def replace_all(self, tasks: Iterable[Task]) -> None:
        """Swap the whole record set (import / demo seeding)."""
        new = tuple(tasks)
        seen: set[str] = set()
        for t in new:
            if t.id in seen:
                raise DuplicateTaskError(t.id)
            seen.add(t.id)
            self._validate_anchor(t)
        self._commit(new)
        logger.info("Task store replaced total=%s", len(new))

    # ---- derived views ----

    def count_tasks(self) -> int:
        return len(self._tasks)

    def list_tasks(self) -> Sequence[Task]:
        return self._tasks

    def get_task(self, task_id: str) -> Task | None:
        found = self._find(task_id)
        return found[1] if found else None

    def get_tasks_for_date(self, day: str) -> list[Task]:
        """
        Daily tasks visible on `day`, ordered by their position on that day.

        Visible means: due that day, or recurring on its weekday and not
        before the task's due date.
        """
        d = parse_date(day)
        weekday = WEEKDAYS[d.weekday()]

        def visible(t: Task) -> bool:
            if t.type is not TaskType.DAILY:
                return False
            if t.due_date == day:
                return True
            if not t.recurs_on_weekday(weekday):
                return False
            if t.due_date is None:
                return True
            try:
                return d >= parse_date(t.due_date)
            except InvalidDateError:
                logger.debug("Ignoring task with bad due date id=%s due=%r", t.id, t.due_date)
                return False

        return sorted((t for t in self._tasks if visible(t)), key=lambda t: t.position_on(day))

    def get_tasks_by_type(self, task_type: TaskType | str, time_frame_key: str | None = None) -> list[Task]:
        """
        Records of `task_type`, optionally limited to one time frame.

        With a key: goals of exactly that key, plus recurring goals that
        started in that period or earlier.
        """
        tt = TaskType(task_type)
        if time_frame_key is None:
            same_type = [t for t in self._tasks if t.type is tt]
            return sorted(
                same_type,
                key=lambda t: POSITION_SENTINEL if t.position is None else t.position,
            )

        parse_time_frame_key(time_frame_key)

        def visible(t: Task) -> bool:
            if t.type is not tt:
                return False
            if t.time_frame_key == time_frame_key:
                return True
            if not (tt.is_goal and t.is_recurring and t.time_frame_key):
                return False
            try:
                return key_at_or_before(t.time_frame_key, time_frame_key)
            except InvalidDateError:
                logger.debug("Ignoring goal with bad time-frame key id=%s key=%r", t.id, t.time_frame_key)
                return False

        return sorted(
            (t for t in self._tasks if visible(t)),
            key=lambda t: t.position_on(time_frame_key),
        )

    def is_task_completed_on_date(self, task_id: str, occurrence: str) -> bool:
        task = self.get_task(task_id)
        return task.is_completed_on(occurrence) if task else False

    def get_task_position_for_date(self, task_id: str, day: str) -> int:
        task = self.get_task(task_id)
        return task.position_on(day) if task else POSITION_SENTINEL

    def get_goal_position_for_time_frame(self, task_id: str, key: str) -> int:
        task = self.get_task(task_id)
        return task.position_on(key) if task else POSITION_SENTINEL
