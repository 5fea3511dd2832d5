# src/lifeplan/tasks/errors.py

from __future__ import annotations


class TaskStoreError(Exception):
    """Base class for task store errors."""


class DuplicateTaskError(TaskStoreError):
    def __init__(self, task_id: str) -> None:
        super().__init__(f"task id already exists: {task_id!r}")
        self.task_id = task_id


class InvalidDateError(TaskStoreError, ValueError):
    """A date or time-frame key could not be parsed."""
