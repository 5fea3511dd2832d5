# src/lifeplan/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The store depends on Protocols instead of concrete implementations.
This keeps storage/notification swappable and makes testing easier.
"""

from collections.abc import Iterable, Sequence
from typing import Any, Protocol


class KeyValueStorage(Protocol):
    """
    Durable string slots addressed by a fixed key.

    The task store writes its whole record set into one slot after every
    mutation and reads it back at startup.
    """

    def get_item(self, key: str) -> str | None: ...
    def set_item(self, key: str, value: str) -> None: ...
    def remove_item(self, key: str) -> None: ...


class CompletionNotifier(Protocol):
    """Fire-and-forget signal when an occurrence becomes completed."""

    def task_completed(self, task: Any, occurrence: str) -> None: ...


class TaskRepo(Protocol):
    # Mutations
    def add_task(self, task: Any) -> Any: ...
    def update_task(self, task_id: str, **updates: Any) -> None: ...
    def delete_task(self, task_id: str) -> None: ...
    def toggle_complete(self, task_id: str, occurrence: str) -> None: ...
    def reorder_tasks(self, bucket: str, ordered_ids: Iterable[str]) -> None: ...
    def set_task_position_for_date(self, task_id: str, day: str, position: int) -> None: ...
    def set_goal_position_for_time_frame(self, task_id: str, key: str, position: int) -> None: ...

    # Derived views
    def get_task(self, task_id: str) -> Any | None: ...
    def list_tasks(self) -> Sequence[Any]: ...
    def get_tasks_for_date(self, day: str) -> list[Any]: ...
    def get_tasks_by_type(self, task_type: Any, time_frame_key: str | None = None) -> list[Any]: ...
    def is_task_completed_on_date(self, task_id: str, occurrence: str) -> bool: ...
    def get_task_position_for_date(self, task_id: str, day: str) -> int: ...
    def get_goal_position_for_time_frame(self, task_id: str, key: str) -> int: ...
