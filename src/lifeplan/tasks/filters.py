# src/lifeplan/tasks/filters.py

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from .task_models import Priority, Task


@dataclass(slots=True, frozen=True)
class ViewPreferences:
    """Board filters chosen by the user."""

    show_completed: bool = True
    show_habits: bool = True
    selected_tags: tuple[str, ...] = field(default_factory=tuple)
    selected_priority: Priority | None = None


def filter_tasks(tasks: Iterable[Task], occurrence: str, prefs: ViewPreferences) -> list[Task]:
    """
    Apply view preferences to the records shown for one occurrence.

    Completion is judged on that occurrence; tag matching ignores case.
    """
    out: Sequence[Task] = list(tasks)

    if not prefs.show_completed:
        out = [t for t in out if not t.is_completed_on(occurrence)]

    if not prefs.show_habits:
        out = [t for t in out if not t.repeated_days]

    if prefs.selected_tags:
        wanted = {tag.lower() for tag in prefs.selected_tags}
        out = [t for t in out if any(tag.lower() in wanted for tag in t.tags)]

    if prefs.selected_priority is not None:
        out = [t for t in out if t.priority is prefs.selected_priority]

    return list(out)
