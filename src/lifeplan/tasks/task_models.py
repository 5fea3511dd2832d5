# src/lifeplan/tasks/task_models.py

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import Any

POSITION_SENTINEL = 999


class TaskType(StrEnum):
    """
    Horizon of a record.

    "daily" records are tasks anchored on a date; every other type is a goal
    anchored on a time-frame key.
    """

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    LIFE = "life"

    @classmethod
    def from_db(cls, raw: str | None) -> TaskType:
        if not raw:
            return cls.DAILY
        try:
            return cls(raw)
        except ValueError:
            return cls.DAILY

    @property
    def is_goal(self) -> bool:
        return self is not TaskType.DAILY


class Priority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def from_db(cls, raw: str | None) -> Priority:
        if not raw:
            return cls.LOW
        try:
            return cls(raw)
        except ValueError:
            return cls.LOW

    @property
    def points(self) -> int:
        return {Priority.LOW: 1, Priority.MEDIUM: 2, Priority.HIGH: 3}[self]


class Recurrence(StrEnum):
    """
    How a record projects onto occurrences.

    Persisted data encodes this in `repeatedDays`:
    - daily tasks recur on the listed weekday names,
    - goals recur every period when the list contains their own type string.
    """

    NONE = "none"
    WEEKDAYS = "weekdays"
    EVERY_PERIOD = "every_period"


def _unique(values: Iterable[Any] | str) -> tuple[str, ...]:
    if isinstance(values, str):
        values = (values,) if values else ()
    seen: dict[str, None] = {}
    for v in values or ():
        s = str(v)
        if s not in seen:
            seen[s] = None
    return tuple(seen)


def _int_map(raw: Any) -> dict[str, int]:
    if not isinstance(raw, Mapping):
        return {}
    out: dict[str, int] = {}
    for k, v in raw.items():
        try:
            out[str(k)] = int(v)
        except (TypeError, ValueError):
            continue
    return out


@dataclass(slots=True, frozen=True)
class Task:
    id: str
    name: str
    type: TaskType = TaskType.DAILY
    description: str = ""
    due_date: str | None = None
    time_frame_key: str | None = None
    repeated_days: tuple[str, ...] = ()
    priority: Priority = Priority.LOW
    tags: tuple[str, ...] = ()

    # Accumulated focused minutes (persisted as "pomodoros").
    focus_minutes: int = 0

    is_completed: bool = False
    completed_dates: tuple[str, ...] = ()

    position: int | None = None
    # Read-only views; the store swaps in new mappings via dataclasses.replace.
    positions_by_date: Mapping[str, int] = field(default_factory=dict)
    positions_by_time_frame: Mapping[str, int] = field(default_factory=dict)

    # Persisted keys this version does not know about, written back unchanged.
    extra: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", TaskType(self.type))
        object.__setattr__(self, "priority", Priority(self.priority))
        object.__setattr__(self, "repeated_days", _unique(self.repeated_days))
        object.__setattr__(self, "tags", _unique(self.tags))
        object.__setattr__(self, "completed_dates", _unique(self.completed_dates))
        object.__setattr__(self, "positions_by_date", MappingProxyType(dict(self.positions_by_date or {})))
        object.__setattr__(self, "positions_by_time_frame", MappingProxyType(dict(self.positions_by_time_frame or {})))
        object.__setattr__(self, "extra", MappingProxyType(dict(self.extra or {})))
        if self.focus_minutes < 0:
            raise ValueError("focus_minutes must be >= 0")

    # ---- occurrence resolution ----

    @property
    def recurrence(self) -> Recurrence:
        if self.type is TaskType.DAILY:
            return Recurrence.WEEKDAYS if self.repeated_days else Recurrence.NONE
        return Recurrence.EVERY_PERIOD if self.type.value in self.repeated_days else Recurrence.NONE

    @property
    def is_recurring(self) -> bool:
        return self.recurrence is not Recurrence.NONE

    @property
    def anchor(self) -> str | None:
        """The single occurrence a non-recurring record lives on."""
        return self.due_date if self.type is TaskType.DAILY else self.time_frame_key

    @property
    def overlay_positions(self) -> Mapping[str, int]:
        return self.positions_by_date if self.type is TaskType.DAILY else self.positions_by_time_frame

    def uses_overlay(self, occurrence: str) -> bool:
        """
        Whether completion/position for `occurrence` live in the overlays.

        Overlays apply to recurring records and to any occurrence other than
        the record's own anchor; plain `is_completed`/`position` otherwise.
        """
        return self.is_recurring or occurrence != self.anchor

    def is_completed_on(self, occurrence: str) -> bool:
        if self.uses_overlay(occurrence):
            return occurrence in self.completed_dates
        return self.is_completed

    def position_on(self, occurrence: str) -> int:
        if self.uses_overlay(occurrence):
            pos = self.overlay_positions.get(occurrence, self.position)
        else:
            pos = self.position
        return POSITION_SENTINEL if pos is None else pos

    def recurs_on_weekday(self, weekday: str) -> bool:
        return self.recurrence is Recurrence.WEEKDAYS and weekday in self.repeated_days

    # ---- persisted shape ----

    def to_record(self) -> dict[str, Any]:
        rec: dict[str, Any] = dict(self.extra)
        rec.update(
            {
                "id": self.id,
                "name": self.name,
                "description": self.description,
                "type": self.type.value,
                "priority": self.priority.value,
                "tags": list(self.tags),
                "repeatedDays": list(self.repeated_days),
                "pomodoros": self.focus_minutes,
                "isCompleted": self.is_completed,
                "completedDates": list(self.completed_dates),
                "positionsByDate": dict(self.positions_by_date),
                "positionsByTimeFrame": dict(self.positions_by_time_frame),
            }
        )
        if self.due_date is not None:
            rec["dueDate"] = self.due_date
        if self.time_frame_key is not None:
            rec["timeFrameKey"] = self.time_frame_key
        if self.position is not None:
            rec["position"] = self.position
        return rec

    @classmethod
    def from_record(cls, rec: Mapping[str, Any]) -> Task:
        """
        Build a Task from a persisted record.

        Tolerant of older data: missing overlays become empty, unknown enum
        values fall back to defaults, "focusMinutes" is accepted for "pomodoros".
        """
        raw_id = rec.get("id")
        if raw_id is None or str(raw_id) == "":
            raise ValueError("record has no id")

        minutes_raw = rec.get("pomodoros", rec.get("focusMinutes", 0))
        try:
            minutes = max(0, int(minutes_raw or 0))
        except (TypeError, ValueError):
            minutes = 0

        position_raw = rec.get("position")
        try:
            position = int(position_raw) if position_raw is not None else None
        except (TypeError, ValueError):
            position = None

        extra = {k: v for k, v in rec.items() if k not in _KNOWN_KEYS}

        return cls(
            id=str(raw_id),
            name=str(rec.get("name") or ""),
            type=TaskType.from_db(rec.get("type")),
            description=str(rec.get("description") or ""),
            due_date=rec.get("dueDate") or None,
            time_frame_key=rec.get("timeFrameKey") or None,
            repeated_days=rec.get("repeatedDays") or (),
            priority=Priority.from_db(rec.get("priority")),
            tags=rec.get("tags") or (),
            focus_minutes=minutes,
            is_completed=bool(rec.get("isCompleted", False)),
            completed_dates=rec.get("completedDates") or (),
            position=position,
            positions_by_date=_int_map(rec.get("positionsByDate")),
            positions_by_time_frame=_int_map(rec.get("positionsByTimeFrame")),
            extra=extra,
        )


_KNOWN_KEYS = frozenset(
    {
        "id",
        "name",
        "description",
        "type",
        "dueDate",
        "timeFrameKey",
        "repeatedDays",
        "priority",
        "tags",
        "pomodoros",
        "focusMinutes",
        "isCompleted",
        "completedDates",
        "position",
        "positionsByDate",
        "positionsByTimeFrame",
    }
)

# Python attribute names accepted by TaskStore.update_task.
UPDATABLE_FIELDS = frozenset(
    {
        "name",
        "type",
        "description",
        "due_date",
        "time_frame_key",
        "repeated_days",
        "priority",
        "tags",
        "focus_minutes",
        "is_completed",
        "completed_dates",
        "position",
        "positions_by_date",
        "positions_by_time_frame",
    }
)
