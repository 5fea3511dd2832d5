# src/lifeplan/tasks/analytics.py

"""
Progress statistics over the task store.

Points weight completion by priority (low 1, medium 2, high 3). Focus time is
derived from `focus_minutes`, which already holds minutes.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date, timedelta

from ..core.ports import TaskRepo
from .task_models import Priority, Task, TaskType
from .errors import InvalidDateError
from .timeframes import WEEKDAYS, format_date, is_date_string, parse_date

DEFAULT_STREAK_WINDOW_DAYS = 365


@dataclass(slots=True, frozen=True)
class CompletionRate:
    rate: float
    completed: int
    total: int
    points: int
    max_points: int
    focus_hours: float


@dataclass(slots=True, frozen=True)
class BucketStats:
    name: str
    rate: float
    completed: int
    total: int


@dataclass(slots=True, frozen=True)
class GoalStats:
    total: int
    completed: int
    rate: float


@dataclass(slots=True, frozen=True)
class TagStats:
    tag: str
    usage: int  # % of all records carrying the tag
    productivity: int  # % of tagged records completed


@dataclass(slots=True, frozen=True)
class Achievement:
    id: str
    title: str
    description: str
    achieved: bool
    progress: float


def _pct(part: float, whole: float) -> float:
    return part / whole * 100 if whole > 0 else 0.0


def completion_rate(store: TaskRepo, day: str) -> CompletionRate:
    tasks = store.get_tasks_for_date(day)
    if not tasks:
        return CompletionRate(0.0, 0, 0, 0, 0, 0.0)

    points = max_points = completed = 0
    focus_minutes = 0
    for t in tasks:
        max_points += t.priority.points
        if t.is_completed_on(day):
            completed += 1
            points += t.priority.points
            focus_minutes += t.focus_minutes

    return CompletionRate(
        rate=_pct(points, max_points),
        completed=completed,
        total=len(tasks),
        points=points,
        max_points=max_points,
        focus_hours=focus_minutes / 60,
    )


def _day_outcome(store: TaskRepo, d: date) -> bool | None:
    """True/False if the day had tasks and any/none got done; None for an empty day."""
    day = format_date(d)
    tasks = store.get_tasks_for_date(day)
    if not tasks:
        return None
    return any(t.is_completed_on(day) for t in tasks)


def current_streak(store: TaskRepo, today: date) -> int:
    """Consecutive days, ending today, with at least one completed task."""
    streak = 0
    d = today
    while _day_outcome(store, d):
        streak += 1
        d -= timedelta(days=1)
    return streak


def longest_streak(store: TaskRepo, today: date, *, window_days: int = DEFAULT_STREAK_WINDOW_DAYS) -> int:
    longest = run = 0
    for i in range(window_days):
        if _day_outcome(store, today - timedelta(days=i)):
            run += 1
            longest = max(longest, run)
        else:
            run = 0
    return longest


def total_completed(tasks: Iterable[Task]) -> int:
    """Completed daily occurrences across all records."""
    count = 0
    for t in tasks:
        if t.type is not TaskType.DAILY:
            continue
        if t.is_completed:
            count += 1
        elif t.completed_dates:
            count += len(t.completed_dates)
    return count


def total_focus_minutes(tasks: Iterable[Task]) -> int:
    return sum(t.focus_minutes for t in tasks)


def focus_sessions(tasks: Iterable[Task], session_minutes: int) -> int:
    if session_minutes <= 0:
        return 0
    return total_focus_minutes(tasks) // session_minutes


def goal_stats(tasks: Iterable[Task]) -> GoalStats:
    goals = [t for t in tasks if t.type.is_goal]
    done = sum(1 for g in goals if g.is_completed)
    return GoalStats(total=len(goals), completed=done, rate=_pct(done, len(goals)))


def _done_on_due_date(t: Task) -> bool:
    if t.due_date and t.is_completed_on(t.due_date):
        return True
    return t.is_completed


def completion_by_weekday(tasks: Iterable[Task]) -> list[BucketStats]:
    """Weighted completion of dated tasks grouped by the weekday of their due date."""
    points = [0] * 7
    max_points = [0] * 7
    done = [0] * 7
    total = [0] * 7

    for t in tasks:
        if t.type is not TaskType.DAILY or not is_date_string(t.due_date):
            continue
        try:
            i = parse_date(t.due_date).weekday()
        except InvalidDateError:
            continue
        max_points[i] += t.priority.points
        total[i] += 1
        if t.is_completed_on(t.due_date):
            done[i] += 1
            points[i] += t.priority.points

    return [
        BucketStats(name=WEEKDAYS[i], rate=_pct(points[i], max_points[i]), completed=done[i], total=total[i])
        for i in range(7)
    ]


def completion_by_priority(tasks: Iterable[Task]) -> list[BucketStats]:
    order = (Priority.HIGH, Priority.MEDIUM, Priority.LOW)
    stats = {p: [0, 0, 0, 0] for p in order}  # total, completed, points, max_points

    for t in tasks:
        if t.type is not TaskType.DAILY:
            continue
        s = stats[t.priority]
        s[0] += 1
        s[3] += t.priority.points
        if _done_on_due_date(t):
            s[1] += 1
            s[2] += t.priority.points

    return [
        BucketStats(name=p.value.capitalize(), rate=_pct(s[2], s[3]), completed=s[1], total=s[0])
        for p, s in stats.items()
    ]


def tag_stats(tasks: Sequence[Task], known_tags: Iterable[str] = (), *, limit: int = 8) -> list[TagStats]:
    counts: dict[str, list[int]] = {tag: [0, 0] for tag in known_tags}  # count, completed
    for t in tasks:
        for tag in t.tags:
            c = counts.setdefault(tag, [0, 0])
            c[0] += 1
            if _done_on_due_date(t):
                c[1] += 1

    ranked = sorted(counts.items(), key=lambda kv: kv[1][0], reverse=True)[:limit]
    return [
        TagStats(tag=tag, usage=round(_pct(c[0], len(tasks))), productivity=round(_pct(c[1], c[0])))
        for tag, c in ranked
    ]


def habits(tasks: Iterable[Task]) -> list[Task]:
    """Recurring daily tasks, high priority first."""
    rank = {Priority.HIGH: 0, Priority.MEDIUM: 1, Priority.LOW: 2}
    found = [t for t in tasks if t.type is TaskType.DAILY and t.repeated_days]
    return sorted(found, key=lambda t: rank[t.priority])


def habit_streak(task: Task) -> int:
    """Length of the consecutive-day run ending at the task's latest completion."""
    parsed = set()
    for raw in task.completed_dates:
        try:
            parsed.add(parse_date(raw))
        except InvalidDateError:
            continue
    days = sorted(parsed, reverse=True)
    if not days:
        return 0
    streak = 1
    for prev, cur in zip(days, days[1:]):
        if (prev - cur).days != 1:
            break
        streak += 1
    return streak


def achievements(*, longest: int, goals_completed: int, sessions: int) -> list[Achievement]:
    def item(aid: str, title: str, desc: str, value: int, target: int) -> Achievement:
        return Achievement(
            id=aid,
            title=title,
            description=desc,
            achieved=value >= target,
            progress=min(value / target, 1) * 100,
        )

    out = [
        item(f"streak-{n}", f"{n}-Day Streak", f"Complete tasks for {n} consecutive days", longest, n)
        for n in (7, 30, 100)
    ]
    out += [
        item(f"goals-{n}", f"{n} Goals Completed", f"Complete {n} goals", goals_completed, n)
        for n in (10, 50, 100)
    ]
    out += [
        item(f"focus-{n}", f"{n} Focus Sessions", f"Complete {n} focus sessions", sessions, n)
        for n in (100, 500)
    ]
    return out
