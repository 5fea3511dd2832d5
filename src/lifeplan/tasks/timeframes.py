# src/lifeplan/tasks/timeframes.py

"""
Calendar helpers for tasks and goals.

Formats:
- dates:            "YYYY-MM-DD"
- week keys:        "YYYY-Www"  (weeks start on Monday, week 1 holds January 1st)
- month keys:       "YYYY-MM"
- year keys:        "YYYY"
- life-long goals:  "life"

Week keys use the week-numbering year, so the days of late December that
belong to week 1 of the next year get that year's key.
"""

from __future__ import annotations

import re
from datetime import date, timedelta
from typing import NamedTuple

from .errors import InvalidDateError

WEEKDAYS: tuple[str, ...] = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

LIFE_KEY = "life"

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_WEEK_RE = re.compile(r"^(\d{4})-W(\d{2})$")
_MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")
_YEAR_RE = re.compile(r"^(\d{4})$")


class PeriodKey(NamedTuple):
    kind: str  # "week" | "month" | "year" | "life"
    value: tuple[int, ...]


# ---- dates ----


def is_date_string(raw: str | None) -> bool:
    return bool(raw) and bool(_DATE_RE.match(raw or ""))


def parse_date(raw: str | date) -> date:
    if isinstance(raw, date):
        return raw
    if not isinstance(raw, str) or not _DATE_RE.match(raw):
        raise InvalidDateError(f"expected YYYY-MM-DD, got {raw!r}")
    try:
        return date.fromisoformat(raw)
    except ValueError as e:
        raise InvalidDateError(f"invalid date {raw!r}: {e}") from e


def format_date(d: date) -> str:
    return d.isoformat()


def weekday_name(day: str | date) -> str:
    return WEEKDAYS[parse_date(day).weekday()]


def add_days(day: str, n: int) -> str:
    return format_date(parse_date(day) + timedelta(days=n))


# ---- time-frame keys ----


def _week_start(d: date) -> date:
    return d - timedelta(days=d.weekday())


def week_of(d: date) -> tuple[int, int]:
    """Return (week-numbering year, week number) for a date."""
    next_first = _week_start(date(d.year + 1, 1, 1))
    if d >= next_first:
        return d.year + 1, 1
    first = _week_start(date(d.year, 1, 1))
    return d.year, (_week_start(d) - first).days // 7 + 1


def week_key(d: date) -> str:
    year, week = week_of(d)
    return f"{year}-W{week:02d}"


def month_key(d: date) -> str:
    return f"{d.year}-{d.month:02d}"


def year_key(d: date) -> str:
    return str(d.year)


def time_frame_key_for(task_type: str, d: date) -> str | None:
    """Key of the period of `task_type` containing `d` (None for daily)."""
    t = str(task_type)
    if t == "weekly":
        return week_key(d)
    if t == "monthly":
        return month_key(d)
    if t == "yearly":
        return year_key(d)
    if t == "life":
        return LIFE_KEY
    return None


def parse_time_frame_key(key: str) -> PeriodKey:
    if not isinstance(key, str):
        raise InvalidDateError(f"time-frame key must be a string, got {key!r}")
    if key == LIFE_KEY:
        return PeriodKey("life", ())

    m = _WEEK_RE.match(key)
    if m:
        year, week = int(m.group(1)), int(m.group(2))
        if not 1 <= week <= 53:
            raise InvalidDateError(f"week out of range in {key!r}")
        return PeriodKey("week", (year, week))

    m = _MONTH_RE.match(key)
    if m:
        year, month = int(m.group(1)), int(m.group(2))
        if not 1 <= month <= 12:
            raise InvalidDateError(f"month out of range in {key!r}")
        return PeriodKey("month", (year, month))

    m = _YEAR_RE.match(key)
    if m:
        return PeriodKey("year", (int(m.group(1)),))

    raise InvalidDateError(f"unrecognized time-frame key {key!r}")


def key_at_or_before(candidate: str, reference: str) -> bool:
    """
    True if period `candidate` starts at or before period `reference`.

    Keys of different granularity never compare; "life" only matches itself.
    """
    a = parse_time_frame_key(candidate)
    b = parse_time_frame_key(reference)
    if a.kind != b.kind:
        return False
    return a.value <= b.value


def validate_bucket(bucket: str) -> str:
    """Accept either a date or a time-frame key; raise InvalidDateError otherwise."""
    if is_date_string(bucket):
        parse_date(bucket)
    else:
        parse_time_frame_key(bucket)
    return bucket


def _add_months(d: date, n: int) -> date:
    total = d.year * 12 + (d.month - 1) + n
    return date(total // 12, total % 12 + 1, 1)


def surrounding_time_frame_keys(
    task_type: str,
    reference: date,
    *,
    before: int = 1,
    after: int = 3,
) -> list[str]:
    """Keys for the previous `before`, current and next `after` periods."""
    t = str(task_type)
    out: list[str] = []
    for offset in range(-before, after + 1):
        if t == "weekly":
            out.append(week_key(reference + timedelta(weeks=offset)))
        elif t == "monthly":
            out.append(month_key(_add_months(reference, offset)))
        elif t == "yearly":
            out.append(str(reference.year + offset))
        else:
            return [LIFE_KEY] if t == "life" else []
    return out
