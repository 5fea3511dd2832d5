# tests/test_timeframes.py

from __future__ import annotations

from datetime import date

import pytest

from lifeplan.tasks.errors import InvalidDateError
from lifeplan.tasks.timeframes import (
    add_days,
    key_at_or_before,
    parse_date,
    parse_time_frame_key,
    surrounding_time_frame_keys,
    time_frame_key_for,
    validate_bucket,
    week_key,
    weekday_name,
)


def test_week_keys_start_monday_and_hold_january_first() -> None:
    assert week_key(date(2024, 1, 1)) == "2024-W01"
    assert week_key(date(2024, 1, 7)) == "2024-W01"
    assert week_key(date(2024, 1, 8)) == "2024-W02"
    assert week_key(date(2024, 5, 6)) == "2024-W19"
    # 2023-01-01 is a Sunday: its week started in December
    assert week_key(date(2022, 12, 26)) == "2023-W01"
    assert week_key(date(2023, 1, 1)) == "2023-W01"
    assert week_key(date(2023, 1, 2)) == "2023-W02"


def test_late_december_days_belong_to_next_years_first_week() -> None:
    assert week_key(date(2024, 12, 29)) == "2024-W52"
    assert week_key(date(2024, 12, 30)) == "2025-W01"
    assert week_key(date(2025, 1, 1)) == "2025-W01"


def test_time_frame_key_for_each_type() -> None:
    d = date(2024, 3, 15)
    assert time_frame_key_for("weekly", d) == "2024-W11"
    assert time_frame_key_for("monthly", d) == "2024-03"
    assert time_frame_key_for("yearly", d) == "2024"
    assert time_frame_key_for("life", d) == "life"
    assert time_frame_key_for("daily", d) is None


@pytest.mark.parametrize("raw", ["2024-5-01", "2024-02-30", "05/01/2024", "", "2024-05-01T00:00"])
def test_parse_date_rejects_bad_input(raw: str) -> None:
    with pytest.raises(InvalidDateError):
        parse_date(raw)


@pytest.mark.parametrize("raw", ["2024-W00", "2024-W54", "2024-13", "2024-00", "24", "lifetime", "2024-w05"])
def test_parse_time_frame_key_rejects_bad_input(raw: str) -> None:
    with pytest.raises(InvalidDateError):
        parse_time_frame_key(raw)


def test_invalid_date_error_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        parse_date("nope")


def test_key_ordering_within_granularity() -> None:
    assert key_at_or_before("2024-01", "2024-03")
    assert key_at_or_before("2024-03", "2024-03")
    assert not key_at_or_before("2024-01", "2023-12")
    assert key_at_or_before("2023-W52", "2024-W01")
    assert key_at_or_before("2023", "2024")
    assert key_at_or_before("life", "life")
    # different granularities never compare
    assert not key_at_or_before("2024", "2024-03")


def test_day_helpers() -> None:
    assert weekday_name("2024-05-07") == "Tuesday"
    assert add_days("2024-02-28", 2) == "2024-03-01"
    assert validate_bucket("2024-05-07") == "2024-05-07"
    assert validate_bucket("2024-W19") == "2024-W19"
    with pytest.raises(InvalidDateError):
        validate_bucket("someday")


def test_surrounding_keys() -> None:
    ref = date(2024, 1, 10)
    assert surrounding_time_frame_keys("monthly", ref) == ["2023-12", "2024-01", "2024-02", "2024-03", "2024-04"]
    assert surrounding_time_frame_keys("yearly", ref, before=0, after=1) == ["2024", "2025"]
    assert surrounding_time_frame_keys("weekly", ref, before=1, after=0) == ["2024-W01", "2024-W02"]
    assert surrounding_time_frame_keys("life", ref) == ["life"]
