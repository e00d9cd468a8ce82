"""Tests for calendar week arithmetic."""

from datetime import date, datetime, timedelta, timezone

import pytest

from app.services.week import (
    PLAN_WEEK_START,
    REMINDER_WEEK_START,
    WeekStartDay,
    end_of_week,
    is_within_week,
    start_of_week,
    week_bounds,
)

WEDNESDAY = date(2025, 8, 6)


def test_default_conventions():
    assert PLAN_WEEK_START == WeekStartDay.SUNDAY
    assert REMINDER_WEEK_START == WeekStartDay.MONDAY


def test_start_of_week_sunday():
    assert start_of_week(WEDNESDAY, WeekStartDay.SUNDAY) == date(2025, 8, 3)


def test_start_of_week_monday():
    assert start_of_week(WEDNESDAY, WeekStartDay.MONDAY) == date(2025, 8, 4)


def test_start_day_is_its_own_week_start():
    sunday = date(2025, 8, 3)
    assert start_of_week(sunday, WeekStartDay.SUNDAY) == sunday
    # Sunday closes a Monday-start week
    assert start_of_week(sunday, WeekStartDay.MONDAY) == date(2025, 7, 28)


def test_start_of_week_accepts_datetime():
    moment = datetime(2025, 8, 6, 23, 30, tzinfo=timezone.utc)
    assert start_of_week(moment, WeekStartDay.SUNDAY) == date(2025, 8, 3)


@pytest.mark.parametrize("week_start", list(WeekStartDay))
def test_start_of_week_properties(week_start):
    for offset in range(21):
        day = date(2025, 1, 1) + timedelta(days=offset)
        start = start_of_week(day, week_start)
        assert start <= day < start + timedelta(days=7)
        assert start.weekday() == week_start.weekday


def test_end_of_week():
    assert end_of_week(WEDNESDAY, WeekStartDay.MONDAY) == date(2025, 8, 10)
    assert end_of_week(WEDNESDAY, WeekStartDay.SUNDAY) == date(2025, 8, 9)


def test_week_bounds_are_half_open():
    start, end = week_bounds(date(2025, 8, 3), tzinfo=timezone.utc)
    assert start == datetime(2025, 8, 3, tzinfo=timezone.utc)
    assert end == datetime(2025, 8, 10, tzinfo=timezone.utc)


def test_is_within_week_dates():
    week_start = date(2025, 8, 3)
    assert is_within_week(week_start, week_start)
    assert is_within_week(date(2025, 8, 9), week_start)
    assert not is_within_week(date(2025, 8, 10), week_start)
    assert not is_within_week(date(2025, 8, 2), week_start)


def test_is_within_week_datetimes():
    week_start = date(2025, 8, 3)
    assert is_within_week(datetime(2025, 8, 9, 23, 59, tzinfo=timezone.utc), week_start)
    assert not is_within_week(datetime(2025, 8, 10, 0, 0, tzinfo=timezone.utc), week_start)
