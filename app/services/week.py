"""Calendar week arithmetic shared by plans, grocery lists and reminders."""

import enum
from datetime import date, datetime, time, timedelta
from typing import Union

from app.config import get_settings

settings = get_settings()

DAYS_IN_WEEK = 7


class WeekStartDay(str, enum.Enum):
    """First day of a calendar week."""
    SUNDAY = "sunday"
    MONDAY = "monday"

    @property
    def weekday(self) -> int:
        """Python weekday number (Monday = 0, Sunday = 6)."""
        return 6 if self is WeekStartDay.SUNDAY else 0


# Plans and their grocery items are tagged with Sunday-start weeks,
# reminders are laid out over Monday-start weeks.
PLAN_WEEK_START = WeekStartDay(settings.plan_week_start)
REMINDER_WEEK_START = WeekStartDay(settings.reminder_week_start)


def start_of_week(reference: Union[date, datetime], week_start: WeekStartDay) -> date:
    """Most recent `week_start` day on or before `reference`."""
    if isinstance(reference, datetime):
        reference = reference.date()
    days_back = (reference.weekday() - week_start.weekday) % DAYS_IN_WEEK
    return reference - timedelta(days=days_back)


def end_of_week(reference: Union[date, datetime], week_start: WeekStartDay) -> date:
    """Last day (inclusive) of the week containing `reference`."""
    return start_of_week(reference, week_start) + timedelta(days=DAYS_IN_WEEK - 1)


def week_bounds(week_start: date, tzinfo=None) -> tuple[datetime, datetime]:
    """Half-open [start, end) datetime range of the week beginning at `week_start`."""
    start = datetime.combine(week_start, time.min, tzinfo=tzinfo)
    return start, start + timedelta(days=DAYS_IN_WEEK)


def is_within_week(moment: Union[date, datetime], week_start: date) -> bool:
    """True iff week_start <= moment < week_start + 7 days."""
    if isinstance(moment, datetime):
        start, end = week_bounds(week_start, tzinfo=moment.tzinfo)
        return start <= moment < end
    return week_start <= moment < week_start + timedelta(days=DAYS_IN_WEEK)
