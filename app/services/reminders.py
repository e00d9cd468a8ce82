"""Reminder scheduling - prep and meal notifications derived from a plan."""

from datetime import datetime, time, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo

import sentry_sdk
from sqlalchemy import select, delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.errors import PersistenceFailure
from app.models.meal_plan import MealPlan
from app.models.notification import Notification
from app.models.profile import DietPreferences
from app.models.schemas import DEFAULT_MEAL_TIMES, Meal, PlanData, ReminderTone
from app.services.week import REMINDER_WEEK_START, end_of_week

settings = get_settings()

DEFAULT_MEAL_TIME = "12:00"
PREP_LEAD_TIME = timedelta(hours=1)
REGENERATE_AT = time(10, 0)
REGENERATE_MESSAGE = "🗓️ Ready for your next week's plan? Time to regenerate your meal plan!"


def reminder_messages(meal: Meal, tone: ReminderTone) -> tuple[str, str]:
    """(prep message, meal message) for one meal in the given tone."""
    if tone == ReminderTone.FUNNY:
        return (
            f"🍳 Time to channel your inner chef! Get ready to make {meal.name}",
            f"🍽️ Your stomach is calling - {meal.name} is ready to be devoured!",
        )
    if tone == ReminderTone.GENTLE:
        return (
            f"🌿 Gentle reminder: It's time to start preparing {meal.name}",
            f"🍃 Time for your {meal.type.lower()}. Enjoy your {meal.name}",
        )
    return (
        f"💪 Fuel your body! Time to prep your {meal.type.lower()}: {meal.name}",
        f"🌟 Your day gets better when you eat well. It's time for {meal.name}!",
    )


def _at(day, clock: str, tz) -> datetime:
    hours, minutes = (int(part) for part in clock.split(":"))
    return datetime.combine(day, time(hours, minutes), tzinfo=tz)


def _utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


async def load_reminder_settings(
    db: AsyncSession,
    user_id: str,
) -> tuple[dict[str, str], ReminderTone]:
    """
    Meal times and tone for a user.

    Missing or unreadable preferences fall back to the defaults, reminders
    can be requested before the profile is saved.
    """
    try:
        result = await db.execute(
            select(DietPreferences).where(DietPreferences.user_id == user_id)
        )
        row = result.scalar_one_or_none()
    except SQLAlchemyError as e:
        await db.rollback()
        print(f"⚠️ Could not load reminder preferences, using defaults: {e}")
        row = None

    if row is None:
        return dict(DEFAULT_MEAL_TIMES), ReminderTone.MOTIVATIONAL

    meal_times = {slot.lower(): at for slot, at in (row.meal_times or DEFAULT_MEAL_TIMES).items()}
    try:
        tone = ReminderTone(row.reminder_tone or ReminderTone.MOTIVATIONAL)
    except ValueError:
        tone = ReminderTone.MOTIVATIONAL
    return meal_times, tone


def build_reminders(
    plan: MealPlan,
    meal_times: dict[str, str],
    tone: ReminderTone,
    now: Optional[datetime] = None,
    tz: Optional[ZoneInfo] = None,
) -> list[Notification]:
    """
    Two notifications per meal plus one weekly regenerate reminder.

    Meal time comes from meal_times[meal type] (12:00 when the slot is not
    set), the prep reminder fires an hour earlier. The regenerate reminder
    is at 10:00 on the last day of the current reminder week. All times are
    stored in UTC.
    """
    tz = tz or ZoneInfo(settings.reminder_timezone)
    now = now or datetime.now(tz)
    plan_data = PlanData.model_validate(plan.plan_data)

    notifications = []
    for day in plan_data.days:
        day_date = day.date or plan.week_start_date + timedelta(days=day.day - 1)

        for meal in day.meals:
            meal_at = _at(day_date, meal_times.get(meal.type.lower(), DEFAULT_MEAL_TIME), tz)
            prep_message, meal_message = reminder_messages(meal, tone)

            notifications.append(Notification(
                user_id=plan.user_id,
                meal_plan_id=plan.id,
                message=prep_message,
                scheduled_time=(meal_at - PREP_LEAD_TIME).astimezone(timezone.utc),
                is_sent=False,
            ))
            notifications.append(Notification(
                user_id=plan.user_id,
                meal_plan_id=plan.id,
                message=meal_message,
                scheduled_time=meal_at.astimezone(timezone.utc),
                is_sent=False,
            ))

    week_end = end_of_week(_utc(now).astimezone(tz), REMINDER_WEEK_START)
    notifications.append(Notification(
        user_id=plan.user_id,
        meal_plan_id=plan.id,
        message=REGENERATE_MESSAGE,
        scheduled_time=datetime.combine(week_end, REGENERATE_AT, tzinfo=tz).astimezone(timezone.utc),
        is_sent=False,
    ))
    return notifications


async def schedule_reminders(
    db: AsyncSession,
    plan: MealPlan,
    now: Optional[datetime] = None,
) -> list[Notification]:
    """Build and save every reminder for a plan."""
    meal_times, tone = await load_reminder_settings(db, plan.user_id)
    notifications = build_reminders(plan, meal_times, tone, now=now)

    try:
        db.add_all(notifications)
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        print(f"❌ Failed to save reminders: {e}")
        sentry_sdk.capture_exception(e)
        raise PersistenceFailure("Failed to save reminders") from e

    print(f"🔔 Scheduled {len(notifications)} reminders ({tone.value}) for plan {plan.id}")
    return notifications


async def list_upcoming(
    db: AsyncSession,
    user_id: str,
    now: Optional[datetime] = None,
) -> list[Notification]:
    """Notifications due at or after now, soonest first."""
    now = _utc(now or datetime.now(timezone.utc))
    result = await db.execute(
        select(Notification)
        .where(
            Notification.user_id == user_id,
            Notification.scheduled_time >= now,
        )
        .order_by(Notification.scheduled_time)
    )
    return list(result.scalars().all())


async def clear_past(
    db: AsyncSession,
    user_id: str,
    now: Optional[datetime] = None,
) -> int:
    """Delete the user's notifications scheduled before now. Returns the count."""
    now = _utc(now or datetime.now(timezone.utc))
    result = await db.execute(
        delete(Notification).where(
            Notification.user_id == user_id,
            Notification.scheduled_time < now,
        )
        .execution_options(synchronize_session=False)
    )
    await db.commit()
    return result.rowcount or 0
