"""Meal plan generation - LLM first, deterministic fallback plan on any failure."""

import asyncio
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional

import sentry_sdk
from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.errors import BackendUnavailable, MalformedResponse, PersistenceFailure, ProfileIncomplete
from app.models.meal_plan import MealPlan, MealType, PlanSource
from app.models.profile import DietPreferences
from app.models.schemas import Meal, PlanData, PlanDay, Preferences
from app.services.grocery import expand_plan
from app.services.llm_client import llm_service
from app.services.prompts import get_meal_plan_prompt
from app.services.week import PLAN_WEEK_START, start_of_week

settings = get_settings()

# Order the fallback plan cycles through, index j mod 4
FALLBACK_MEAL_CYCLE = [MealType.BREAKFAST, MealType.LUNCH, MealType.DINNER, MealType.SNACK]

FALLBACK_INGREDIENTS = {
    MealType.BREAKFAST: ["oats", "milk"],
    MealType.LUNCH: ["chicken", "vegetables"],
    MealType.DINNER: ["fish", "rice"],
    MealType.SNACK: ["apple", "granola"],
}


@dataclass
class GenerationResult:
    """Plan body plus where it came from."""
    plan_data: PlanData
    source: PlanSource
    error: Optional[str] = None


async def load_preferences(db: AsyncSession, user_id: str) -> Optional[Preferences]:
    """
    Load a user's diet preferences.

    Returns None when there is no row or no diet type has been chosen yet.
    """
    result = await db.execute(
        select(DietPreferences).where(DietPreferences.user_id == user_id)
    )
    row = result.scalar_one_or_none()
    if row is None or not row.diet_type:
        return None
    try:
        return Preferences.model_validate(row)
    except ValidationError as e:
        print(f"⚠️ Stored preferences for {user_id} are invalid: {e.error_count()} errors")
        return None


def build_fallback_plan(preferences: Preferences, week_start: date) -> PlanData:
    """
    Deterministic stand-in plan used when generation fails.

    Exactly total_days days and meals_per_day meals per day, meal types
    cycling Breakfast, Lunch, Dinner, Snack.
    """
    diet = preferences.diet_type.value.replace("_", " ")
    days = []
    for i in range(preferences.total_days):
        meals = []
        for j in range(preferences.meals_per_day):
            meal_type = FALLBACK_MEAL_CYCLE[j % len(FALLBACK_MEAL_CYCLE)]
            meals.append(Meal(
                type=meal_type.value,
                name=f"Sample {meal_type.value}",
                recipe=f"A simple {diet} {meal_type.value.lower()} made with everyday ingredients.",
                ingredients=list(FALLBACK_INGREDIENTS[meal_type]),
            ))
        days.append(PlanDay(day=i + 1, date=week_start + timedelta(days=i), meals=meals))
    return PlanData(days=days)


def decode_plan(payload: object, preferences: Preferences, week_start: date) -> PlanData:
    """
    Validate an LLM payload into a PlanData.

    Raises MalformedResponse unless the payload has exactly total_days days
    with exactly meals_per_day known-type meals each. Days are renumbered
    1..N in the order given and dated from week_start.
    """
    if not isinstance(payload, dict) or "days" not in payload:
        raise MalformedResponse("Response has no 'days'")

    try:
        plan_data = PlanData.model_validate({"days": payload["days"]})
    except ValidationError as e:
        raise MalformedResponse(f"Response failed validation: {e.error_count()} errors") from e

    if len(plan_data.days) != preferences.total_days:
        raise MalformedResponse(
            f"Expected {preferences.total_days} days, got {len(plan_data.days)}"
        )
    for day in plan_data.days:
        if len(day.meals) != preferences.meals_per_day:
            raise MalformedResponse(
                f"Expected {preferences.meals_per_day} meals on day {day.day}, got {len(day.meals)}"
            )

    return PlanData(days=[
        PlanDay(day=i + 1, date=week_start + timedelta(days=i), meals=day.meals)
        for i, day in enumerate(plan_data.days)
    ])


class MealPlanGenerator:
    """Builds, persists and expands weekly meal plans."""

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout if timeout is not None else settings.generation_timeout_seconds

    async def generate_plan_data(self, preferences: Preferences, week_start: date) -> GenerationResult:
        """
        Ask the LLM for a plan within the timeout budget.

        Always resolves: backend failures, timeouts and unusable payloads all
        produce the fallback plan.
        """
        prompt = get_meal_plan_prompt(preferences)
        print(f"🤖 Generating {preferences.total_days}-day {preferences.diet_type.value} plan "
              f"({preferences.meals_per_day} meals/day)...")

        try:
            try:
                payload = await asyncio.wait_for(
                    llm_service.generate_json(prompt), timeout=self.timeout
                )
            except asyncio.TimeoutError as e:
                raise BackendUnavailable(f"Request timed out after {self.timeout:g}s") from e
            except (BackendUnavailable, MalformedResponse):
                raise
            except Exception as e:
                sentry_sdk.capture_exception(e)
                raise BackendUnavailable(f"{type(e).__name__}: {e}") from e

            plan_data = decode_plan(payload, preferences, week_start)
            print(f"✅ Plan generated: {len(plan_data.days)} days")
            return GenerationResult(plan_data=plan_data, source=PlanSource.AI)

        except (BackendUnavailable, MalformedResponse) as e:
            print(f"⚠️ Using fallback plan: {e}")
            sentry_sdk.capture_message(
                "Meal plan generation fell back to sample plan",
                level="warning",
                extras={"reason": str(e), "error_type": type(e).__name__},
            )
            return GenerationResult(
                plan_data=build_fallback_plan(preferences, week_start),
                source=PlanSource.FALLBACK,
                error=str(e),
            )

    async def generate(
        self,
        db: AsyncSession,
        user_id: str,
        preferences: Optional[Preferences],
        today: Optional[date] = None,
    ) -> MealPlan:
        """
        Generate and save a plan, then write its grocery rows.

        Raises ProfileIncomplete without preferences and PersistenceFailure
        if the plan cannot be saved. A failed grocery write is reported and
        does not undo the saved plan.
        """
        if preferences is None:
            raise ProfileIncomplete()

        week_start = start_of_week(today or date.today(), PLAN_WEEK_START)
        result = await self.generate_plan_data(preferences, week_start)

        plan = MealPlan(
            user_id=user_id,
            week_start_date=week_start,
            plan_data=result.plan_data.model_dump(mode="json"),
            meals_per_day=preferences.meals_per_day,
            total_days=preferences.total_days,
            source=result.source.value,
        )
        try:
            db.add(plan)
            await db.commit()
            await db.refresh(plan)
        except SQLAlchemyError as e:
            await db.rollback()
            print(f"❌ Failed to save meal plan: {e}")
            sentry_sdk.capture_exception(e)
            raise PersistenceFailure("Failed to save meal plan") from e

        await self._save_grocery_items(db, plan)
        return plan

    async def _save_grocery_items(self, db: AsyncSession, plan: MealPlan) -> int:
        plan_id = plan.id
        items = expand_plan(plan)
        if not items:
            return 0
        try:
            db.add_all(items)
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            # rollback expires the plan too, reload it for the caller
            await db.refresh(plan)
            print(f"⚠️ Plan {plan_id} saved but grocery items were not: {e}")
            sentry_sdk.capture_exception(e)
            return 0
        print(f"🛒 Added {len(items)} grocery items for plan {plan_id}")
        return len(items)


# Singleton instance
meal_plan_generator = MealPlanGenerator()
