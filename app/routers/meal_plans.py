"""Meal planning API endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from uuid import UUID
from typing import Optional, List
from datetime import date

from app.db import get_db
from app.errors import PersistenceFailure, ProfileIncomplete
from app.models.meal_plan import MealPlan
from app.models.schemas import MealPlanResponse, PlanData, PlanDayResponse, GroceryItemResponse
from app.auth import get_current_user, AuthUser
from app.services.grocery import items_for_meal
from app.services.plan_generator import meal_plan_generator, load_preferences

router = APIRouter(prefix="/api/meal-plans", tags=["meal-plans"])


# ============================================================
# Helper Functions
# ============================================================

async def get_user_plan(db: AsyncSession, user_id: str, plan_id: UUID) -> MealPlan:
    """Fetch one of the user's plans or 404."""
    result = await db.execute(
        select(MealPlan).where(
            MealPlan.id == plan_id,
            MealPlan.user_id == user_id,
        )
    )
    plan = result.scalar_one_or_none()

    if not plan:
        raise HTTPException(status_code=404, detail="Meal plan not found")
    return plan


async def get_latest_plan(db: AsyncSession, user_id: str) -> Optional[MealPlan]:
    """The user's most recently created plan, if any."""
    result = await db.execute(
        select(MealPlan)
        .where(MealPlan.user_id == user_id)
        .order_by(MealPlan.created_at.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


# ============================================================
# Endpoints
# ============================================================

@router.post("/generate", response_model=MealPlanResponse)
async def generate_meal_plan(
    db: AsyncSession = Depends(get_db),
    user: AuthUser = Depends(get_current_user)
):
    """
    Generate a new meal plan from the user's diet preferences.

    Falls back to a sample plan when the AI backend is unavailable, so this
    only fails when the profile is incomplete or the plan cannot be saved.
    Grocery items for every ingredient are added alongside the plan.
    """
    preferences = await load_preferences(db, user.id)

    try:
        plan = await meal_plan_generator.generate(db, user.id, preferences)
    except ProfileIncomplete as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PersistenceFailure as e:
        raise HTTPException(status_code=500, detail=str(e))

    return plan


@router.get("/current", response_model=Optional[MealPlanResponse])
async def get_current_plan(
    db: AsyncSession = Depends(get_db),
    user: AuthUser = Depends(get_current_user)
):
    """Get the most recently generated plan (null if there is none)."""
    return await get_latest_plan(db, user.id)


@router.get("", response_model=List[MealPlanResponse])
async def list_plans(
    limit: int = Query(default=10, ge=1, le=50),
    db: AsyncSession = Depends(get_db),
    user: AuthUser = Depends(get_current_user)
):
    """List the user's plans, newest first."""
    result = await db.execute(
        select(MealPlan)
        .where(MealPlan.user_id == user.id)
        .order_by(MealPlan.created_at.desc())
        .limit(limit)
    )
    return result.scalars().all()


@router.get("/{plan_id}", response_model=MealPlanResponse)
async def get_plan(
    plan_id: UUID,
    db: AsyncSession = Depends(get_db),
    user: AuthUser = Depends(get_current_user)
):
    """Get a single plan."""
    return await get_user_plan(db, user.id, plan_id)


@router.get("/{plan_id}/day", response_model=PlanDayResponse)
async def get_plan_day(
    plan_id: UUID,
    on: date = Query(..., description="Calendar date to look up"),
    db: AsyncSession = Depends(get_db),
    user: AuthUser = Depends(get_current_user)
):
    """Get the meals a plan schedules on a calendar date (empty if none)."""
    plan = await get_user_plan(db, user.id, plan_id)
    plan_data = PlanData.model_validate(plan.plan_data)

    for day in plan_data.days:
        if day.date == on:
            return PlanDayResponse(date=on, day=day.day, meals=day.meals)

    return PlanDayResponse(date=on)


@router.post("/{plan_id}/days/{day_number}/meals/{meal_index}/grocery", response_model=List[GroceryItemResponse])
async def add_meal_to_grocery(
    plan_id: UUID,
    day_number: int,
    meal_index: int,
    db: AsyncSession = Depends(get_db),
    user: AuthUser = Depends(get_current_user)
):
    """Add one meal's ingredients to the grocery list (one row per ingredient)."""
    plan = await get_user_plan(db, user.id, plan_id)
    plan_data = PlanData.model_validate(plan.plan_data)

    day = next((d for d in plan_data.days if d.day == day_number), None)
    if day is None or not 0 <= meal_index < len(day.meals):
        raise HTTPException(status_code=404, detail="Meal not found in this plan")

    meal = day.meals[meal_index]
    if not meal.ingredients:
        raise HTTPException(status_code=400, detail="This meal has no ingredients to add")

    items = items_for_meal(plan, meal)
    db.add_all(items)
    await db.commit()

    return items
