"""Meal reminder API endpoints."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from app.db import get_db
from app.errors import PersistenceFailure
from app.models.schemas import (
    CountResponse,
    NotificationResponse,
    ScheduleRemindersRequest,
    ScheduleRemindersResponse,
)
from app.auth import get_current_user, AuthUser
from app.routers.meal_plans import get_user_plan, get_latest_plan
from app.services import reminders

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


@router.post("/schedule", response_model=ScheduleRemindersResponse)
async def schedule_reminders(
    request: ScheduleRemindersRequest,
    db: AsyncSession = Depends(get_db),
    user: AuthUser = Depends(get_current_user)
):
    """
    Create prep and meal reminders for every meal of a plan.

    Uses the most recent plan unless one is given. Meal times and tone come
    from the diet preferences, with defaults if none are saved yet.
    """
    if request.meal_plan_id:
        plan = await get_user_plan(db, user.id, request.meal_plan_id)
    else:
        plan = await get_latest_plan(db, user.id)
        if not plan:
            raise HTTPException(status_code=400, detail="Generate a meal plan first to create reminders.")

    try:
        created = await reminders.schedule_reminders(db, plan)
    except PersistenceFailure as e:
        raise HTTPException(status_code=500, detail=str(e))

    return ScheduleRemindersResponse(
        message=f"{len(created)} reminders created for your meal plan.",
        count=len(created),
        notifications=[NotificationResponse.model_validate(n) for n in created],
    )


@router.get("", response_model=List[NotificationResponse])
async def list_upcoming(
    db: AsyncSession = Depends(get_db),
    user: AuthUser = Depends(get_current_user)
):
    """Upcoming reminders, soonest first."""
    return await reminders.list_upcoming(db, user.id)


@router.delete("/past", response_model=CountResponse)
async def clear_past(
    db: AsyncSession = Depends(get_db),
    user: AuthUser = Depends(get_current_user)
):
    """Delete reminders whose time has passed."""
    count = await reminders.clear_past(db, user.id)

    return CountResponse(
        message=f"Cleared {count} old notifications",
        count=count,
    )
