"""Profile and diet preference endpoints."""

from fastapi import APIRouter, Depends
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db import get_db
from app.models.schemas import Preferences, ProfileResponse, ProfileStatusResponse, ProfileUpdate
from app.auth import get_current_user, AuthUser
from app.services import profile as profile_service

router = APIRouter(prefix="/api/profile", tags=["profile"])


def build_profile_response(profile, preferences) -> ProfileResponse:
    """Combine the two rows into one response."""
    prefs = None
    if preferences is not None and preferences.diet_type:
        try:
            prefs = Preferences.model_validate(preferences)
        except ValidationError:
            prefs = None

    def _number(value):
        return float(value) if value is not None else None

    return ProfileResponse(
        full_name=profile.full_name if profile else None,
        date_of_birth=profile.date_of_birth if profile else None,
        gender=profile.gender if profile else None,
        height_cm=_number(profile.height_cm) if profile else None,
        weight_kg=_number(profile.weight_kg) if profile else None,
        fitness_goal=profile.fitness_goal if profile else None,
        activity_level=profile.activity_level if profile else None,
        preferences=prefs,
        complete=profile_service.is_complete(profile, preferences),
    )


@router.get("", response_model=ProfileResponse)
async def get_profile(
    db: AsyncSession = Depends(get_db),
    user: AuthUser = Depends(get_current_user)
):
    """Get the profile and diet preferences (empty fields if never saved)."""
    profile, preferences = await profile_service.load_profile(db, user.id)
    return build_profile_response(profile, preferences)


@router.put("", response_model=ProfileResponse)
async def save_profile(
    update: ProfileUpdate,
    db: AsyncSession = Depends(get_db),
    user: AuthUser = Depends(get_current_user)
):
    """Save the profile and diet preferences together."""
    profile, preferences = await profile_service.save_profile(db, user.id, update)
    return build_profile_response(profile, preferences)


@router.get("/status", response_model=ProfileStatusResponse)
async def get_profile_status(
    db: AsyncSession = Depends(get_db),
    user: AuthUser = Depends(get_current_user)
):
    """
    Whether the profile is complete enough to generate plans.

    Cached per user until the next profile save.
    """
    complete = await profile_service.get_profile_status(db, user.id)
    return ProfileStatusResponse(complete=complete)
