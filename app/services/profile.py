"""Profile service - profile/preference persistence and the cached completeness flag."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.profile import UserProfile, DietPreferences
from app.models.schemas import ProfileUpdate

PROFILE_FIELDS = ("full_name", "date_of_birth", "gender", "height_cm", "weight_kg", "fitness_goal", "activity_level")
PREFERENCE_FIELDS = (
    "allergies", "foods_to_avoid", "preferred_cuisines", "meals_per_day", "total_days",
    "include_snacks", "meal_times", "reminder_enabled",
)


class ProfileStatusCache:
    """
    Remembers whether a user's profile is complete.

    Filled on first lookup, dropped whenever the profile is saved.
    """

    def __init__(self):
        self._complete: dict[str, bool] = {}

    def get(self, user_id: str) -> Optional[bool]:
        return self._complete.get(user_id)

    def set(self, user_id: str, complete: bool) -> None:
        self._complete[user_id] = complete

    def invalidate(self, user_id: str) -> None:
        self._complete.pop(user_id, None)

    def clear(self) -> None:
        self._complete.clear()


profile_status_cache = ProfileStatusCache()


def is_complete(profile: Optional[UserProfile], preferences: Optional[DietPreferences]) -> bool:
    """A profile is complete once it has a name and a diet type."""
    return bool(profile and profile.full_name and preferences and preferences.diet_type)


async def load_profile(
    db: AsyncSession,
    user_id: str,
) -> tuple[Optional[UserProfile], Optional[DietPreferences]]:
    """Fetch the profile and diet preferences rows (either may be missing)."""
    profile_result = await db.execute(select(UserProfile).where(UserProfile.user_id == user_id))
    prefs_result = await db.execute(select(DietPreferences).where(DietPreferences.user_id == user_id))
    return profile_result.scalar_one_or_none(), prefs_result.scalar_one_or_none()


async def get_profile_status(db: AsyncSession, user_id: str) -> bool:
    """Completeness flag, served from the cache when possible."""
    cached = profile_status_cache.get(user_id)
    if cached is not None:
        return cached

    profile, preferences = await load_profile(db, user_id)
    complete = is_complete(profile, preferences)
    profile_status_cache.set(user_id, complete)
    return complete


async def save_profile(
    db: AsyncSession,
    user_id: str,
    update: ProfileUpdate,
) -> tuple[UserProfile, DietPreferences]:
    """Create or update both rows and invalidate the cached completeness flag."""
    profile, preferences = await load_profile(db, user_id)

    if profile is None:
        profile = UserProfile(user_id=user_id)
        db.add(profile)
    if preferences is None:
        preferences = DietPreferences(user_id=user_id)
        db.add(preferences)

    for field in PROFILE_FIELDS:
        setattr(profile, field, getattr(update, field))

    for field in PREFERENCE_FIELDS:
        setattr(preferences, field, getattr(update, field))
    preferences.diet_type = update.diet_type.value if update.diet_type else None
    preferences.reminder_tone = update.reminder_tone.value

    await db.commit()
    await db.refresh(profile)
    await db.refresh(preferences)

    profile_status_cache.invalidate(user_id)
    print(f"✅ Saved profile for {user_id}")
    return profile, preferences
