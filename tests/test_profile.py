"""Tests for profile persistence and the cached completeness flag."""

from unittest.mock import patch

from app.models.schemas import ProfileUpdate
from app.services import profile as profile_service
from app.services.profile import ProfileStatusCache, profile_status_cache

from conftest import USER_ID, OTHER_USER_ID


def test_cache_get_set_invalidate():
    cache = ProfileStatusCache()
    assert cache.get(USER_ID) is None

    cache.set(USER_ID, True)
    cache.set(OTHER_USER_ID, False)
    assert cache.get(USER_ID) is True
    assert cache.get(OTHER_USER_ID) is False

    cache.invalidate(USER_ID)
    assert cache.get(USER_ID) is None
    assert cache.get(OTHER_USER_ID) is False

    cache.invalidate("unknown")
    cache.clear()
    assert cache.get(OTHER_USER_ID) is None


async def test_first_save_fills_defaults(db_session):
    profile, preferences = await profile_service.save_profile(
        db_session, USER_ID, ProfileUpdate(full_name="Ana", diet_type="vegetarian")
    )

    assert profile.full_name == "Ana"
    assert preferences.diet_type == "vegetarian"
    assert preferences.meals_per_day == 3
    assert preferences.total_days == 7
    assert preferences.include_snacks is False
    assert preferences.meal_times == {"breakfast": "08:00", "lunch": "12:00", "dinner": "18:00"}
    assert preferences.reminder_tone == "motivational"
    assert preferences.reminder_enabled is True


async def test_save_updates_existing_rows(db_session):
    await profile_service.save_profile(db_session, USER_ID, ProfileUpdate(full_name="Ana", diet_type="vegan"))
    await profile_service.save_profile(
        db_session, USER_ID,
        ProfileUpdate(full_name="Ana B", diet_type="mediterranean", meals_per_day=4, reminder_tone="gentle"),
    )

    profile, preferences = await profile_service.load_profile(db_session, USER_ID)
    assert profile.full_name == "Ana B"
    assert preferences.diet_type == "mediterranean"
    assert preferences.meals_per_day == 4
    assert preferences.reminder_tone == "gentle"


async def test_status_needs_name_and_diet(db_session):
    assert await profile_service.get_profile_status(db_session, USER_ID) is False

    profile_status_cache.clear()
    await profile_service.save_profile(db_session, USER_ID, ProfileUpdate(full_name="Ana"))
    assert await profile_service.get_profile_status(db_session, USER_ID) is False

    await profile_service.save_profile(db_session, USER_ID, ProfileUpdate(full_name="Ana", diet_type="vegan"))
    assert await profile_service.get_profile_status(db_session, USER_ID) is True


async def test_status_is_cached_until_save(db_session):
    assert await profile_service.get_profile_status(db_session, USER_ID) is False

    with patch.object(profile_service, "load_profile", wraps=profile_service.load_profile) as spy:
        assert await profile_service.get_profile_status(db_session, USER_ID) is False
        spy.assert_not_called()

    # Saving invalidates, the next lookup reads the new rows
    await profile_service.save_profile(db_session, USER_ID, ProfileUpdate(full_name="Ana", diet_type="vegan"))
    assert profile_status_cache.get(USER_ID) is None
    assert await profile_service.get_profile_status(db_session, USER_ID) is True
    assert profile_status_cache.get(USER_ID) is True
