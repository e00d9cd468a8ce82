import os

# Settings are read at import time, so the environment must be in place first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ENVIRONMENT"] = "test"
for key in ("OPENROUTER_API_KEY", "OPENAI_API_KEY", "SENTRY_DSN", "AUTH_JWKS_URL"):
    os.environ.pop(key, None)

import httpx
import pytest
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from app.main import app
from app.auth import AuthUser, get_current_user
from app.db import Base, get_db
from app.models import UserProfile, DietPreferences
from app.models.schemas import DEFAULT_MEAL_TIMES
from app.services.profile import profile_status_cache

USER_ID = "user-1"
OTHER_USER_ID = "user-2"

# --- Test Database Setup ---


@pytest.fixture
async def engine():
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,  # one shared connection, or every session sees an empty db
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture(autouse=True)
def _clear_profile_cache():
    profile_status_cache.clear()
    yield
    profile_status_cache.clear()


@pytest.fixture
def user():
    return AuthUser(id=USER_ID, email="cook@example.com")


@pytest.fixture
async def client(session_factory, user):
    """API client with the database and the signed-in user overridden."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = lambda: user

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()


# --- Data ---


async def save_preferences(db: AsyncSession, user_id: str = USER_ID, **overrides) -> DietPreferences:
    """Insert a complete profile plus diet preferences."""
    values = {
        "diet_type": "vegan",
        "allergies": ["nuts"],
        "foods_to_avoid": [],
        "preferred_cuisines": [],
        "meals_per_day": 3,
        "total_days": 7,
        "include_snacks": False,
        "meal_times": dict(DEFAULT_MEAL_TIMES),
        "reminder_tone": "motivational",
        "reminder_enabled": True,
    }
    values.update(overrides)

    preferences = DietPreferences(user_id=user_id, **values)
    db.add(UserProfile(user_id=user_id, full_name="Test Cook"))
    db.add(preferences)
    await db.commit()
    return preferences


@pytest.fixture
async def vegan_preferences(db_session):
    return await save_preferences(db_session)
