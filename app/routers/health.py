"""Health check endpoint."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import text

from app.db import get_db
from app.config import get_settings
from app.models.schemas import HealthResponse

router = APIRouter(tags=["health"])
settings = get_settings()


def configured_backends() -> list[str]:
    """Generation backends with an API key, in the order they are tried."""
    keys = [("openrouter", settings.openrouter_api_key), ("openai", settings.openai_api_key)]
    return [name for name, key in keys if key]


@router.get("/health", response_model=HealthResponse)
async def health_check(db: AsyncSession = Depends(get_db)):
    """
    Liveness plus dependency status.

    The database is probed with a trivial query. Generation backends are
    only reported as configured or not; without any, every plan is the
    sample plan.
    """
    try:
        await db.execute(text("SELECT 1"))
        database = "connected"
    except SQLAlchemyError as e:
        database = f"error: {e}"

    backends = configured_backends()
    return HealthResponse(
        status="healthy" if database == "connected" else "unhealthy",
        environment=settings.environment,
        database=database,
        llm=", ".join(backends) if backends else "fallback-only",
        plan_week_start=settings.plan_week_start,
        reminder_week_start=settings.reminder_week_start,
    )
