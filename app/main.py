"""Meal Planner API - FastAPI Application."""

from contextlib import asynccontextmanager

import sentry_sdk
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import get_settings
from app.errors import MealPlannerError
from app.models.schemas import ErrorResponse

settings = get_settings()


def init_sentry() -> None:
    """Error monitoring, only when a DSN is configured."""
    if not settings.sentry_dsn:
        print("📊 Sentry not configured (no SENTRY_DSN)")
        return

    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.environment,
        traces_sample_rate=0.2,
        send_default_pii=False,
    )
    print(f"📊 Sentry initialized for {settings.environment}")


init_sentry()

from app.routers import health_router, profile_router, meal_plans_router, grocery_router, notifications_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    print(f"🚀 {settings.api_title} v{settings.api_version} ({settings.environment})")
    if settings.llm_enabled:
        print("🤖 Plan generation backend configured")
    else:
        print("⚠️ No plan generation backend configured, every plan will be a sample plan")
    yield
    print(f"👋 Shutting down {settings.api_title}")


app = FastAPI(
    title=settings.api_title,
    version=settings.api_version,
    description="Weekly meal plans, grocery lists and meal reminders",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router)
app.include_router(profile_router)
app.include_router(meal_plans_router)
app.include_router(grocery_router)
app.include_router(notifications_router)


@app.exception_handler(MealPlannerError)
async def meal_planner_error_handler(request: Request, exc: MealPlannerError):
    """Domain errors a router did not translate itself."""
    sentry_sdk.capture_exception(exc)
    body = ErrorResponse(detail=str(exc) or "Internal error", error_code=type(exc).__name__)
    return JSONResponse(status_code=500, content=body.model_dump())


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": settings.api_title,
        "version": settings.api_version,
        "docs": "/docs",
        "health": "/health",
    }
