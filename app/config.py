from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Literal


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str

    # OpenRouter (primary plan generation backend)
    openrouter_api_key: str | None = None
    openrouter_model: str = "mistralai/mistral-7b-instruct"

    # OpenAI (secondary plan generation backend)
    openai_api_key: str | None = None
    openai_model: str = "gpt-4o-mini"

    # Hard ceiling for a single plan generation, fallback plan after that
    generation_timeout_seconds: float = 20.0

    # Week conventions, one per use-case
    plan_week_start: Literal["sunday", "monday"] = "sunday"
    reminder_week_start: Literal["sunday", "monday"] = "monday"

    # "week" only clears purchased items of the current plan week, "all" clears everything
    grocery_clear_scope: Literal["week", "all"] = "week"

    # Meal times in diet preferences are wall-clock times in this zone
    reminder_timezone: str = "UTC"

    # Auth (JWT issued by the identity provider, verified via JWKS)
    auth_jwks_url: str | None = None  # e.g., "https://<project>.supabase.co/auth/v1/.well-known/jwks.json"
    auth_audience: str | None = "authenticated"

    # Sentry error monitoring
    sentry_dsn: str | None = None

    # Environment
    environment: str = "development"

    # Browser origins allowed to call the API
    cors_origins: list[str] = ["*"]

    # API Settings
    api_title: str = "Meal Planner API"
    api_version: str = "1.0.0"

    @property
    def llm_enabled(self) -> bool:
        """Check if at least one generation backend is configured."""
        return bool(self.openrouter_api_key or self.openai_api_key)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @property
    def async_database_url(self) -> str:
        """Convert database URL to async format for SQLAlchemy."""
        url = self.database_url
        # Convert to asyncpg driver
        if url.startswith("postgres://"):
            url = url.replace("postgres://", "postgresql+asyncpg://", 1)
        elif url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        # Remove sslmode parameter (handled separately by asyncpg)
        if "?sslmode=" in url:
            url = url.split("?sslmode=")[0]
        elif "&sslmode=" in url:
            url = url.replace("&sslmode=require", "").replace("&sslmode=prefer", "")
        return url

    @property
    def is_postgres(self) -> bool:
        return self.async_database_url.startswith("postgresql+asyncpg://")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
