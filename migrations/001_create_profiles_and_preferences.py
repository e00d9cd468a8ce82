"""
Migration: Create user_profiles and diet_preferences tables

Run with: python -m migrations.001_create_profiles_and_preferences
"""

import asyncio
from sqlalchemy import text
from app.db.database import engine


async def upgrade():
    """Create user_profiles and diet_preferences tables."""
    async with engine.begin() as conn:
        await conn.execute(text("""
            CREATE TABLE IF NOT EXISTS user_profiles (
                id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
                user_id VARCHAR(64) NOT NULL UNIQUE,
                full_name VARCHAR(255),
                date_of_birth DATE,
                gender VARCHAR(16),
                height_cm NUMERIC,
                weight_kg NUMERIC,
                fitness_goal VARCHAR(32),
                activity_level VARCHAR(32),
                created_at TIMESTAMP WITH TIME ZONE DEFAULT NOW(),
                updated_at TIMESTAMP WITH TIME ZONE DEFAULT NOW()
            );
        """))
        print("✅ Created user_profiles table")

        # One preferences row per user, keyed by the auth subject
        await conn.execute(text("""
            CREATE TABLE IF NOT EXISTS diet_preferences (
                user_id VARCHAR(64) PRIMARY KEY,
                diet_type VARCHAR(32),
                allergies JSONB NOT NULL DEFAULT '[]'::jsonb,
                foods_to_avoid JSONB NOT NULL DEFAULT '[]'::jsonb,
                preferred_cuisines JSONB NOT NULL DEFAULT '[]'::jsonb,
                meals_per_day INTEGER NOT NULL DEFAULT 3,
                total_days INTEGER NOT NULL DEFAULT 7,
                include_snacks BOOLEAN NOT NULL DEFAULT FALSE,
                meal_times JSONB NOT NULL DEFAULT '{}'::jsonb,
                reminder_tone VARCHAR(16),
                reminder_enabled BOOLEAN NOT NULL DEFAULT TRUE,
                created_at TIMESTAMP WITH TIME ZONE DEFAULT NOW(),
                updated_at TIMESTAMP WITH TIME ZONE DEFAULT NOW()
            );
        """))
        print("✅ Created diet_preferences table")


async def downgrade():
    """Drop user_profiles and diet_preferences tables."""
    async with engine.begin() as conn:
        await conn.execute(text("DROP TABLE IF EXISTS diet_preferences;"))
        await conn.execute(text("DROP TABLE IF EXISTS user_profiles;"))
        print("✅ Dropped user_profiles and diet_preferences tables")


if __name__ == "__main__":
    import sys

    if len(sys.argv) > 1 and sys.argv[1] == "down":
        asyncio.run(downgrade())
    else:
        asyncio.run(upgrade())
