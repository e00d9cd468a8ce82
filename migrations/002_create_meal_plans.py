"""
Migration: Create meal_plans table

Run with: python -m migrations.002_create_meal_plans
"""

import asyncio
from sqlalchemy import text
from app.db.database import engine


async def upgrade():
    """Create meal_plans table."""
    async with engine.begin() as conn:
        await conn.execute(text("""
            CREATE TABLE IF NOT EXISTS meal_plans (
                id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
                user_id VARCHAR(64) NOT NULL,
                week_start_date DATE NOT NULL,
                plan_data JSONB NOT NULL,
                meals_per_day INTEGER NOT NULL DEFAULT 3,
                total_days INTEGER NOT NULL DEFAULT 7,
                source VARCHAR(16) NOT NULL DEFAULT 'ai',
                created_at TIMESTAMP WITH TIME ZONE DEFAULT NOW(),
                updated_at TIMESTAMP WITH TIME ZONE DEFAULT NOW()
            );
        """))

        # Latest-plan lookups go by user then creation time
        await conn.execute(text("""
            CREATE INDEX IF NOT EXISTS idx_meal_plans_user_created
            ON meal_plans(user_id, created_at DESC);
        """))

        await conn.execute(text("""
            CREATE INDEX IF NOT EXISTS idx_meal_plans_user_week
            ON meal_plans(user_id, week_start_date);
        """))

        print("✅ Created meal_plans table")


async def downgrade():
    """Drop meal_plans table."""
    async with engine.begin() as conn:
        await conn.execute(text("DROP TABLE IF EXISTS meal_plans CASCADE;"))
        print("✅ Dropped meal_plans table")


if __name__ == "__main__":
    import sys

    if len(sys.argv) > 1 and sys.argv[1] == "down":
        asyncio.run(downgrade())
    else:
        asyncio.run(upgrade())
