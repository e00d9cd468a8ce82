"""
Migration: Create grocery_items table

Run with: python -m migrations.003_create_grocery_items
"""

import asyncio
from sqlalchemy import text
from app.db.database import engine


async def upgrade():
    """Create grocery_items table."""
    async with engine.begin() as conn:
        await conn.execute(text("""
            CREATE TABLE IF NOT EXISTS grocery_items (
                id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
                user_id VARCHAR(64) NOT NULL,
                meal_plan_id UUID REFERENCES meal_plans(id) ON DELETE CASCADE,
                week_start_date DATE,
                item_name VARCHAR(255) NOT NULL,
                quantity VARCHAR(50) NOT NULL DEFAULT '1 unit',
                is_purchased BOOLEAN NOT NULL DEFAULT FALSE,
                notes VARCHAR(255),
                created_at TIMESTAMP WITH TIME ZONE DEFAULT NOW(),
                updated_at TIMESTAMP WITH TIME ZONE DEFAULT NOW()
            );
        """))

        await conn.execute(text("""
            CREATE INDEX IF NOT EXISTS idx_grocery_items_user_week
            ON grocery_items(user_id, week_start_date);
        """))

        await conn.execute(text("""
            CREATE INDEX IF NOT EXISTS idx_grocery_items_purchased
            ON grocery_items(user_id, is_purchased);
        """))

        await conn.execute(text("""
            CREATE INDEX IF NOT EXISTS idx_grocery_items_meal_plan
            ON grocery_items(meal_plan_id);
        """))

        print("✅ Created grocery_items table")


async def downgrade():
    """Drop grocery_items table."""
    async with engine.begin() as conn:
        await conn.execute(text("DROP TABLE IF EXISTS grocery_items;"))
        print("✅ Dropped grocery_items table")


if __name__ == "__main__":
    import sys

    if len(sys.argv) > 1 and sys.argv[1] == "down":
        asyncio.run(downgrade())
    else:
        asyncio.run(upgrade())
