"""
Migration: Create notifications table

Run with: python -m migrations.004_create_notifications
"""

import asyncio
from sqlalchemy import text
from app.db.database import engine


async def upgrade():
    """Create notifications table."""
    async with engine.begin() as conn:
        await conn.execute(text("""
            CREATE TABLE IF NOT EXISTS notifications (
                id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
                user_id VARCHAR(64) NOT NULL,
                meal_plan_id UUID REFERENCES meal_plans(id) ON DELETE CASCADE,
                message TEXT NOT NULL,
                scheduled_time TIMESTAMP WITH TIME ZONE NOT NULL,
                is_sent BOOLEAN NOT NULL DEFAULT FALSE,
                created_at TIMESTAMP WITH TIME ZONE DEFAULT NOW()
            );
        """))

        # The delivery worker polls unsent reminders by time
        await conn.execute(text("""
            CREATE INDEX IF NOT EXISTS idx_notifications_due
            ON notifications(scheduled_time) WHERE is_sent = FALSE;
        """))

        await conn.execute(text("""
            CREATE INDEX IF NOT EXISTS idx_notifications_user_time
            ON notifications(user_id, scheduled_time);
        """))

        print("✅ Created notifications table")


async def downgrade():
    """Drop notifications table."""
    async with engine.begin() as conn:
        await conn.execute(text("DROP TABLE IF EXISTS notifications;"))
        print("✅ Dropped notifications table")


if __name__ == "__main__":
    import sys

    if len(sys.argv) > 1 and sys.argv[1] == "down":
        asyncio.run(downgrade())
    else:
        asyncio.run(upgrade())
