"""SQLAlchemy models for meal planning."""

from sqlalchemy import Column, String, Integer, DateTime, Date, Uuid
import uuid
import enum

from app.db.database import Base
from app.models.profile import JSONType, utcnow


class MealType(str, enum.Enum):
    """Types of meals, in the order plans cycle through them."""
    BREAKFAST = "Breakfast"
    LUNCH = "Lunch"
    DINNER = "Dinner"
    SNACK = "Snack"


class PlanSource(str, enum.Enum):
    """Where a plan's contents came from."""
    AI = "ai"
    FALLBACK = "fallback"


class MealPlan(Base):
    """
    A generated plan of days x meals for one user.

    Plans are never edited - regenerating creates a new row. The 'plan_data'
    JSON column holds the validated plan body:
    {"days": [{"day": 1, "date": "2025-08-03", "meals": [{"type", "name", "recipe", "ingredients"}]}]}
    """

    __tablename__ = "meal_plans"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(String(64), nullable=False, index=True)
    week_start_date = Column(Date, nullable=False, index=True)
    plan_data = Column(JSONType, nullable=False)
    meals_per_day = Column(Integer, nullable=False, default=3)
    total_days = Column(Integer, nullable=False, default=7)
    source = Column(String(16), nullable=False, default=PlanSource.AI.value)
    created_at = Column(DateTime(timezone=True), default=utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<MealPlan {self.id}: week of {self.week_start_date}>"
