"""SQLAlchemy models for user profiles and diet preferences."""

from sqlalchemy import Column, String, Boolean, Integer, Numeric, Date, DateTime, JSON, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from datetime import datetime, timezone
import uuid

from app.db.database import Base

JSONType = JSON().with_variant(JSONB(), "postgresql")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserProfile(Base):
    """Personal details collected on the profile screen."""

    __tablename__ = "user_profiles"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(String(64), nullable=False, unique=True, index=True)
    full_name = Column(String(255), nullable=True)
    date_of_birth = Column(Date, nullable=True)
    gender = Column(String(16), nullable=True)  # male|female|other
    height_cm = Column(Numeric, nullable=True)
    weight_kg = Column(Numeric, nullable=True)
    fitness_goal = Column(String(32), nullable=True)  # weight_loss|maintain|muscle_gain
    activity_level = Column(String(32), nullable=True)  # sedentary|lightly_active|active|very_active
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)


class DietPreferences(Base):
    """
    Per-user diet preferences - the input of plan generation.

    List columns (allergies, foods_to_avoid, preferred_cuisines) and
    meal_times ({"breakfast": "08:00", ...}) are stored as JSON.
    """

    __tablename__ = "diet_preferences"

    user_id = Column(String(64), primary_key=True)
    diet_type = Column(String(32), nullable=True)  # vegetarian|vegan|gluten_free|dairy_free|mediterranean|custom
    allergies = Column(JSONType, nullable=False, default=list)
    foods_to_avoid = Column(JSONType, nullable=False, default=list)
    preferred_cuisines = Column(JSONType, nullable=False, default=list)
    meals_per_day = Column(Integer, nullable=False, default=3)
    total_days = Column(Integer, nullable=False, default=7)
    include_snacks = Column(Boolean, nullable=False, default=False)
    meal_times = Column(JSONType, nullable=False, default=dict)
    reminder_tone = Column(String(16), nullable=True)  # motivational|gentle|funny
    reminder_enabled = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<DietPreferences user={self.user_id} diet={self.diet_type}>"
