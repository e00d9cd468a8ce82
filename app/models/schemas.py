"""Pydantic schemas for plan payloads and API request/response validation.

The plan body ('days' -> 'meals') is decoded through these models at the
generation boundary, so nothing downstream ever sees untyped LLM output.
"""

from pydantic import BaseModel, Field, StringConstraints, field_validator
from typing import Annotated, Optional
from datetime import date, datetime
import datetime as dt
from uuid import UUID
import enum
import re

from app.models.meal_plan import MealType

TIME_OF_DAY = re.compile(r"^([01]?\d|2[0-3]):[0-5]\d$")


class DietType(str, enum.Enum):
    VEGETARIAN = "vegetarian"
    VEGAN = "vegan"
    GLUTEN_FREE = "gluten_free"
    DAIRY_FREE = "dairy_free"
    MEDITERRANEAN = "mediterranean"
    CUSTOM = "custom"


class ReminderTone(str, enum.Enum):
    MOTIVATIONAL = "motivational"
    GENTLE = "gentle"
    FUNNY = "funny"


DEFAULT_MEAL_TIMES = {
    "breakfast": "08:00",
    "lunch": "12:00",
    "dinner": "18:00",
}


def _check_meal_times(value: dict[str, str]) -> dict[str, str]:
    cleaned = {}
    for slot, at in (value or {}).items():
        if not TIME_OF_DAY.match(at or ""):
            raise ValueError(f"Invalid time for {slot}: {at!r} (expected HH:MM)")
        cleaned[slot.lower()] = at
    return cleaned


# ============================================================
# Generation input
# ============================================================

class Preferences(BaseModel):
    """Diet preferences snapshot used for a single generation call."""
    diet_type: DietType
    allergies: list[str] = []
    foods_to_avoid: list[str] = []
    preferred_cuisines: list[str] = []
    meals_per_day: int = Field(default=3, ge=1, le=6)
    total_days: int = Field(default=7, ge=1, le=14)
    include_snacks: bool = False
    meal_times: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_MEAL_TIMES))
    reminder_tone: ReminderTone = ReminderTone.MOTIVATIONAL
    reminder_enabled: bool = True

    @field_validator("meal_times")
    @classmethod
    def _valid_meal_times(cls, value):
        return _check_meal_times(value)

    @field_validator("allergies", "foods_to_avoid", "preferred_cuisines", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return value or []

    @field_validator("reminder_tone", mode="before")
    @classmethod
    def _default_tone(cls, value):
        return value or ReminderTone.MOTIVATIONAL

    class Config:
        from_attributes = True


# ============================================================
# Plan body (the 'plan_data' JSON column)
# ============================================================

class Meal(BaseModel):
    """One meal within a plan day."""
    type: str
    name: str
    recipe: str = ""
    ingredients: list[str] = []

    @field_validator("type")
    @classmethod
    def _known_meal_type(cls, value: str) -> str:
        normalized = value.strip().capitalize()
        if normalized not in {t.value for t in MealType}:
            raise ValueError(f"Unknown meal type: {value!r}")
        return normalized

    @field_validator("ingredients", mode="before")
    @classmethod
    def _ingredients_list(cls, value):
        if value is None:
            return []
        if not isinstance(value, list):
            return value
        cleaned = []
        for item in value:
            if isinstance(item, str):
                if item.strip():
                    cleaned.append(item.strip())
            else:
                # left for the list[str] check to reject
                cleaned.append(item)
        return cleaned


class PlanDay(BaseModel):
    """A single day of a plan. 'day' is 1-based."""
    day: int = Field(ge=1)
    date: Optional[dt.date] = None
    meals: list[Meal]


class PlanData(BaseModel):
    """The full plan body."""
    days: list[PlanDay]


# ============================================================
# Meal plan API
# ============================================================

class MealPlanResponse(BaseModel):
    """Meal plan response."""
    id: UUID
    week_start_date: date
    meals_per_day: int
    total_days: int
    source: str
    plan_data: PlanData
    created_at: datetime

    class Config:
        from_attributes = True


class PlanDayResponse(BaseModel):
    """Meals scheduled on one calendar date."""
    date: dt.date
    day: Optional[int] = None
    meals: list[Meal] = []


# ============================================================
# Profile API
# ============================================================

class ProfileUpdate(BaseModel):
    """Request to save the profile and diet preferences together."""
    full_name: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Optional[str] = Field(default=None, pattern="^(male|female|other)$")
    height_cm: Optional[float] = None
    weight_kg: Optional[float] = None
    fitness_goal: Optional[str] = Field(default=None, pattern="^(weight_loss|maintain|muscle_gain)$")
    activity_level: Optional[str] = Field(default=None, pattern="^(sedentary|lightly_active|active|very_active)$")

    diet_type: Optional[DietType] = None
    allergies: list[str] = []
    foods_to_avoid: list[str] = []
    preferred_cuisines: list[str] = []
    meals_per_day: int = Field(default=3, ge=1, le=6)
    total_days: int = Field(default=7, ge=1, le=14)
    include_snacks: bool = False
    meal_times: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_MEAL_TIMES))
    reminder_tone: ReminderTone = ReminderTone.MOTIVATIONAL
    reminder_enabled: bool = True

    @field_validator("meal_times")
    @classmethod
    def _valid_meal_times(cls, value):
        return _check_meal_times(value)


class ProfileResponse(BaseModel):
    """Profile and diet preferences as stored."""
    full_name: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Optional[str] = None
    height_cm: Optional[float] = None
    weight_kg: Optional[float] = None
    fitness_goal: Optional[str] = None
    activity_level: Optional[str] = None
    preferences: Optional[Preferences] = None
    complete: bool = False


class ProfileStatusResponse(BaseModel):
    complete: bool


# ============================================================
# Grocery API
# ============================================================

class GroceryItemCreate(BaseModel):
    """Request to add a grocery item by hand."""
    item_name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
    quantity: Optional[str] = Field(default=None, max_length=50)
    notes: Optional[str] = Field(default=None, max_length=255)


class GroceryItemUpdate(BaseModel):
    """Request to toggle a grocery item."""
    is_purchased: bool


class GroceryItemResponse(BaseModel):
    """Single grocery row."""
    id: UUID
    item_name: str
    quantity: str
    is_purchased: bool
    notes: Optional[str] = None
    meal_plan_id: Optional[UUID] = None
    week_start_date: Optional[date] = None

    class Config:
        from_attributes = True


class DisplayItem(BaseModel):
    """A grocery line after duplicate names are folded together."""
    id: UUID
    item_name: str
    quantity: str
    is_purchased: bool
    notes: Optional[str] = None


class GroceryListResponse(BaseModel):
    scope: str
    week_start_date: Optional[date] = None
    items: list[DisplayItem]


# ============================================================
# Notification API
# ============================================================

class ScheduleRemindersRequest(BaseModel):
    """Request to create reminders. Defaults to the most recent plan."""
    meal_plan_id: Optional[UUID] = None


class NotificationResponse(BaseModel):
    id: UUID
    meal_plan_id: Optional[UUID] = None
    message: str
    scheduled_time: datetime
    is_sent: bool

    class Config:
        from_attributes = True


class ScheduleRemindersResponse(BaseModel):
    message: str
    count: int
    notifications: list[NotificationResponse]


class CountResponse(BaseModel):
    message: str
    count: int


# ============================================================
# Utility Schemas
# ============================================================

class HealthResponse(BaseModel):
    """Health check response."""
    status: str = "healthy"
    environment: str
    database: str = "connected"
    llm: str = "fallback-only"  # comma-separated configured backends
    plan_week_start: str
    reminder_week_start: str


class ErrorResponse(BaseModel):
    """Standard error response."""
    detail: str
    error_code: Optional[str] = None
