from .profile import UserProfile, DietPreferences
from .meal_plan import MealPlan, MealType, PlanSource
from .grocery import GroceryItem
from .notification import Notification

__all__ = [
    "UserProfile",
    "DietPreferences",
    "MealPlan",
    "MealType",
    "PlanSource",
    "GroceryItem",
    "Notification",
]
