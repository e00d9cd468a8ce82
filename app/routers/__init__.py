from .health import router as health_router
from .profile import router as profile_router
from .meal_plans import router as meal_plans_router
from .grocery import router as grocery_router
from .notifications import router as notifications_router

__all__ = ["health_router", "profile_router", "meal_plans_router", "grocery_router", "notifications_router"]
