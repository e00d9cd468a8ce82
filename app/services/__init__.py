"""Services module for meal planning."""

from .openai_client import openai_service, OpenAIService
from .llm_client import llm_service, LLMService
from .plan_generator import meal_plan_generator, MealPlanGenerator
from .profile import profile_status_cache, ProfileStatusCache

__all__ = [
    "openai_service",
    "OpenAIService",
    "llm_service",
    "LLMService",
    "meal_plan_generator",
    "MealPlanGenerator",
    "profile_status_cache",
    "ProfileStatusCache",
]
