"""Prompts for LLM meal plan generation."""

from app.models.schemas import Preferences

SYSTEM_PROMPT = "You are a meal planning engine. Build meal plans that respect dietary constraints and return valid JSON only."


def _listed(values: list[str], empty: str) -> str:
    cleaned = [v.strip() for v in values if v and v.strip()]
    return ", ".join(cleaned) if cleaned else empty


def get_meal_plan_prompt(preferences: Preferences) -> str:
    """
    Generate the meal plan prompt.

    Empty constraint lists are spelled out as "none" / "any" so the model
    never has to guess what a blank means.
    """
    diet = preferences.diet_type.value.replace("_", " ")
    days = preferences.total_days
    meals = preferences.meals_per_day

    return f"""Create a {days}-day {diet} meal plan with {meals} meals per day.
Avoid allergens: {_listed(preferences.allergies, "none")}.
Avoid foods: {_listed(preferences.foods_to_avoid, "none")}.
Preferred cuisines: {_listed(preferences.preferred_cuisines, "any")}.
Include snacks: {"Yes" if preferences.include_snacks else "No"}.

Output as structured JSON with this exact format:
{{
  "days": [
    {{
      "day": 1,
      "date": "YYYY-MM-DD",
      "meals": [
        {{
          "type": "Breakfast",
          "name": "Meal Name",
          "recipe": "Short recipe description with ingredients and steps",
          "ingredients": ["ingredient 1", "ingredient 2"]
        }}
      ]
    }}
  ]
}}

RULES:
- REQUIRED: exactly {days} entries in "days", numbered 1 to {days}
- REQUIRED: every day has exactly {meals} meals
- Meal "type" must be one of: Breakfast, Lunch, Dinner, Snack
- "ingredients" is an array of plain strings
- Never use an ingredient listed under allergens or foods to avoid
- Include realistic, healthy recipes with clear ingredient lists

Return ONLY the JSON object, no markdown or explanation."""
