"""Domain errors raised by the meal planning services.

Routers translate these into HTTP responses. BackendUnavailable and
MalformedResponse are recovered inside the plan generator and never reach
a router.
"""


class MealPlannerError(Exception):
    """Base class for meal planner errors."""


class ProfileIncomplete(MealPlannerError):
    """Diet preferences are missing, generation is refused."""

    def __init__(self, message: str = "No preferences found. Please complete your profile first."):
        super().__init__(message)


class BackendUnavailable(MealPlannerError):
    """The text generation backend failed, timed out or is not configured."""


class MalformedResponse(MealPlannerError):
    """The backend answered but the payload is not a usable plan."""


class PersistenceFailure(MealPlannerError):
    """Writing to the database failed."""
