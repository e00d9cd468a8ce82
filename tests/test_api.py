"""
API tests through the FastAPI app.

No LLM keys are configured, so every generated plan is the fallback plan.
"""

from datetime import date, timedelta
from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest

from app.auth import get_current_user
from app.errors import PersistenceFailure
from app.main import app


async def complete_profile(client, **overrides):
    body = {"full_name": "Ana", "diet_type": "vegan", "allergies": ["nuts"]}
    body.update(overrides)
    response = await client.put("/api/profile", json=body)
    assert response.status_code == 200
    return response.json()


async def generate(client):
    response = await client.post("/api/meal-plans/generate")
    assert response.status_code == 200
    return response.json()


# ============================================================
# Health / auth
# ============================================================

async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["database"] == "connected"
    assert data["llm"] == "fallback-only"
    assert data["plan_week_start"] == "sunday"
    assert data["reminder_week_start"] == "monday"


async def test_root(client):
    response = await client.get("/")
    assert response.json()["health"] == "/health"


async def test_untranslated_domain_error(client):
    with patch("app.routers.grocery.grocery_service.add_item", new=AsyncMock(side_effect=PersistenceFailure("disk full"))):
        response = await client.post("/api/grocery", json={"item_name": "Tomato"})

    assert response.status_code == 500
    assert response.json() == {"detail": "disk full", "error_code": "PersistenceFailure"}


async def test_requires_authentication(client):
    app.dependency_overrides.pop(get_current_user)

    response = await client.get("/api/meal-plans/current")

    assert response.status_code == 401


# ============================================================
# Profile
# ============================================================

async def test_empty_profile(client):
    response = await client.get("/api/profile")

    assert response.status_code == 200
    data = response.json()
    assert data["complete"] is False
    assert data["preferences"] is None


async def test_save_profile(client):
    data = await complete_profile(client, height_cm=170, reminder_tone="funny")

    assert data["complete"] is True
    assert data["height_cm"] == 170.0
    assert data["preferences"]["diet_type"] == "vegan"
    assert data["preferences"]["reminder_tone"] == "funny"
    assert data["preferences"]["meal_times"]["dinner"] == "18:00"

    status = await client.get("/api/profile/status")
    assert status.json() == {"complete": True}


async def test_profile_status_refreshes_after_save(client):
    assert (await client.get("/api/profile/status")).json() == {"complete": False}

    await complete_profile(client)

    assert (await client.get("/api/profile/status")).json() == {"complete": True}


@pytest.mark.parametrize("body", [
    {"full_name": "Ana", "diet_type": "carnivore"},
    {"full_name": "Ana", "diet_type": "vegan", "meals_per_day": 0},
    {"full_name": "Ana", "diet_type": "vegan", "total_days": 15},
    {"full_name": "Ana", "diet_type": "vegan", "meal_times": {"breakfast": "8am"}},
])
async def test_profile_validation(client, body):
    response = await client.put("/api/profile", json=body)
    assert response.status_code == 422


# ============================================================
# Meal plans
# ============================================================

async def test_generate_requires_preferences(client):
    response = await client.post("/api/meal-plans/generate")

    assert response.status_code == 400
    assert response.json()["detail"] == "No preferences found. Please complete your profile first."


async def test_generate_fallback_plan(client):
    await complete_profile(client)

    plan = await generate(client)

    assert plan["source"] == "fallback"
    assert plan["total_days"] == 7
    assert plan["meals_per_day"] == 3
    days = plan["plan_data"]["days"]
    assert [d["day"] for d in days] == list(range(1, 8))
    week_start = date.fromisoformat(plan["week_start_date"])
    assert week_start.weekday() == 6  # Sunday
    assert days[0]["date"] == plan["week_start_date"]
    for day in days:
        assert [m["type"] for m in day["meals"]] == ["Breakfast", "Lunch", "Dinner"]


async def test_current_and_list(client):
    assert (await client.get("/api/meal-plans/current")).json() is None

    await complete_profile(client)
    first = await generate(client)
    second = await generate(client)

    current = (await client.get("/api/meal-plans/current")).json()
    assert current["id"] == second["id"]

    plans = (await client.get("/api/meal-plans")).json()
    assert [p["id"] for p in plans] == [second["id"], first["id"]]

    single = await client.get(f"/api/meal-plans/{first['id']}")
    assert single.json()["id"] == first["id"]


async def test_unknown_plan(client):
    response = await client.get(f"/api/meal-plans/{uuid4()}")
    assert response.status_code == 404


async def test_plan_day_lookup(client):
    await complete_profile(client)
    plan = await generate(client)
    week_start = date.fromisoformat(plan["week_start_date"])

    on = (week_start + timedelta(days=2)).isoformat()
    day = (await client.get(f"/api/meal-plans/{plan['id']}/day", params={"on": on})).json()
    assert day["day"] == 3
    assert len(day["meals"]) == 3

    outside = (week_start - timedelta(days=1)).isoformat()
    empty = (await client.get(f"/api/meal-plans/{plan['id']}/day", params={"on": outside})).json()
    assert empty["day"] is None
    assert empty["meals"] == []


async def test_add_meal_to_grocery(client):
    await complete_profile(client)
    plan = await generate(client)

    response = await client.post(f"/api/meal-plans/{plan['id']}/days/1/meals/2/grocery")

    assert response.status_code == 200
    items = response.json()
    assert [i["item_name"] for i in items] == ["fish", "rice"]
    assert all(i["quantity"] == "1 unit" for i in items)
    assert all(i["meal_plan_id"] == plan["id"] for i in items)


@pytest.mark.parametrize("path", ["days/9/meals/0", "days/1/meals/3", "days/1/meals/-1"])
async def test_add_missing_meal_to_grocery(client, path):
    await complete_profile(client)
    plan = await generate(client)

    response = await client.post(f"/api/meal-plans/{plan['id']}/{path}/grocery")

    assert response.status_code == 404


# ============================================================
# Grocery
# ============================================================

async def test_grocery_list_after_generation(client):
    await complete_profile(client)
    await generate(client)

    response = await client.get("/api/grocery")

    assert response.status_code == 200
    data = response.json()
    assert data["scope"] == "current_plan"
    names = [i["item_name"] for i in data["items"]]
    assert sorted(names) == sorted(["oats", "milk", "chicken", "vegetables", "fish", "rice"])
    assert all(i["quantity"] == "1 unit" for i in data["items"])


async def test_grocery_list_empty_without_plan(client):
    response = await client.get("/api/grocery")

    assert response.status_code == 200
    assert response.json()["items"] == []


async def test_manual_item_toggle_and_clear(client):
    created = await client.post("/api/grocery", json={"item_name": "Tomato", "quantity": "2 cups"})
    assert created.status_code == 200
    await client.post("/api/grocery", json={"item_name": "tomato"})

    listing = (await client.get("/api/grocery", params={"scope": "week"})).json()
    assert len(listing["items"]) == 1
    assert listing["items"][0]["item_name"] == "Tomato"
    assert listing["items"][0]["quantity"] == "2 cups, 1 unit"

    item_id = created.json()["id"]
    toggled = await client.patch(f"/api/grocery/{item_id}", json={"is_purchased": True})
    assert toggled.json()["is_purchased"] is True

    cleared = await client.delete("/api/grocery/purchased")
    assert cleared.json()["count"] == 1

    remaining = (await client.get("/api/grocery", params={"scope": "all"})).json()
    assert [i["item_name"] for i in remaining["items"]] == ["tomato"]


async def test_toggle_unknown_item(client):
    response = await client.patch(f"/api/grocery/{uuid4()}", json={"is_purchased": True})
    assert response.status_code == 404


@pytest.mark.parametrize("body", [
    {"item_name": ""},
    {"item_name": "   "},
    {"item_name": "Tomato", "quantity": "x" * 51},
    {"item_name": "Tomato", "notes": "x" * 256},
    {"item_name": "x" * 256},
])
async def test_manual_item_validation(client, body):
    response = await client.post("/api/grocery", json=body)
    assert response.status_code == 422

    listing = (await client.get("/api/grocery", params={"scope": "all"})).json()
    assert listing["items"] == []


async def test_manual_item_name_is_trimmed(client):
    response = await client.post("/api/grocery", json={"item_name": "  Lemons  ", "quantity": "x" * 50})

    assert response.status_code == 200
    assert response.json()["item_name"] == "Lemons"


# ============================================================
# Notifications
# ============================================================

async def test_schedule_requires_plan(client):
    response = await client.post("/api/notifications/schedule", json={})
    assert response.status_code == 400


async def test_schedule_list_and_clear(client):
    await complete_profile(client)
    plan = await generate(client)

    response = await client.post("/api/notifications/schedule", json={"meal_plan_id": plan["id"]})

    assert response.status_code == 200
    data = response.json()
    assert data["count"] == 2 * 7 * 3 + 1
    assert len(data["notifications"]) == data["count"]

    upcoming = (await client.get("/api/notifications")).json()
    times = [n["scheduled_time"] for n in upcoming]
    assert times == sorted(times)
    assert len(upcoming) <= data["count"]

    cleared = (await client.delete("/api/notifications/past")).json()
    assert cleared["count"] == data["count"] - len(upcoming)


async def test_schedule_unknown_plan(client):
    response = await client.post("/api/notifications/schedule", json={"meal_plan_id": str(uuid4())})
    assert response.status_code == 404
