"""Grocery list service - expands plans into rows and folds rows for display."""

import enum
from datetime import date, datetime, timezone
from typing import Iterable, Optional
from uuid import UUID

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.grocery import GroceryItem, DEFAULT_QUANTITY
from app.models.meal_plan import MealPlan
from app.models.schemas import DisplayItem, Meal, PlanData
from app.services.week import PLAN_WEEK_START, start_of_week, week_bounds


class GroceryScope(str, enum.Enum):
    """Which rows a grocery list read covers."""
    ALL = "all"                    # every row the user owns
    WEEK = "week"                  # rows tagged with one week_start_date
    CURRENT_PLAN = "current_plan"  # rows of the newest plan created this week


# ============================================================
# Write path
# ============================================================

def items_for_meal(plan: MealPlan, meal: Meal) -> list[GroceryItem]:
    """One unpurchased row per ingredient of a single meal."""
    return [
        GroceryItem(
            user_id=plan.user_id,
            meal_plan_id=plan.id,
            week_start_date=plan.week_start_date,
            item_name=ingredient,
            quantity=DEFAULT_QUANTITY,
            is_purchased=False,
        )
        for ingredient in meal.ingredients
    ]


def expand_plan(plan: MealPlan) -> list[GroceryItem]:
    """
    One row per (meal, ingredient) pair across the whole plan.

    Repeated ingredients produce repeated rows; folding happens on read.
    """
    plan_data = PlanData.model_validate(plan.plan_data)
    items = []
    for day in plan_data.days:
        for meal in day.meals:
            items.extend(items_for_meal(plan, meal))
    return items


# ============================================================
# Read path
# ============================================================

def _first_seen_order(item: GroceryItem):
    created = item.created_at or datetime.min
    if created.tzinfo is not None:
        created = created.astimezone(timezone.utc).replace(tzinfo=None)
    return created, str(item.id)


def aggregate_items(items: Iterable[GroceryItem]) -> list[DisplayItem]:
    """
    Fold rows with the same name (case-insensitive) into one display line.

    The earliest row of each group supplies id, name, purchased flag and
    notes. Its quantity becomes the distinct quantities of the group joined
    with ", " in first-seen order; no unit arithmetic is attempted. Rows are
    ordered by (created_at, id) first, so the result does not depend on the
    order the rows arrive in.
    """
    grouped: dict[str, DisplayItem] = {}
    quantities: dict[str, list[str]] = {}

    for item in sorted(items, key=_first_seen_order):
        key = item.item_name.lower()
        quantity = item.quantity or DEFAULT_QUANTITY

        if key not in grouped:
            grouped[key] = DisplayItem(
                id=item.id,
                item_name=item.item_name,
                quantity=quantity,
                is_purchased=bool(item.is_purchased),
                notes=item.notes,
            )
            quantities[key] = [quantity]
        elif quantity not in quantities[key]:
            quantities[key].append(quantity)
            grouped[key].quantity = ", ".join(quantities[key])

    return list(grouped.values())


async def find_current_week_plan(
    db: AsyncSession,
    user_id: str,
    today: Optional[date] = None,
) -> Optional[MealPlan]:
    """Newest plan whose created_at falls inside the current plan week."""
    week_start = start_of_week(today or date.today(), PLAN_WEEK_START)
    start, end = week_bounds(week_start, tzinfo=timezone.utc)

    result = await db.execute(
        select(MealPlan)
        .where(
            MealPlan.user_id == user_id,
            MealPlan.created_at >= start,
            MealPlan.created_at < end,
        )
        .order_by(MealPlan.created_at.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def resolve_scope_week(
    db: AsyncSession,
    user_id: str,
    scope: GroceryScope,
    week_start: Optional[date] = None,
    today: Optional[date] = None,
) -> Optional[date]:
    """
    Week a scoped read or clear applies to.

    None for ALL, and for CURRENT_PLAN when no plan was created this week.
    """
    if scope == GroceryScope.ALL:
        return None
    if scope == GroceryScope.WEEK:
        return start_of_week(week_start or today or date.today(), PLAN_WEEK_START)
    plan = await find_current_week_plan(db, user_id, today=today)
    return plan.week_start_date if plan else None


async def list_items(
    db: AsyncSession,
    user_id: str,
    scope: GroceryScope = GroceryScope.CURRENT_PLAN,
    week_start: Optional[date] = None,
    today: Optional[date] = None,
) -> tuple[Optional[date], list[GroceryItem]]:
    """
    Load raw grocery rows for one scope.

    Returns (week the scope resolved to, rows). An empty scope is an empty
    list, never an error.
    """
    resolved_week = await resolve_scope_week(db, user_id, scope, week_start, today)
    if scope != GroceryScope.ALL and resolved_week is None:
        return None, []

    query = select(GroceryItem).where(GroceryItem.user_id == user_id)
    if resolved_week is not None:
        query = query.where(GroceryItem.week_start_date == resolved_week)

    result = await db.execute(query.order_by(GroceryItem.created_at, GroceryItem.id))
    return resolved_week, list(result.scalars().all())


# ============================================================
# Mutations
# ============================================================

async def add_item(
    db: AsyncSession,
    user_id: str,
    item_name: str,
    quantity: Optional[str] = None,
    notes: Optional[str] = None,
    today: Optional[date] = None,
) -> GroceryItem:
    """Add a hand-entered item to the current plan week."""
    item = GroceryItem(
        user_id=user_id,
        week_start_date=start_of_week(today or date.today(), PLAN_WEEK_START),
        item_name=item_name.strip(),
        quantity=(quantity or "").strip() or DEFAULT_QUANTITY,
        notes=notes,
        is_purchased=False,
    )
    db.add(item)
    await db.commit()
    await db.refresh(item)
    return item


async def set_purchased(
    db: AsyncSession,
    user_id: str,
    item_id: UUID,
    is_purchased: bool,
) -> Optional[GroceryItem]:
    """Update one row's purchased flag. None if the user has no such row."""
    result = await db.execute(
        select(GroceryItem).where(
            GroceryItem.id == item_id,
            GroceryItem.user_id == user_id,
        )
    )
    item = result.scalar_one_or_none()
    if not item:
        return None

    item.is_purchased = is_purchased
    await db.commit()
    await db.refresh(item)
    return item


async def clear_purchased(
    db: AsyncSession,
    user_id: str,
    scope: GroceryScope = GroceryScope.WEEK,
    today: Optional[date] = None,
) -> int:
    """Delete purchased rows, either for the current plan week or everywhere."""
    query = delete(GroceryItem).where(
        GroceryItem.user_id == user_id,
        GroceryItem.is_purchased == True,  # noqa: E712
    )

    if scope != GroceryScope.ALL:
        week = await resolve_scope_week(db, user_id, scope, today=today)
        if week is None:
            return 0
        query = query.where(GroceryItem.week_start_date == week)

    result = await db.execute(query)
    await db.commit()
    return result.rowcount or 0
