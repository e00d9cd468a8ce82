"""Grocery list API endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID
from typing import Optional
from datetime import date

from app.db import get_db
from app.config import get_settings
from app.models.schemas import (
    CountResponse,
    GroceryItemCreate,
    GroceryItemResponse,
    GroceryItemUpdate,
    GroceryListResponse,
)
from app.auth import get_current_user, AuthUser
from app.services import grocery as grocery_service
from app.services.grocery import GroceryScope

router = APIRouter(prefix="/api/grocery", tags=["grocery"])
settings = get_settings()


@router.get("", response_model=GroceryListResponse)
async def get_grocery_list(
    scope: GroceryScope = Query(default=GroceryScope.CURRENT_PLAN, description="all | week | current_plan"),
    week_start: Optional[date] = Query(default=None, description="Any date in the target week (scope=week)"),
    db: AsyncSession = Depends(get_db),
    user: AuthUser = Depends(get_current_user)
):
    """
    Get the grocery list with duplicate items folded together.

    Items with the same name (ignoring case) are shown once, with their
    distinct quantities listed.
    """
    resolved_week, items = await grocery_service.list_items(
        db, user.id, scope=scope, week_start=week_start
    )

    return GroceryListResponse(
        scope=scope.value,
        week_start_date=resolved_week,
        items=grocery_service.aggregate_items(items),
    )


@router.post("", response_model=GroceryItemResponse)
async def add_item(
    item: GroceryItemCreate,
    db: AsyncSession = Depends(get_db),
    user: AuthUser = Depends(get_current_user)
):
    """Add an item by hand to this week's list."""
    return await grocery_service.add_item(
        db, user.id, item.item_name, quantity=item.quantity, notes=item.notes
    )


@router.patch("/{item_id}", response_model=GroceryItemResponse)
async def toggle_item(
    item_id: UUID,
    update: GroceryItemUpdate,
    db: AsyncSession = Depends(get_db),
    user: AuthUser = Depends(get_current_user)
):
    """Mark a grocery item as purchased or not purchased."""
    item = await grocery_service.set_purchased(db, user.id, item_id, update.is_purchased)

    if not item:
        raise HTTPException(status_code=404, detail="Grocery item not found")

    return item


@router.delete("/purchased", response_model=CountResponse)
async def clear_purchased(
    scope: Optional[GroceryScope] = Query(default=None, description="Defaults to the configured clear scope"),
    db: AsyncSession = Depends(get_db),
    user: AuthUser = Depends(get_current_user)
):
    """Remove purchased items - this week's by default, or all with scope=all."""
    scope = scope or GroceryScope(settings.grocery_clear_scope)
    count = await grocery_service.clear_purchased(db, user.id, scope=scope)

    return CountResponse(
        message=f"Cleared {count} purchased items",
        count=count,
    )
