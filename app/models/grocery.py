"""SQLAlchemy model for grocery list items."""

from sqlalchemy import Column, String, Boolean, DateTime, Date, ForeignKey, Uuid
import uuid

from app.db.database import Base
from app.models.profile import utcnow

DEFAULT_QUANTITY = "1 unit"


class GroceryItem(Base):
    """
    Grocery list item model.

    Rows are written one per (meal, ingredient) pair and never merged on
    write - duplicates are folded only when the list is displayed.
    """

    __tablename__ = "grocery_items"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(String(64), nullable=False, index=True)
    meal_plan_id = Column(Uuid(as_uuid=True), ForeignKey("meal_plans.id", ondelete="CASCADE"), nullable=True, index=True)
    week_start_date = Column(Date, nullable=True, index=True)
    item_name = Column(String(255), nullable=False)
    quantity = Column(String(50), nullable=False, default=DEFAULT_QUANTITY)
    is_purchased = Column(Boolean, nullable=False, default=False)
    notes = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<GroceryItem {self.item_name} ({self.quantity})>"
