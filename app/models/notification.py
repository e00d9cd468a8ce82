"""SQLAlchemy model for scheduled meal reminders."""

from sqlalchemy import Column, String, Text, Boolean, DateTime, ForeignKey, Uuid
import uuid

from app.db.database import Base
from app.models.profile import utcnow


class Notification(Base):
    """
    A reminder message due at a point in time.

    Delivery happens elsewhere; 'is_sent' is only ever written by the
    delivery worker.
    """

    __tablename__ = "notifications"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(String(64), nullable=False, index=True)
    meal_plan_id = Column(Uuid(as_uuid=True), ForeignKey("meal_plans.id", ondelete="CASCADE"), nullable=True)
    message = Column(Text, nullable=False)
    scheduled_time = Column(DateTime(timezone=True), nullable=False, index=True)
    is_sent = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    def __repr__(self):
        return f"<Notification {self.scheduled_time}: {self.message[:30]}>"
