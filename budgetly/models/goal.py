from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Text, DateTime, Numeric, Boolean, ForeignKey
from budgetly.database import Base
from budgetly.utils import format_amount

DEFAULT_GOAL_ICON = "fas fa-bullseye"
DEFAULT_GOAL_COLOR = "#3B82F6"


class Goal(Base):
    __tablename__ = "goals"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False, default="")
    target_amount = Column(Numeric(10, 2), nullable=False)
    current_amount = Column(Numeric(10, 2), nullable=False, default=0)
    target_date = Column(DateTime, nullable=True)
    icon = Column(String(100), nullable=False, default=DEFAULT_GOAL_ICON)
    color = Column(String(20), nullable=False, default=DEFAULT_GOAL_COLOR)
    # Derived: current_amount >= target_amount, recomputed on every progress change
    is_completed = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc).replace(tzinfo=None))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "title": self.title,
            "description": self.description,
            "target_amount": format_amount(self.target_amount),
            "current_amount": format_amount(self.current_amount),
            "target_date": self.target_date.isoformat() if self.target_date else None,
            "icon": self.icon,
            "color": self.color,
            "is_completed": self.is_completed,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
