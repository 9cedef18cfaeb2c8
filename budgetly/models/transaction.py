from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey
from budgetly.database import Base
from budgetly.utils import format_amount

TRANSACTION_TYPES = ("income", "expense")


class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    type = Column(String(20), nullable=False)  # income/expense
    amount = Column(Numeric(10, 2), nullable=False)
    # Weak reference: unknown ids are kept and shown as "Other"
    category_id = Column(Integer, nullable=False)
    description = Column(String(500), nullable=False)
    date = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc).replace(tzinfo=None))

    def to_dict(self, category: dict | None = None) -> dict:
        data = {
            "id": self.id,
            "user_id": self.user_id,
            "type": self.type,
            "amount": format_amount(self.amount),
            "category_id": self.category_id,
            "description": self.description,
            "date": self.date.isoformat() if self.date else None,
        }
        if category is not None:
            data["category"] = category
        return data
