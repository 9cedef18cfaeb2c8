from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, Numeric, DateTime
from budgetly.database import Base
from budgetly.utils import format_amount


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(50), unique=True, nullable=False)
    # Running totals, updated incrementally on every transaction
    balance = Column(Numeric(10, 2), nullable=False, default=0)
    monthly_income = Column(Numeric(10, 2), nullable=False, default=0)
    monthly_spent = Column(Numeric(10, 2), nullable=False, default=0)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc).replace(tzinfo=None))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "balance": format_amount(self.balance),
            "monthly_income": format_amount(self.monthly_income),
            "monthly_spent": format_amount(self.monthly_spent),
        }
