from sqlalchemy import Column, Integer, Numeric, ForeignKey, UniqueConstraint
from budgetly.database import Base
from budgetly.utils import format_amount


class Budget(Base):
    __tablename__ = "budgets"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)  # limit
    spent = Column(Numeric(10, 2), nullable=False, default=0)

    __table_args__ = (
        UniqueConstraint("user_id", "category_id", name="uq_budget_user_category"),
    )

    def to_dict(self, category: dict | None = None) -> dict:
        data = {
            "id": self.id,
            "user_id": self.user_id,
            "category_id": self.category_id,
            "amount": format_amount(self.amount),
            "spent": format_amount(self.spent),
        }
        if category is not None:
            data["category"] = category
        return data
