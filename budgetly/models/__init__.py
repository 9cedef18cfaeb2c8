# Import all models so they register with SQLAlchemy Base.metadata
# This ensures Base.metadata.create_all() creates all tables

from budgetly.models.user import User
from budgetly.models.category import Category
from budgetly.models.transaction import Transaction
from budgetly.models.budget import Budget
from budgetly.models.goal import Goal

__all__ = [
    "User",
    "Category",
    "Transaction",
    "Budget",
    "Goal",
]
