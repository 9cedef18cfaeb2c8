"""
category_service.py — Category registry
Read-only lookups over the seeded spending categories.
"""

from sqlalchemy.orm import Session

from budgetly.errors import NotFoundError
from budgetly.models.category import Category, FALLBACK_CATEGORY


class CategoryService:
    @staticmethod
    def list_all(db: Session) -> list[Category]:
        return db.query(Category).order_by(Category.id.asc()).all()

    @staticmethod
    def get(db: Session, category_id: int) -> Category:
        category = db.query(Category).filter_by(id=category_id).first()
        if not category:
            raise NotFoundError("Category", category_id)
        return category

    @staticmethod
    def lookup(db: Session) -> dict[int, dict]:
        """Category metadata keyed by id, for enriching transactions and budgets."""
        return {c.id: c.to_dict() for c in CategoryService.list_all(db)}

    @staticmethod
    def describe(categories: dict[int, dict], category_id: int) -> dict:
        return categories.get(category_id) or dict(FALLBACK_CATEGORY, id=category_id)
