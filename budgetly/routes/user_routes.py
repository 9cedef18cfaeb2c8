from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from budgetly.auth import get_current_user
from budgetly.database import get_db
from budgetly.models.user import User
from budgetly.services.category_service import CategoryService
from budgetly.services.finance_service import FinanceService

router = APIRouter(prefix="/api/v1", tags=["User"])


@router.get("/user")
def current_user(user: User = Depends(get_current_user)):
    return user.to_dict()


@router.post("/user/recompute")
def recompute_user(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Rebuild the user's running totals from the transaction log."""
    return FinanceService.recompute_aggregates(db, user.id).to_dict()


@router.get("/categories")
def list_categories(db: Session = Depends(get_db)):
    return [c.to_dict() for c in CategoryService.list_all(db)]


@router.get("/categories/{category_id}")
def get_category(category_id: int, db: Session = Depends(get_db)):
    return CategoryService.get(db, category_id).to_dict()
