from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy.orm import Session

from budgetly.auth import get_current_user
from budgetly.database import get_db
from budgetly.models.user import User
from budgetly.services.category_service import CategoryService
from budgetly.services.finance_service import FinanceService

router = APIRouter(prefix="/api/v1", tags=["Finance"])


class TransactionCreate(BaseModel):
    type: str
    amount: str
    category_id: int
    description: str
    date: Optional[datetime] = None


class BudgetCreate(BaseModel):
    category_id: int
    amount: str


@router.get("/transactions")
def list_transactions(
    limit: Optional[int] = Query(None, ge=0),
    category_id: Optional[int] = None,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    categories = CategoryService.lookup(db)
    txs = FinanceService.list_transactions(db, user.id, limit=limit, category_id=category_id)
    return [t.to_dict(CategoryService.describe(categories, t.category_id)) for t in txs]


@router.post("/transactions", status_code=201)
def create_transaction(
    tx_data: TransactionCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    t = FinanceService.record_transaction(db, user.id, **tx_data.model_dump())
    return t.to_dict()


@router.get("/budgets")
def list_budgets(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    categories = CategoryService.lookup(db)
    return [
        b.to_dict(CategoryService.describe(categories, b.category_id))
        for b in FinanceService.list_budgets(db, user.id)
    ]


@router.post("/budgets", status_code=201)
def create_budget(
    budget_data: BudgetCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    b = FinanceService.create_budget(db, user.id, budget_data.category_id, budget_data.amount)
    return b.to_dict()
