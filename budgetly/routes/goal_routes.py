from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from budgetly.auth import get_current_user
from budgetly.database import get_db
from budgetly.models.user import User
from budgetly.services.goal_service import GoalService

router = APIRouter(prefix="/api/v1/goals", tags=["Goals"])


class GoalCreate(BaseModel):
    title: str
    description: str = ""
    target_amount: str
    target_date: Optional[datetime] = None
    icon: Optional[str] = None
    color: Optional[str] = None


class GoalAmount(BaseModel):
    amount: str


@router.get("")
def list_goals(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return [g.to_dict() for g in GoalService.list_goals(db, user.id)]


@router.post("", status_code=201)
def create_goal(goal_data: GoalCreate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    goal = GoalService.create(db, user.id, **goal_data.model_dump())
    return goal.to_dict()


@router.patch("/{goal_id}/progress")
def update_goal_progress(
    goal_id: int,
    body: GoalAmount,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Set the goal's saved amount to an absolute value."""
    goal = GoalService.set_progress(db, user.id, goal_id, body.amount)
    return {"message": "Goal progress updated successfully", "goal": goal.to_dict()}


@router.post("/{goal_id}/contributions")
def add_goal_contribution(
    goal_id: int,
    body: GoalAmount,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Add money to the goal."""
    goal = GoalService.add_contribution(db, user.id, goal_id, body.amount)
    return {"message": "Contribution added", "goal": goal.to_dict()}
