"""
goal_service.py — Savings goals
Creation, absolute progress updates and atomic contributions. Completion is
always derived from current vs. target, never set directly.
"""

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from budgetly.errors import BudgetlyError, NotFoundError, ValidationError
from budgetly.models.goal import Goal, DEFAULT_GOAL_ICON, DEFAULT_GOAL_COLOR
from budgetly.services.user_service import UserService
from budgetly.utils import ZERO, parse_amount, to_decimal, to_naive_utc

logger = logging.getLogger(__name__)


class GoalService:
    @staticmethod
    def create(
        db: Session,
        user_id: int,
        title: str,
        description: str,
        target_amount,
        target_date: datetime | None = None,
        icon: str | None = None,
        color: str | None = None,
    ) -> Goal:
        title = (title or "").strip()
        if not title:
            raise ValidationError("title is required", "title")
        target = parse_amount(target_amount, "target_amount")
        user = UserService.get(db, user_id)

        try:
            goal = Goal(
                user_id=user.id,
                title=title,
                description=(description or "").strip(),
                target_amount=target,
                current_amount=ZERO,
                target_date=to_naive_utc(target_date) if target_date else None,
                icon=icon or DEFAULT_GOAL_ICON,
                color=color or DEFAULT_GOAL_COLOR,
                is_completed=False,
            )
            db.add(goal)
            db.commit()
            db.refresh(goal)
        except Exception:
            db.rollback()
            logger.exception("Failed to create goal %r for user %s", title, user_id)
            raise

        logger.info("Created goal %s %r (target %s) for user %s", goal.id, title, target, user.id)
        return goal

    @staticmethod
    def list_goals(db: Session, user_id: int) -> list[Goal]:
        """Newest first."""
        return (
            db.query(Goal)
            .filter_by(user_id=user_id)
            .order_by(Goal.created_at.desc(), Goal.id.desc())
            .all()
        )

    @staticmethod
    def _update_amount(db: Session, user_id: int, goal_id: int, amount_expr) -> Goal:
        """Write current_amount in one UPDATE, then re-derive is_completed from the stored row.

        The UPDATE holds the goal's write lock until commit, so the completion
        flag is derived from the amount this transaction wrote.
        """
        matched = (
            db.query(Goal)
            .filter_by(id=goal_id, user_id=user_id)
            .update({Goal.current_amount: amount_expr}, synchronize_session=False)
        )
        if not matched:
            raise NotFoundError("Goal", goal_id)
        goal = db.query(Goal).filter_by(id=goal_id).populate_existing().one()
        goal.is_completed = to_decimal(goal.current_amount) >= to_decimal(goal.target_amount)
        return goal

    @staticmethod
    def set_progress(db: Session, user_id: int, goal_id: int, new_amount) -> Goal:
        """Set current_amount to an absolute value. Overshoot and lowering are allowed."""
        value = parse_amount(new_amount, "amount", allow_zero=True)
        try:
            goal = GoalService._update_amount(db, user_id, goal_id, value)
            db.commit()
            db.refresh(goal)
        except BudgetlyError:
            db.rollback()
            raise
        except Exception:
            db.rollback()
            logger.exception("Failed to update progress of goal %s", goal_id)
            raise

        logger.info("Goal %s progress set to %s (completed=%s)", goal.id, value, goal.is_completed)
        return goal

    @staticmethod
    def add_contribution(db: Session, user_id: int, goal_id: int, delta) -> Goal:
        """Add delta to current_amount inside the UPDATE, so concurrent contributions all count."""
        value = parse_amount(delta, "amount")
        try:
            goal = GoalService._update_amount(db, user_id, goal_id, Goal.current_amount + value)
            db.commit()
            db.refresh(goal)
        except BudgetlyError:
            db.rollback()
            raise
        except Exception:
            db.rollback()
            logger.exception("Failed to add %s to goal %s", value, goal_id)
            raise

        logger.info("Added %s to goal %s (now %s, completed=%s)", value, goal.id, goal.current_amount, goal.is_completed)
        return goal

    @staticmethod
    def progress_percent(goal: Goal) -> float:
        target = to_decimal(goal.target_amount)
        if target <= 0:
            return 0.0
        return float(to_decimal(goal.current_amount) * 100 / target)
