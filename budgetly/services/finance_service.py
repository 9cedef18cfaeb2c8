"""
finance_service.py — Transactions & Budgets
Records income/expense transactions and keeps the user's running balance,
monthly totals and per-category budget spend in step with them.
"""

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from budgetly.errors import BudgetlyError, NotFoundError, ValidationError
from budgetly.models.budget import Budget
from budgetly.models.transaction import Transaction, TRANSACTION_TYPES
from budgetly.models.user import User
from budgetly.services.category_service import CategoryService
from budgetly.services.user_service import UserService
from budgetly.utils import ZERO, parse_amount, to_decimal, to_naive_utc, utcnow

logger = logging.getLogger(__name__)


class FinanceService:
    @staticmethod
    def _lock_user(db: Session, user_id: int) -> User:
        """Take the user's write lock, held until commit or rollback, then load the row.

        SELECT ... FOR UPDATE is ignored by SQLite, so the lock is taken with a
        no-op UPDATE: a row lock on PostgreSQL, the database write lock on SQLite.
        """
        matched = (
            db.query(User)
            .filter_by(id=user_id)
            .update({User.balance: User.balance}, synchronize_session=False)
        )
        if not matched:
            raise NotFoundError("User", user_id)
        return db.query(User).filter_by(id=user_id).populate_existing().one()

    @staticmethod
    def record_transaction(
        db: Session,
        user_id: int,
        type: str,
        amount,
        category_id: int,
        description: str,
        date: datetime | None = None,
    ) -> Transaction:
        """Persist a transaction and apply it to the user's aggregates in one commit."""
        if type not in TRANSACTION_TYPES:
            raise ValidationError(f"type must be one of {', '.join(TRANSACTION_TYPES)}", "type")
        value = parse_amount(amount)
        if category_id is None:
            raise ValidationError("category_id is required", "category_id")
        description = (description or "").strip()
        if not description:
            raise ValidationError("description is required", "description")

        # Totals are incremented in SQL, never written back from values read in Python
        if type == "expense":
            user_changes = {
                User.balance: User.balance - value,
                User.monthly_spent: User.monthly_spent + value,
            }
        else:
            user_changes = {
                User.balance: User.balance + value,
                User.monthly_income: User.monthly_income + value,
            }

        try:
            matched = db.query(User).filter_by(id=user_id).update(user_changes, synchronize_session=False)
            if not matched:
                raise NotFoundError("User", user_id)

            if type == "expense":
                (
                    db.query(Budget)
                    .filter_by(user_id=user_id, category_id=category_id)
                    .update({Budget.spent: Budget.spent + value}, synchronize_session=False)
                )

            t = Transaction(
                user_id=user_id,
                type=type,
                amount=value,
                category_id=category_id,
                description=description,
                date=to_naive_utc(date) if date else utcnow(),
            )
            db.add(t)
            db.commit()
            db.refresh(t)
        except BudgetlyError:
            db.rollback()
            raise
        except Exception:
            db.rollback()
            logger.exception("Rolled back %s of %s for user %s", type, value, user_id)
            raise

        logger.info("Recorded %s %s (category=%s) for user %s", type, value, category_id, user_id)
        return t

    @staticmethod
    def list_transactions(
        db: Session, user_id: int, limit: int | None = None, category_id: int | None = None
    ) -> list[Transaction]:
        """Newest first."""
        if limit is not None and limit < 0:
            raise ValidationError("limit must not be negative", "limit")
        query = db.query(Transaction).filter_by(user_id=user_id)
        if category_id is not None:
            query = query.filter_by(category_id=category_id)
        query = query.order_by(Transaction.date.desc(), Transaction.id.desc())
        if limit:
            query = query.limit(limit)
        return query.all()

    @staticmethod
    def get_budget_for_category(db: Session, user_id: int, category_id: int) -> Budget | None:
        return db.query(Budget).filter_by(user_id=user_id, category_id=category_id).first()

    @staticmethod
    def list_budgets(db: Session, user_id: int) -> list[Budget]:
        return db.query(Budget).filter_by(user_id=user_id).order_by(Budget.id.asc()).all()

    @staticmethod
    def create_budget(db: Session, user_id: int, category_id: int, amount) -> Budget:
        value = parse_amount(amount)
        user = UserService.get(db, user_id)
        CategoryService.get(db, category_id)
        if FinanceService.get_budget_for_category(db, user.id, category_id):
            raise ValidationError(f"a budget already exists for category {category_id}", "category_id")

        try:
            b = Budget(user_id=user.id, category_id=category_id, amount=value, spent=ZERO)
            db.add(b)
            db.commit()
            db.refresh(b)
        except Exception:
            db.rollback()
            logger.exception("Failed to create budget for user %s category %s", user_id, category_id)
            raise

        logger.info("Created budget %s for category %s (limit %s)", b.id, category_id, value)
        return b

    @staticmethod
    def recompute_aggregates(db: Session, user_id: int) -> User:
        """Rebuild balance, monthly totals and budget spend from the transaction log.

        Idempotent. Totals that were seeded without backing transactions are
        replaced by what the log supports.
        """
        try:
            user = FinanceService._lock_user(db, user_id)
            txs = db.query(Transaction).filter_by(user_id=user.id).all()

            income = sum((to_decimal(t.amount) for t in txs if t.type == "income"), ZERO)
            spent_by_category = {}
            for t in txs:
                if t.type == "expense":
                    spent_by_category[t.category_id] = spent_by_category.get(t.category_id, ZERO) + to_decimal(t.amount)
            expenses = sum(spent_by_category.values(), ZERO)

            user.balance = income - expenses
            user.monthly_income = income
            user.monthly_spent = expenses
            for b in FinanceService.list_budgets(db, user.id):
                b.spent = spent_by_category.get(b.category_id, ZERO)

            db.commit()
            db.refresh(user)
        except BudgetlyError:
            db.rollback()
            raise
        except Exception:
            db.rollback()
            logger.exception("Failed to recompute aggregates for user %s", user_id)
            raise

        logger.info(
            "Recomputed aggregates for user %s: balance=%s income=%s spent=%s",
            user.id, user.balance, user.monthly_income, user.monthly_spent,
        )
        return user
