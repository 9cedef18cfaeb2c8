"""
seed.py — Reference categories and the demo user
Run directly to (re)seed the configured database:

    python -m budgetly.seed [--reset]
"""

import argparse
import logging
from datetime import timedelta

from sqlalchemy.orm import Session

from budgetly.config import DEMO_USERNAME
from budgetly.models import Budget, Category, Goal, Transaction, User
from budgetly.utils import utcnow

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = [
    {"id": 1, "name": "Food & Dining", "icon": "fas fa-utensils", "color": "#F59E0B"},
    {"id": 2, "name": "Transportation", "icon": "fas fa-car", "color": "#3B82F6"},
    {"id": 3, "name": "Entertainment", "icon": "fas fa-film", "color": "#8B5CF6"},
    {"id": 4, "name": "Shopping", "icon": "fas fa-shopping-bag", "color": "#EF4444"},
    {"id": 5, "name": "Education", "icon": "fas fa-graduation-cap", "color": "#10B981"},
    {"id": 6, "name": "Income", "icon": "fas fa-dollar-sign", "color": "#059669"},
    {"id": 7, "name": "Other", "icon": "fas fa-question", "color": "#9E9E9E"},
]

# (type, amount, category_id, description, days ago)
SAMPLE_TRANSACTIONS = [
    ("expense", "4.85", 1, "Coffee", 1),
    ("expense", "12.50", 1, "Lunch", 2),
    ("expense", "25.00", 2, "Bus Pass", 3),
    ("expense", "15.99", 3, "Movie Ticket", 4),
    ("income", "150.00", 6, "Part-time Job", 5),
]


def seed_categories(db: Session) -> int:
    """Insert any missing default categories. Returns how many were added."""
    existing = {c.id for c in db.query(Category).all()}
    added = 0
    for data in DEFAULT_CATEGORIES:
        if data["id"] not in existing:
            db.add(Category(**data))
            added += 1
    db.commit()
    return added


def seed_demo_user(db: Session, username: str = DEMO_USERNAME) -> User | None:
    """Create the demo user with sample data. Does nothing if the user exists.

    The opening totals are set directly, as the original demo data was, so
    they are not derivable from the sample transactions.
    """
    if db.query(User).filter_by(username=username).first():
        return None

    now = utcnow()
    user = User(username=username, balance="847.32", monthly_income="1250.00", monthly_spent="402.68")
    db.add(user)
    db.flush()

    for type_, amount, category_id, description, days_ago in SAMPLE_TRANSACTIONS:
        db.add(Transaction(
            user_id=user.id, type=type_, amount=amount, category_id=category_id,
            description=description, date=now - timedelta(days=days_ago),
        ))

    db.add(Budget(user_id=user.id, category_id=1, amount="300.00", spent="17.35"))
    db.add(Goal(
        user_id=user.id, title="Emergency Fund",
        description="Build an emergency fund for unexpected expenses",
        target_amount="1000.00", current_amount="150.00",
        target_date=now + timedelta(days=90), icon="fas fa-shield-alt", color="#10B981",
    ))
    db.add(Goal(
        user_id=user.id, title="New Laptop",
        description="Save money for a new laptop for studies",
        target_amount="800.00", current_amount="0.00",
        target_date=now + timedelta(days=120), icon="fas fa-laptop", color="#3B82F6",
    ))
    db.commit()
    db.refresh(user)
    return user


def reset_database(db: Session) -> None:
    for model in (Goal, Budget, Transaction, User, Category):
        db.query(model).delete()
    db.commit()
    logger.info("Cleared all tables.")


def seed_database(db: Session, reset: bool = False) -> None:
    """Idempotent unless reset is set."""
    try:
        if reset:
            reset_database(db)
        added = seed_categories(db)
        user = seed_demo_user(db)
    except Exception:
        db.rollback()
        logger.exception("Seeding failed")
        raise
    logger.info(
        "Seeded %d categories%s.", added,
        f" and demo user '{user.username}'" if user else "",
    )


if __name__ == "__main__":
    from budgetly.database import SessionLocal, init_db

    parser = argparse.ArgumentParser(description="Seed the Budgetly database with demo data.")
    parser.add_argument("--reset", action="store_true", help="delete all rows before seeding")
    args = parser.parse_args()

    init_db()
    db = SessionLocal()
    try:
        seed_database(db, reset=args.reset)
    finally:
        db.close()
