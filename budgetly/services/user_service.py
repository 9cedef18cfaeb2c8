"""
user_service.py — User lookup and provisioning
Users are resolved by numeric id or by username; there is no login.
"""

import logging

from sqlalchemy.orm import Session

from budgetly.errors import NotFoundError, ValidationError
from budgetly.models.user import User
from budgetly.utils import parse_amount

logger = logging.getLogger(__name__)


class UserService:
    @staticmethod
    def get(db: Session, key: int | str) -> User:
        """Look a user up by id (int or digit string) or by username."""
        if isinstance(key, int) or (isinstance(key, str) and key.isdigit()):
            user = db.query(User).filter_by(id=int(key)).first()
        else:
            user = db.query(User).filter_by(username=key).first()
        if not user:
            raise NotFoundError("User", key)
        return user

    @staticmethod
    def create(db: Session, username: str, balance="0.00", monthly_income="0.00", monthly_spent="0.00") -> User:
        username = (username or "").strip()
        if not username:
            raise ValidationError("username is required", "username")
        if username.isdigit():
            raise ValidationError("username must not be purely numeric", "username")
        if db.query(User).filter_by(username=username).first():
            raise ValidationError(f"username already taken: {username}", "username")

        user = User(
            username=username,
            balance=parse_amount(balance, "balance", allow_zero=True),
            monthly_income=parse_amount(monthly_income, "monthly_income", allow_zero=True),
            monthly_spent=parse_amount(monthly_spent, "monthly_spent", allow_zero=True),
        )
        try:
            db.add(user)
            db.commit()
            db.refresh(user)
        except Exception:
            db.rollback()
            logger.exception("Failed to create user %s", username)
            raise
        logger.info("Provisioned user %s (id=%s)", user.username, user.id)
        return user
