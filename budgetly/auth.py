from fastapi import Depends, Request
from sqlalchemy.orm import Session

from budgetly.config import DEMO_USERNAME
from budgetly.database import get_db
from budgetly.models.user import User
from budgetly.services.user_service import UserService

USER_HEADER = "X-User"


def get_current_user(request: Request, db: Session = Depends(get_db)) -> User:
    """
    FastAPI dependency — resolves the acting user from the X-User header
    (a username or numeric id), falling back to the configured demo user.
    Raises NotFoundError (HTTP 404) if no such user exists.
    """
    key = request.headers.get(USER_HEADER, "").strip() or DEMO_USERNAME
    return UserService.get(db, key)
