from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from budgetly.auth import get_current_user
from budgetly.database import get_db
from budgetly.models.user import User
from budgetly.services.notification_service import NotificationService

router = APIRouter(prefix="/api/v1/notifications", tags=["Notifications"])


@router.get("")
def list_notifications(exclude: str = "", user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Current alerts. `exclude` is a comma-separated list of ids the client already read or dismissed."""
    exclude_ids = [i.strip() for i in exclude.split(",") if i.strip()]
    return NotificationService.get_for_user(db, user.id, exclude_ids=exclude_ids)
