from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from budgetly.auth import get_current_user
from budgetly.database import get_db
from budgetly.models.user import User
from budgetly.services.analytics_service import AnalyticsService
from budgetly.services.notification_service import NotificationService

router = APIRouter(prefix="/api/v1/analytics", tags=["Analytics"])


@router.get("/spending")
def spending_breakdown(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return AnalyticsService.get_spending_breakdown(db, user.id)


@router.get("/trends")
def spending_trends(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return AnalyticsService.get_spending_trends(db, user.id)


@router.get("/insights")
def monthly_insights(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return NotificationService.get_insights(db, user.id)
