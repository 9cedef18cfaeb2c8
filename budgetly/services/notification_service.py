"""
notification_service.py — Alerts & monthly insights
Threshold rules over a (user, budgets, goals) snapshot. Nothing is persisted:
every call re-derives the full list, and ids are deterministic per rule and
entity so the client can track read/dismissed state by id.
"""

import math
from datetime import datetime
from decimal import Decimal
from typing import Iterable

from sqlalchemy.orm import Session

from budgetly.models.budget import Budget
from budgetly.models.goal import Goal
from budgetly.models.user import User
from budgetly.services.analytics_service import AnalyticsService
from budgetly.services.category_service import CategoryService
from budgetly.services.finance_service import FinanceService
from budgetly.services.goal_service import GoalService
from budgetly.services.user_service import UserService
from budgetly.utils import round_percent, to_decimal, utcnow

BUDGET_WARNING_PERCENT = 80
BUDGET_EXCEEDED_PERCENT = 100
GOAL_REMINDER_DAYS = 7
GOAL_REMINDER_PROGRESS = 80
LOW_SAVINGS_RATE = 10
HIGH_SAVINGS_RATE = 20
DOMINANT_CATEGORY_PERCENT = 50


def _notification(id, type, severity, title, message, icon, color, now) -> dict:
    return {
        "id": id,
        "type": type,
        "severity": severity,
        "title": title,
        "message": message,
        "icon": icon,
        "color": color,
        "created_at": now.isoformat(),
    }


def savings_rate(user: User) -> Decimal | None:
    """Percent of monthly income not spent; None when there is no income."""
    income = to_decimal(user.monthly_income)
    if income <= 0:
        return None
    return (income - to_decimal(user.monthly_spent)) * 100 / income


# --- Rules -----------------------------------------------------------------
# Each rule takes the snapshot and returns zero or more notifications.

def budget_rule(user, budgets, goals, categories, now) -> list[dict]:
    out = []
    for b in budgets:
        limit = to_decimal(b.amount)
        spent = to_decimal(b.spent)
        percentage = spent * 100 / limit if limit > 0 else Decimal(0)
        name = CategoryService.describe(categories, b.category_id)["name"]

        if percentage >= BUDGET_EXCEEDED_PERCENT:
            out.append(_notification(
                f"budget-over-{b.id}", "budget_warning", "high",
                "Budget Exceeded!",
                f"You've exceeded your {name} budget by ${spent - limit:.2f}",
                "fas fa-exclamation-triangle", "#EF4444", now,
            ))
        elif percentage >= BUDGET_WARNING_PERCENT:
            out.append(_notification(
                f"budget-warning-{b.id}", "budget_warning", "medium",
                "Budget Alert",
                f"You've used {round_percent(percentage)}% of your {name} budget",
                "fas fa-exclamation-circle", "#F59E0B", now,
            ))
    return out


def goal_deadline_rule(user, budgets, goals, categories, now) -> list[dict]:
    out = []
    for g in goals:
        if g.is_completed or not g.target_date:
            continue
        days_left = math.ceil((g.target_date - now).total_seconds() / 86400)
        if days_left <= GOAL_REMINDER_DAYS and GoalService.progress_percent(g) < GOAL_REMINDER_PROGRESS:
            if days_left > 0:
                message = f'Only {days_left} days left to reach your "{g.title}" goal!'
            else:
                message = f'The deadline for your "{g.title}" goal has passed.'
            out.append(_notification(
                f"goal-reminder-{g.id}", "goal_reminder", "medium",
                "Goal Deadline Approaching", message,
                "fas fa-clock", "#F59E0B", now,
            ))
    return out


def goal_achieved_rule(user, budgets, goals, categories, now) -> list[dict]:
    return [
        _notification(
            f"goal-achieved-{g.id}", "achievement", "celebratory",
            "Goal Achieved! 🎉",
            f'Congratulations! You\'ve reached your "{g.title}" goal of ${to_decimal(g.target_amount):.2f}!',
            "fas fa-trophy", "#10B981", now,
        )
        for g in goals
        # a goal already flagged completed was announced when it got there
        if not g.is_completed and GoalService.progress_percent(g) >= 100
    ]


def low_savings_rule(user, budgets, goals, categories, now) -> list[dict]:
    rate = savings_rate(user)
    if rate is None or rate >= LOW_SAVINGS_RATE:
        return []
    return [_notification(
        "low-savings-tip", "savings_tip", "info",
        "Savings Tip",
        f"You're saving {round_percent(rate)}% of your income. "
        "Try the 50/30/20 rule: 50% needs, 30% wants, 20% savings",
        "fas fa-lightbulb", "#3B82F6", now,
    )]


RULES = (budget_rule, goal_deadline_rule, goal_achieved_rule, low_savings_rule)


def generate_notifications(
    user: User,
    budgets: Iterable[Budget],
    goals: Iterable[Goal],
    categories: dict[int, dict] | None = None,
    now: datetime | None = None,
    exclude_ids: Iterable[str] = (),
) -> list[dict]:
    """Evaluate every rule; ids in exclude_ids (already read/dismissed) are dropped."""
    now = now or utcnow()
    budgets, goals = list(budgets), list(goals)
    categories = categories or {}
    skip = set(exclude_ids)

    notifications, seen = [], set()
    for rule in RULES:
        for n in rule(user, budgets, goals, categories, now):
            if n["id"] in skip or n["id"] in seen:
                continue
            seen.add(n["id"])
            notifications.append(n)
    return notifications


def generate_insights(user: User, breakdown: list[dict]) -> list[dict]:
    insights = []

    rate = savings_rate(user)
    if rate is not None:
        if rate > HIGH_SAVINGS_RATE:
            insights.append({
                "type": "success",
                "icon": "fas fa-thumbs-up",
                "title": "Great Savings!",
                "message": f"You're saving {rate:.1f}% of your income. Keep it up!",
            })
        elif rate < LOW_SAVINGS_RATE:
            insights.append({
                "type": "warning",
                "icon": "fas fa-exclamation-triangle",
                "title": "Low Savings Rate",
                "message": f"You're only saving {rate:.1f}% of your income. Consider reducing expenses.",
            })

    if breakdown and breakdown[0]["percentage"] > DOMINANT_CATEGORY_PERCENT:
        top = breakdown[0]
        insights.append({
            "type": "warning",
            "icon": "fas fa-exclamation-triangle",
            "title": "High Spending Alert",
            "message": f"{top['category']['name']} accounts for {top['percentage']}% of your spending.",
        })
    return insights


class NotificationService:
    @staticmethod
    def get_for_user(
        db: Session, user_id: int, exclude_ids: Iterable[str] = (), now: datetime | None = None
    ) -> list[dict]:
        user = UserService.get(db, user_id)
        return generate_notifications(
            user,
            FinanceService.list_budgets(db, user.id),
            GoalService.list_goals(db, user.id),
            CategoryService.lookup(db),
            now=now,
            exclude_ids=exclude_ids,
        )

    @staticmethod
    def get_insights(db: Session, user_id: int) -> list[dict]:
        user = UserService.get(db, user_id)
        return generate_insights(user, AnalyticsService.get_spending_breakdown(db, user.id))
