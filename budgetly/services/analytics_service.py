"""
analytics_service.py — Spending breakdown & trends
Pure derivations over a user's transaction history, recomputed on every call.
The module-level functions take plain lists so they can run on any snapshot;
AnalyticsService loads that snapshot from the database.
"""

from datetime import datetime, timedelta
from decimal import Decimal
from typing import Iterable

from sqlalchemy.orm import Session

from budgetly.models.transaction import Transaction
from budgetly.services.category_service import CategoryService
from budgetly.utils import ZERO, format_amount, round_percent, to_decimal, utcnow

TREND_WINDOW = timedelta(days=30)
# |change| above this many percent counts as a real move up or down
TREND_FLAT_BAND = 5


def _expenses(transactions: Iterable[Transaction]) -> list[Transaction]:
    return [t for t in transactions if t.type == "expense"]


def _change_percent(recent: Decimal, previous: Decimal) -> float:
    # No previous spend reads as no change, not an infinite increase
    if previous <= 0:
        return 0.0
    return round(float((recent - previous) * 100 / previous), 2)


def _direction(change: float) -> str:
    if change > TREND_FLAT_BAND:
        return "up"
    if change < -TREND_FLAT_BAND:
        return "down"
    return "flat"


def category_breakdown(transactions: Iterable[Transaction], categories: dict[int, dict]) -> list[dict]:
    """Expense totals and whole-number percentages per category, largest first."""
    totals: dict[int, Decimal] = {}
    for t in _expenses(transactions):
        totals[t.category_id] = totals.get(t.category_id, ZERO) + to_decimal(t.amount)

    total = sum(totals.values(), ZERO)
    rows = [
        {
            "category": CategoryService.describe(categories, category_id),
            "amount": amount,
            "percentage": round_percent(amount * 100 / total) if total > 0 else 0,
        }
        for category_id, amount in totals.items()
    ]
    rows.sort(key=lambda r: r["amount"], reverse=True)
    for r in rows:
        r["amount"] = format_amount(r["amount"])
    return rows


def spending_trends(
    transactions: Iterable[Transaction], categories: dict[int, dict], now: datetime | None = None
) -> dict:
    """Compare the last 30 days of spending with the 30 days before that."""
    now = now or utcnow()
    recent_start = now - TREND_WINDOW
    previous_start = now - 2 * TREND_WINDOW

    expenses = _expenses(transactions)
    recent = [t for t in expenses if recent_start <= t.date < now]
    previous = [t for t in expenses if previous_start <= t.date < recent_start]

    # category_id -> [recent, previous]; insertion order is discovery order
    per_category: dict[int, list[Decimal]] = {}
    for slot, window in ((0, recent), (1, previous)):
        for t in window:
            sums = per_category.setdefault(t.category_id, [ZERO, ZERO])
            sums[slot] += to_decimal(t.amount)

    recent_total = sum((to_decimal(t.amount) for t in recent), ZERO)
    previous_total = sum((to_decimal(t.amount) for t in previous), ZERO)
    total_change = _change_percent(recent_total, previous_total)

    trends = []
    for category_id, (cat_recent, cat_previous) in per_category.items():
        if cat_recent <= 0 and cat_previous <= 0:
            continue
        change = _change_percent(cat_recent, cat_previous)
        trends.append({
            "category": CategoryService.describe(categories, category_id),
            "recent": format_amount(cat_recent),
            "previous": format_amount(cat_previous),
            "change": change,
            "direction": _direction(change),
        })
    # sort is stable, so equal changes keep discovery order
    trends.sort(key=lambda r: abs(r["change"]), reverse=True)

    return {
        "recent_total": format_amount(recent_total),
        "previous_total": format_amount(previous_total),
        "total_change": total_change,
        "direction": _direction(total_change),
        "categories": trends,
    }


class AnalyticsService:
    @staticmethod
    def _snapshot(db: Session, user_id: int) -> tuple[list[Transaction], dict[int, dict]]:
        txs = db.query(Transaction).filter_by(user_id=user_id).all()
        return txs, CategoryService.lookup(db)

    @staticmethod
    def get_spending_breakdown(db: Session, user_id: int) -> list[dict]:
        txs, categories = AnalyticsService._snapshot(db, user_id)
        return category_breakdown(txs, categories)

    @staticmethod
    def get_spending_trends(db: Session, user_id: int, now: datetime | None = None) -> dict:
        txs, categories = AnalyticsService._snapshot(db, user_id)
        return spending_trends(txs, categories, now=now)
