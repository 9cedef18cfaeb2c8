from datetime import datetime, timedelta

from budgetly.models.transaction import Transaction
from budgetly.services.analytics_service import AnalyticsService, category_breakdown, spending_trends
from budgetly.services.category_service import CategoryService
from budgetly.services.finance_service import FinanceService

NOW = datetime(2026, 6, 30, 12, 0)

CATEGORIES = {
    1: {"id": 1, "name": "Food & Dining", "icon": "fas fa-utensils", "color": "#F59E0B"},
    2: {"id": 2, "name": "Transportation", "icon": "fas fa-car", "color": "#3B82F6"},
    3: {"id": 3, "name": "Entertainment", "icon": "fas fa-film", "color": "#8B5CF6"},
}


def tx(amount, category_id, days_ago=1, type="expense"):
    return Transaction(
        user_id=1, type=type, amount=amount, category_id=category_id,
        description="t", date=NOW - timedelta(days=days_ago),
    )


def test_breakdown_two_categories():
    rows = category_breakdown([tx("40", 2), tx("60", 1)], CATEGORIES)
    assert [(r["category"]["name"], r["amount"], r["percentage"]) for r in rows] == [
        ("Food & Dining", "60.00", 60),
        ("Transportation", "40.00", 40),
    ]


def test_breakdown_ignores_income():
    rows = category_breakdown([tx("60", 1), tx("1000", 1, type="income")], CATEGORIES)
    assert rows[0]["amount"] == "60.00"
    assert rows[0]["percentage"] == 100


def test_breakdown_empty_and_zero_totals():
    assert category_breakdown([], CATEGORIES) == []
    assert category_breakdown([tx("500", 1, type="income")], CATEGORIES) == []
    rows = category_breakdown([tx("0", 1)], CATEGORIES)
    assert rows[0]["percentage"] == 0


def test_breakdown_percentages_sum_to_about_100():
    rows = category_breakdown([tx("1", 1), tx("1", 2), tx("1", 3)], CATEGORIES)
    assert [r["percentage"] for r in rows] == [33, 33, 33]
    assert abs(sum(r["percentage"] for r in rows) - 100) <= len(rows)


def test_breakdown_rounds_half_up():
    rows = category_breakdown([tx("1", 1), tx("7", 2)], CATEGORIES)
    # 12.5% and 87.5%
    assert [r["percentage"] for r in rows] == [88, 13]


def test_breakdown_unknown_category_is_other():
    rows = category_breakdown([tx("5", 99)], CATEGORIES)
    assert rows[0]["category"]["name"] == "Other"
    assert rows[0]["category"]["id"] == 99


def test_trends_compare_windows():
    txs = [
        tx("150", 1, days_ago=5),   # recent
        tx("100", 1, days_ago=40),  # previous
        tx("20", 2, days_ago=10),   # recent
        tx("50", 2, days_ago=45),   # previous
        tx("999", 3, days_ago=75),  # too old
        tx("500", 1, days_ago=3, type="income"),
    ]
    trends = spending_trends(txs, CATEGORIES, now=NOW)

    assert trends["recent_total"] == "170.00"
    assert trends["previous_total"] == "150.00"
    assert trends["total_change"] == 13.33
    assert trends["direction"] == "up"
    assert [(c["category"]["name"], c["change"], c["direction"]) for c in trends["categories"]] == [
        ("Transportation", -60.0, "down"),
        ("Food & Dining", 50.0, "up"),
    ]


def test_trends_no_previous_spend_reports_zero_change():
    trends = spending_trends([tx("80", 1, days_ago=2)], CATEGORIES, now=NOW)
    assert trends["total_change"] == 0.0
    assert trends["direction"] == "flat"
    assert trends["categories"][0]["change"] == 0.0
    assert trends["categories"][0]["recent"] == "80.00"


def test_trends_window_boundaries():
    txs = [
        tx("10", 1, days_ago=30),  # exactly now-30d: recent window
        tx("10", 2, days_ago=60),  # exactly now-60d: previous window
        tx("10", 3, days_ago=0),   # exactly now: excluded
    ]
    trends = spending_trends(txs, CATEGORIES, now=NOW)
    assert trends["recent_total"] == "10.00"
    assert trends["previous_total"] == "10.00"
    assert {c["category"]["id"] for c in trends["categories"]} == {1, 2}


def test_trends_ties_keep_discovery_order():
    txs = [
        tx("10", 3, days_ago=1),
        tx("10", 1, days_ago=2),
        tx("10", 2, days_ago=40),
    ]
    trends = spending_trends(txs, CATEGORIES, now=NOW)
    # category 2 only has previous spend: -100%; 3 and 1 tie at 0%
    assert [c["category"]["id"] for c in trends["categories"]] == [2, 3, 1]


def test_trends_empty():
    trends = spending_trends([], CATEGORIES, now=NOW)
    assert trends == {
        "recent_total": "0.00",
        "previous_total": "0.00",
        "total_change": 0.0,
        "direction": "flat",
        "categories": [],
    }


def test_service_breakdown_reads_user_transactions(db, user):
    FinanceService.record_transaction(db, user.id, "expense", "60", 1, "Groceries")
    FinanceService.record_transaction(db, user.id, "expense", "40", 2, "Bus")

    rows = AnalyticsService.get_spending_breakdown(db, user.id)
    assert [(r["category"]["name"], r["percentage"]) for r in rows] == [
        ("Food & Dining", 60),
        ("Transportation", 40),
    ]
    assert rows[0]["category"] == CategoryService.get(db, 1).to_dict()


def test_service_trends_with_no_data(db, user):
    trends = AnalyticsService.get_spending_trends(db, user.id)
    assert trends["categories"] == []
    assert trends["total_change"] == 0.0
