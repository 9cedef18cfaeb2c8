import threading
import time
from decimal import Decimal

import pytest
from sqlalchemy.orm import sessionmaker

from budgetly.database import init_db, make_engine
from budgetly.models import Budget, Goal, Transaction, User
from budgetly.seed import seed_categories
from budgetly.services import finance_service, goal_service
from budgetly.services.finance_service import FinanceService
from budgetly.services.goal_service import GoalService
from budgetly.services.user_service import UserService

WORKERS = 5


@pytest.fixture
def file_sessions(tmp_path):
    """Sessions on a file-backed SQLite database, one connection per thread."""
    engine = make_engine(f"sqlite:///{tmp_path / 'budgetly.db'}")
    init_db(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = factory()
    seed_categories(db)
    db.close()
    yield factory
    engine.dispose()


@pytest.fixture
def account(file_sessions):
    db = file_sessions()
    user = UserService.create(db, "tester", balance="100.00")
    budget = FinanceService.create_budget(db, user.id, 1, "50.00")
    ids = user.id, budget.id
    db.close()
    return ids


def run_together(session_factory, work, workers=WORKERS):
    barrier = threading.Barrier(workers)
    errors = []

    def worker(n):
        db = session_factory()
        try:
            barrier.wait()
            work(db, n)
        except Exception as exc:
            errors.append(exc)
        finally:
            db.close()

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(workers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert errors == []


def slowed(func, delay=0.05):
    def wrapper(*args, **kwargs):
        time.sleep(delay)
        return func(*args, **kwargs)
    return wrapper


def test_simultaneous_expenses_are_all_applied(file_sessions, account, monkeypatch):
    user_id, budget_id = account
    # widen the gap between the aggregate update and the commit
    monkeypatch.setattr(finance_service, "utcnow", slowed(finance_service.utcnow))

    run_together(
        file_sessions,
        lambda db, n: FinanceService.record_transaction(db, user_id, "expense", "1.00", 1, f"Snack {n}"),
    )

    db = file_sessions()
    user = db.query(User).filter_by(id=user_id).one()
    assert db.query(Transaction).filter_by(user_id=user_id).count() == WORKERS
    assert user.balance == Decimal("95.00")
    assert user.monthly_spent == Decimal("5.00")
    assert db.query(Budget).filter_by(id=budget_id).one().spent == Decimal("5.00")
    db.close()


def test_recompute_during_writes_matches_the_log(file_sessions, account):
    user_id, _ = account

    def work(db, n):
        if n == 0:
            FinanceService.recompute_aggregates(db, user_id)
        else:
            FinanceService.record_transaction(db, user_id, "income", "10.00", 6, f"Shift {n}")

    run_together(file_sessions, work)

    db = file_sessions()
    user = db.query(User).filter_by(id=user_id).one()
    before = (user.balance, user.monthly_income, user.monthly_spent)
    FinanceService.recompute_aggregates(db, user_id)
    user = db.query(User).filter_by(id=user_id).one()
    assert (user.balance, user.monthly_income, user.monthly_spent) == before
    assert user.balance == Decimal("40.00")
    assert user.monthly_income == Decimal("40.00")
    db.close()


def test_simultaneous_contributions_all_count(file_sessions, account, monkeypatch):
    user_id, _ = account
    db = file_sessions()
    goal_id = GoalService.create(db, user_id, "New Laptop", "", "1000.00").id
    db.close()
    monkeypatch.setattr(goal_service, "to_decimal", slowed(goal_service.to_decimal))

    run_together(file_sessions, lambda db, n: GoalService.add_contribution(db, user_id, goal_id, "10.00"))

    db = file_sessions()
    goal = db.query(Goal).filter_by(id=goal_id).one()
    assert goal.current_amount == Decimal("50.00")
    assert goal.is_completed is False
    db.close()


def test_simultaneous_contributions_complete_the_goal(file_sessions, account):
    user_id, _ = account
    db = file_sessions()
    goal_id = GoalService.create(db, user_id, "Bike", "", "40.00").id
    db.close()

    run_together(file_sessions, lambda db, n: GoalService.add_contribution(db, user_id, goal_id, "10.00"))

    db = file_sessions()
    goal = db.query(Goal).filter_by(id=goal_id).one()
    assert goal.current_amount == Decimal("50.00")
    assert goal.is_completed is True
    db.close()
