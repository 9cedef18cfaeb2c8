from budgetly.models import Budget, Category, Goal, Transaction, User
from budgetly.seed import DEFAULT_CATEGORIES, seed_database


def test_seed_is_idempotent(session_factory):
    db = session_factory()
    seed_database(db)
    seed_database(db)

    assert db.query(Category).count() == len(DEFAULT_CATEGORIES)
    assert db.query(User).count() == 1
    assert db.query(Transaction).count() == 5
    assert db.query(Budget).count() == 1
    assert db.query(Goal).count() == 2
    db.close()


def test_seed_reset_restores_demo_state(session_factory):
    db = session_factory()
    seed_database(db)
    user = db.query(User).one()
    user.balance = 0
    db.commit()

    seed_database(db, reset=True)
    assert db.query(User).one().to_dict()["balance"] == "847.32"
    assert db.query(Transaction).count() == 5
    db.close()


def test_seeded_budget_spent_matches_sample_food_expenses(session_factory):
    db = session_factory()
    seed_database(db)
    budget = db.query(Budget).one()
    food = sum(t.amount for t in db.query(Transaction).filter_by(type="expense", category_id=budget.category_id))
    assert budget.spent == food
    db.close()
