import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from budgetly.database import Base, get_db, init_db
from budgetly.main import create_app
from budgetly.seed import seed_categories, seed_database
from budgetly.services.user_service import UserService


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    seed_categories(session)
    yield session
    session.close()


@pytest.fixture
def user(db):
    return UserService.create(db, "tester", balance="100.00")


@pytest.fixture
def client(session_factory):
    seed_session = session_factory()
    seed_database(seed_session)
    seed_session.close()

    app = create_app(init_database=False)

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)
