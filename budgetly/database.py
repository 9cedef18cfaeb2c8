import os
import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from budgetly.config import DATABASE_URL, LOG_LEVEL

logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)

# Seconds a SQLite connection waits for another writer's lock before failing
SQLITE_BUSY_TIMEOUT = 30


def make_engine(url: str = DATABASE_URL):
    connect_args = {}
    if url.startswith("sqlite"):
        # Sessions are handed across threads by the FastAPI threadpool
        connect_args = {"check_same_thread": False, "timeout": SQLITE_BUSY_TIMEOUT}
    return create_engine(url, connect_args=connect_args, pool_pre_ping=True)


engine = make_engine()
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """Request-scoped session for FastAPI dependencies."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None):
    """Create the data/ directory for SQLite files, then create all tables."""
    bind = bind or engine
    url = str(bind.url)
    if url.startswith("sqlite:///./"):
        os.makedirs(os.path.dirname(url[len("sqlite:///"):]) or ".", exist_ok=True)

    # Import all models so they register with Base.metadata
    import budgetly.models  # noqa: F401

    Base.metadata.create_all(bind=bind)
    logger.info("Database initialized at %s", bind.url.render_as_string(hide_password=True))
