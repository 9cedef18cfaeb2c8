import os
from dotenv import load_dotenv

load_dotenv()

# --- App ---
APP_NAME = os.getenv("APP_NAME", "Budgetly")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# --- Database ---
# Default to local SQLite, but prefer environment variable (Postgres in deployment)
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./data/budgetly.db")

# Fix for common SQLAlchemy issues with postgres:// vs postgresql://
if DATABASE_URL.startswith("postgres://"):
    DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql://", 1)

# --- Demo user ---
# There is no login: requests without an X-User header act as this user.
DEMO_USERNAME = os.getenv("DEMO_USERNAME", "student")
SEED_DEMO_DATA = os.getenv("SEED_DEMO_DATA", "true").lower() in ("1", "true", "yes")
