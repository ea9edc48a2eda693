# cart_api/utils/settings.py
import os
from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./cart.db")
DB_STATEMENT_TIMEOUT_MS = int(os.getenv("DB_STATEMENT_TIMEOUT_MS", 5000))
DB_RETRY_ATTEMPTS = int(os.getenv("DB_RETRY_ATTEMPTS", 3))

CATALOG_PAGE_SIZE = int(os.getenv("CATALOG_PAGE_SIZE", 3))
CATALOG_MAX_PAGE_SIZE = int(os.getenv("CATALOG_MAX_PAGE_SIZE", 50))
SEED_CATALOG = os.getenv("SEED_CATALOG", "true").lower() in ("1", "true", "yes")

CURRENCY = os.getenv("CURRENCY", "USD")
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

ENVIRONMENT = os.getenv("ENVIRONMENT", "development").lower()
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG" if ENVIRONMENT == "development" else "INFO")
