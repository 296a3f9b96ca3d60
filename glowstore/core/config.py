"""
Configuration for the glow persistence service.
All values come from the environment (optionally via a .env file).
"""

import os
from pathlib import Path
from typing import List

from dotenv import load_dotenv

load_dotenv()

# Database path configuration
DB_PATH = os.getenv("DB_PATH", "./data/glow.db")
DB_TIMEOUT_SEC = float(os.getenv("DB_TIMEOUT_SEC", "5.0"))

# Insert-conflict fallback attempts for upserts
UPSERT_CONFLICT_RETRIES = int(os.getenv("UPSERT_CONFLICT_RETRIES", "3"))

DEBUG = os.getenv("DEBUG", "false").lower() == "true"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Comma-separated list, "*" allows any origin (in-world HTTP requests carry no fixed origin)
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")

# Version string
VERSION = "1.0.0"


def get_db_path() -> str:
    """Current database path. Read on every call so tests can point it elsewhere."""
    return os.getenv("DB_PATH", DB_PATH)


def get_db_timeout() -> float:
    return float(os.getenv("DB_TIMEOUT_SEC", str(DB_TIMEOUT_SEC)))


def get_upsert_conflict_retries() -> int:
    return max(1, int(os.getenv("UPSERT_CONFLICT_RETRIES", str(UPSERT_CONFLICT_RETRIES))))


def debug_enabled() -> bool:
    """Check if debug mode is enabled."""
    return os.getenv("DEBUG", "false").lower() == "true"


def get_cors_origins() -> List[str]:
    origins = [o.strip() for o in CORS_ORIGINS.split(",") if o.strip()]
    return origins or ["*"]


def ensure_db_directory():
    """Ensure the database directory exists."""
    Path(get_db_path()).parent.mkdir(parents=True, exist_ok=True)
