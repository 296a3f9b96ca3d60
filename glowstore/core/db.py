"""
SQLite storage for glow records.
One row per canonical object id; the table enforces uniqueness.
"""

import sqlite3
from contextlib import contextmanager
from typing import Generator

from .config import get_db_path, get_db_timeout, ensure_db_directory

GLOW_TABLE = "glow_records"


@contextmanager
def get_db() -> Generator[sqlite3.Connection, None, None]:
    """Get a SQLite database connection.

    The connection runs in autocommit mode so callers open their own
    transactions (``BEGIN IMMEDIATE`` for writes).
    """
    conn = sqlite3.connect(get_db_path(), timeout=get_db_timeout(), isolation_level=None)
    conn.row_factory = sqlite3.Row
    try:
        yield conn
    finally:
        conn.close()


def init_db():
    """Initialize the database with required tables."""
    ensure_db_directory()
    with get_db() as conn:
        conn.execute(f'''
            CREATE TABLE IF NOT EXISTS {GLOW_TABLE} (
                object_id VARCHAR(36) NOT NULL PRIMARY KEY,
                data TEXT NOT NULL,
                updated_at TIMESTAMP NOT NULL
            )
        ''')


def health_check() -> bool:
    """Check database health."""
    try:
        with get_db() as conn:
            row = conn.execute(
                "SELECT name FROM sqlite_master WHERE type='table' AND name = ?",
                (GLOW_TABLE,)
            ).fetchone()
            return row is not None
    except sqlite3.Error:
        return False
