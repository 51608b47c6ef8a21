"""
SQLite foundation for the record store.
Each named collection is one row holding its records as a JSON array.
"""

import sqlite3
from contextlib import contextmanager
from typing import Generator

from .config import get_db_path, ensure_db_directory


@contextmanager
def get_db(db_path: str = None) -> Generator[sqlite3.Connection, None, None]:
    """Get a SQLite database connection."""
    path = db_path or get_db_path()
    if path != ":memory:":
        ensure_db_directory(path)
    conn = sqlite3.connect(path)
    try:
        yield conn
    finally:
        conn.close()


def init_db(db_path: str = None):
    """Initialize the database with required tables."""
    with get_db(db_path) as conn:
        cursor = conn.cursor()

        cursor.execute('''
            CREATE TABLE IF NOT EXISTS collections (
                name TEXT PRIMARY KEY,
                payload TEXT NOT NULL,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        ''')

        conn.commit()


def health_check(db_path: str = None) -> bool:
    """Check database health."""
    try:
        with get_db(db_path) as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT name FROM sqlite_master WHERE type='table';")
            table_names = [row[0] for row in cursor.fetchall()]
            return 'collections' in table_names
    except sqlite3.Error:
        return False
