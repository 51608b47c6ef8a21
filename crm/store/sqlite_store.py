"""
SQLite-backed record store.
One row per collection holding its records as a JSON array, like the browser storage it replaces.
"""

import json
import sqlite3
from typing import List

from crm.core.db import get_db, init_db, health_check
from util.logging import logger

from .index import IRecordStore
from .types import Record


class SqliteRecordStore(IRecordStore):
    """Record store persisted in a SQLite database file."""

    provider = "sqlite"

    def __init__(self, db_path: str):
        if db_path == ":memory:":
            raise ValueError("SqliteRecordStore needs a file path; use InMemoryRecordStore instead")
        self.db_path = db_path
        init_db(self.db_path)

    def get(self, module: str) -> List[Record]:
        with get_db(self.db_path) as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT payload FROM collections WHERE name = ?", (module,))
            row = cursor.fetchone()

        if not row:
            return []

        try:
            records = json.loads(row[0])
        except json.JSONDecodeError as e:
            logger.error(f"Corrupt payload for collection '{module}': {e}")
            raise

        if not isinstance(records, list):
            raise ValueError(f"Collection '{module}' does not hold a list of records")
        return records

    def put(self, module: str, records: List[Record]) -> None:
        payload = json.dumps(list(records), default=str)
        try:
            with get_db(self.db_path) as conn:
                cursor = conn.cursor()
                cursor.execute(
                    """
                    INSERT INTO collections (name, payload, updated_at)
                    VALUES (?, ?, CURRENT_TIMESTAMP)
                    ON CONFLICT(name) DO UPDATE SET payload = excluded.payload, updated_at = CURRENT_TIMESTAMP
                    """,
                    (module, payload)
                )
                conn.commit()
        except sqlite3.Error as e:
            logger.log_record_operation("put", module, status="failed", details={"error": str(e)[:100]})
            raise

        logger.log_record_operation("put", module, details={"count": len(records)})

    def remove_all(self, module: str) -> None:
        try:
            with get_db(self.db_path) as conn:
                cursor = conn.cursor()
                cursor.execute("DELETE FROM collections WHERE name = ?", (module,))
                conn.commit()
        except sqlite3.Error as e:
            logger.log_record_operation("remove_all", module, status="failed", details={"error": str(e)[:100]})
            raise

        logger.log_record_operation("remove_all", module)

    def collections(self) -> List[str]:
        with get_db(self.db_path) as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT name FROM collections ORDER BY name")
            return [row[0] for row in cursor.fetchall()]

    def health_check(self) -> bool:
        return health_check(self.db_path)
