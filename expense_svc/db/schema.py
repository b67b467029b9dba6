"""Database schema DDL definitions and initialization utilities.

Tables:
  - expenses: individual expense records, each owned by one user id
  - metadata: key/value store (schema version)
"""

from __future__ import annotations
import sqlite3
from typing import Sequence
from pathlib import Path

BASIC_UTC_NOW = "strftime('%Y-%m-%dT%H:%M:%fZ','now')"
SCHEMA_VERSION = 1
SCHEMA_VERSION_KEY = "schema_version"

# AUTOINCREMENT keeps deleted ids from ever being handed out again.
EXPENSES_DDL = f"""
CREATE TABLE IF NOT EXISTS expenses (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id TEXT NOT NULL,
    location TEXT NOT NULL,
    amount REAL NOT NULL,
    date TEXT NOT NULL, -- ISO date (YYYY-MM-DD)
    category TEXT NOT NULL,
    created_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW}),
    updated_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW})
);
"""

METADATA_DDL = f"""
CREATE TABLE IF NOT EXISTS metadata (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW})
);
"""

EXPENSES_USER_DATE_INDEX_DDL = (
    "CREATE INDEX IF NOT EXISTS idx_expenses_user_date ON expenses(user_id, date);"
)

DDL_ORDER: Sequence[str] = (
    EXPENSES_DDL,
    METADATA_DDL,
    EXPENSES_USER_DATE_INDEX_DDL,
)


def init_db(path: Path) -> int:
    """Create all tables idempotently and return the recorded schema version.

    Parameters
    ----------
    path: Path to SQLite database file.
    """
    conn = sqlite3.connect(path)
    try:
        cur = conn.cursor()
        for ddl in DDL_ORDER:
            cur.execute(ddl)
        cur.execute(
            "INSERT INTO metadata (key, value) VALUES (?, ?) "
            "ON CONFLICT(key) DO UPDATE SET value=excluded.value, "
            f"updated_at=({BASIC_UTC_NOW})",
            (SCHEMA_VERSION_KEY, str(SCHEMA_VERSION)),
        )
        conn.commit()
        return SCHEMA_VERSION
    finally:
        conn.close()
