"""
SQLite database integration and simple migration system.

This module provides functions for obtaining a database connection
(``get_connection``) and applying migrations on application start
(``init_db``).  SQLite is the durable backend of the contact record
store: acknowledged writes are committed to the database file and
survive a restart.

The migration mechanism stores applied migration versions in the
``migrations`` table and executes new migrations in order.
"""

import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

from .config import settings


# Each migration is ``(version, sql)``.  Append new migrations with an
# incremented version number; never edit an applied one.
MIGRATIONS: List[Tuple[int, str]] = [
    # Migration 1: contact records keyed by their generated id.  No
    # secondary indexes; category, owner and name lookups scan the table
    # in key order.
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS contacts (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            phone_number TEXT NOT NULL,
            email TEXT NOT NULL,
            category TEXT NOT NULL,
            address TEXT NOT NULL,
            owner TEXT NOT NULL,
            created_at INTEGER NOT NULL,
            updated_at INTEGER
        );
        """,
    ),
]


def get_database_path(db_url: Optional[str] = None) -> str:
    """Compute the path to the SQLite database file.

    ``db_url`` defaults to ``settings.database_url``.  Absolute paths
    are used as is; relative paths are resolved against the project
    root.  Every store operation opens its own connection, so an
    in-memory database would not persist between calls.
    """
    db_url = db_url or settings.database_url
    if os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent  # contact_book_api/
    return str((base_dir / db_url).resolve())


def get_connection(db_path: Optional[str] = None) -> sqlite3.Connection:
    """Create and return a new SQLite connection.

    The connection uses a row factory to access columns by name.
    """
    conn = sqlite3.connect(get_database_path(db_path))
    conn.row_factory = sqlite3.Row
    return conn


@contextmanager
def get_cursor(db_path: Optional[str] = None) -> Iterator[sqlite3.Cursor]:
    """Context manager that yields a cursor, commits and closes the connection on exit.

    If the block raises, the transaction is rolled back before the
    connection is closed.
    """
    conn = get_connection(db_path)
    try:
        yield conn.cursor()
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def init_db(db_path: Optional[str] = None) -> int:
    """Initialise the database and apply pending migrations.

    Creates the ``migrations`` table if it does not exist, checks the
    current schema version and applies every newer entry of
    ``MIGRATIONS``.  Returns the schema version after migrating.
    """
    with get_cursor(db_path) as cursor:
        cursor.execute(
            "CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)"
        )
        cursor.execute("SELECT MAX(version) as version FROM migrations")
        row = cursor.fetchone()
        current_version = row["version"] if row and row["version"] is not None else 0

        for version, sql in MIGRATIONS:
            if version > current_version:
                cursor.executescript(sql)
                cursor.execute(
                    "INSERT INTO migrations (version) VALUES (?)", (version,)
                )
                current_version = version
    return current_version
