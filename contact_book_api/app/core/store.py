"""
Ordered record store for contacts.

``ContactStore`` is a durable mapping from contact id to
:class:`~contact_book_api.app.schemas.contact.Contact`, ordered by key.
It is backed by the ``contacts`` SQLite table created by
:func:`~contact_book_api.app.core.db.init_db`.  The interface is
intentionally that of a map (``get``, ``put``, ``remove``, ``values``);
all filtering happens above it, by scanning ``values()``.  Every scan
is therefore linear in the number of records.  Should contact volume
grow, secondary indexes on ``category`` and ``owner`` are the place to
start, behind the same service contract.

Keys and values are size‑bounded.  A write exceeding either bound, or
failing inside SQLite, raises :class:`StorageError` and leaves the
table unchanged.
"""

import json
import logging
import sqlite3
from typing import List, Optional

from .db import get_connection, get_cursor, get_database_path, init_db
from .errors import StorageError
from ..schemas.contact import Contact

logger = logging.getLogger(__name__)

_COLUMNS = "id, name, phone_number, email, category, address, owner, created_at, updated_at"


class ContactStore:
    """Key‑ordered, SQLite‑backed map of contact id to contact."""

    def __init__(self, db_path: Optional[str] = None, max_key_size: int = 44, max_value_size: int = 1024) -> None:
        self.db_path = get_database_path(db_path)
        self.max_key_size = max_key_size
        self.max_value_size = max_value_size
        init_db(self.db_path)
        logger.debug("Contact store opened at %s", self.db_path)

    def get(self, contact_id: str) -> Optional[Contact]:
        """Return the contact stored under ``contact_id`` or ``None``."""
        conn = get_connection(self.db_path)
        try:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM contacts WHERE id = ?",
                (contact_id,),
            ).fetchone()
            return self._row_to_contact(row) if row else None
        finally:
            conn.close()

    def put(self, contact_id: str, contact: Contact) -> None:
        """Insert ``contact`` under ``contact_id``, replacing any existing value."""
        self._check_capacity(contact_id, contact)
        try:
            with get_cursor(self.db_path) as cursor:
                cursor.execute(
                    f"INSERT OR REPLACE INTO contacts ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
                    (
                        contact_id,
                        contact.name,
                        contact.phone_number,
                        contact.email,
                        contact.category,
                        contact.address,
                        contact.owner,
                        contact.created_at,
                        contact.updated_at,
                    ),
                )
        except sqlite3.Error as exc:
            logger.error("Failed to store contact %s: %s", contact_id, exc)
            raise StorageError(f"Error occurred while storing contact id={contact_id}") from exc

    def remove(self, contact_id: str) -> Optional[Contact]:
        """Delete the contact under ``contact_id`` and return it, or ``None`` if absent."""
        try:
            with get_cursor(self.db_path) as cursor:
                row = cursor.execute(
                    f"SELECT {_COLUMNS} FROM contacts WHERE id = ?",
                    (contact_id,),
                ).fetchone()
                if not row:
                    return None
                cursor.execute("DELETE FROM contacts WHERE id = ?", (contact_id,))
                return self._row_to_contact(row)
        except sqlite3.Error as exc:
            logger.error("Failed to delete contact %s: %s", contact_id, exc)
            raise StorageError(f"Error occurred while deleting contact id={contact_id}") from exc

    def values(self) -> List[Contact]:
        """Return every stored contact in ascending key order.

        A single SELECT is issued, so the result is a consistent
        snapshot even if a write happens concurrently.
        """
        conn = get_connection(self.db_path)
        try:
            rows = conn.execute(f"SELECT {_COLUMNS} FROM contacts ORDER BY id ASC").fetchall()
            return [self._row_to_contact(row) for row in rows]
        finally:
            conn.close()

    def __len__(self) -> int:
        conn = get_connection(self.db_path)
        try:
            return conn.execute("SELECT COUNT(*) FROM contacts").fetchone()[0]
        finally:
            conn.close()

    def __contains__(self, contact_id: object) -> bool:
        if not isinstance(contact_id, str):
            return False
        return self.get(contact_id) is not None

    def _check_capacity(self, contact_id: str, contact: Contact) -> None:
        key_size = len(contact_id.encode("utf-8"))
        if key_size > self.max_key_size:
            raise StorageError(
                f"Contact id is {key_size} bytes; the store accepts at most {self.max_key_size}"
            )
        encoded = json.dumps(contact.model_dump(by_alias=True), separators=(",", ":"), ensure_ascii=False)
        value_size = len(encoded.encode("utf-8"))
        if value_size > self.max_value_size:
            raise StorageError(
                f"Contact is {value_size} bytes; the store accepts at most {self.max_value_size}"
            )

    @staticmethod
    def _row_to_contact(row: sqlite3.Row) -> Contact:
        """Convert a database row to a Contact instance."""
        return Contact(
            id=row["id"],
            name=row["name"],
            phone_number=row["phone_number"],
            email=row["email"],
            category=row["category"],
            address=row["address"],
            owner=row["owner"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
