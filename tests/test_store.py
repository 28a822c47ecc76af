"""
Record store tests.

The store behaves like a durable ordered map: point lookups, upserts,
deletes returning the prior value, and key-ordered enumeration that
survives re-opening the database file.
"""

import sqlite3

import pytest

from contact_book_api.app.core.db import MIGRATIONS, get_connection, init_db
from contact_book_api.app.core.errors import StorageError
from contact_book_api.app.core.store import ContactStore
from contact_book_api.app.schemas.contact import Contact


def make_contact(contact_id: str, **overrides) -> Contact:
    data = {
        "id": contact_id,
        "name": "Ann",
        "phone_number": "555",
        "email": "a@x.com",
        "category": "Work",
        "address": "1 St",
        "owner": "alice",
        "created_at": 1_000,
        "updated_at": None,
    }
    data.update(overrides)
    return Contact(**data)


class TestMapOperations:

    def test_get_missing_returns_none(self, store):
        assert store.get("nope") is None

    def test_put_then_get(self, store):
        contact = make_contact("a")
        store.put("a", contact)
        assert store.get("a") == contact

    def test_put_replaces_existing_value(self, store):
        store.put("a", make_contact("a"))
        store.put("a", make_contact("a", name="Bea", updated_at=2_000))

        stored = store.get("a")
        assert stored.name == "Bea"
        assert stored.updated_at == 2_000
        assert len(store) == 1

    def test_remove_returns_prior_value(self, store):
        contact = make_contact("a")
        store.put("a", contact)

        assert store.remove("a") == contact
        assert store.get("a") is None
        assert "a" not in store

    def test_remove_missing_returns_none(self, store):
        assert store.remove("missing") is None

    def test_values_in_key_order(self, store):
        for key in ["c", "a", "b"]:
            store.put(key, make_contact(key))
        assert [c.id for c in store.values()] == ["a", "b", "c"]

    def test_values_empty(self, store):
        assert store.values() == []
        assert len(store) == 0

    def test_contains_ignores_non_strings(self, store):
        store.put("1", make_contact("1"))
        assert "1" in store
        assert 1 not in store


class TestDurability:

    def test_records_survive_reopening(self, db_path):
        ContactStore(db_path).put("a", make_contact("a", updated_at=5_000))

        reopened = ContactStore(db_path)
        assert reopened.get("a") == make_contact("a", updated_at=5_000)

    def test_init_db_is_idempotent(self, db_path):
        latest = MIGRATIONS[-1][0]
        assert init_db(db_path) == latest
        assert init_db(db_path) == latest

        conn = get_connection(db_path)
        try:
            versions = [row["version"] for row in conn.execute("SELECT version FROM migrations")]
        finally:
            conn.close()
        assert versions == [version for version, _ in MIGRATIONS]


class TestCapacity:

    def test_oversized_key_rejected(self, store):
        key = "k" * 45
        with pytest.raises(StorageError):
            store.put(key, make_contact(key))
        assert len(store) == 0

    def test_oversized_value_rejected(self, store):
        with pytest.raises(StorageError):
            store.put("a", make_contact("a", address="x" * 2_000))
        assert store.get("a") is None

    def test_value_size_counts_utf8_bytes(self, db_path):
        small = ContactStore(db_path, max_value_size=250)
        # 80 characters but 160 bytes of name
        contact = make_contact("a", name="é" * 80)
        with pytest.raises(StorageError):
            small.put("a", contact)

    def test_failed_replace_keeps_previous_value(self, store):
        store.put("a", make_contact("a"))
        with pytest.raises(StorageError):
            store.put("a", make_contact("a", address="x" * 2_000))
        assert store.get("a").address == "1 St"

    def test_sqlite_failure_becomes_storage_error(self, store, monkeypatch):
        def broken_cursor(*args, **kwargs):
            raise sqlite3.OperationalError("disk I/O error")

        monkeypatch.setattr("contact_book_api.app.core.store.get_cursor", broken_cursor)
        with pytest.raises(StorageError):
            store.put("a", make_contact("a"))
