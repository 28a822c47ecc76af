import asyncio

import pytest
from fastapi.testclient import TestClient

from contact_book_api.app.core.config import Settings
from contact_book_api.app.core.security import create_access_token
from contact_book_api.app.core.store import ContactStore
from contact_book_api.app.main import create_app
from contact_book_api.app.schemas.contact import ContactPayload
from contact_book_api.app.services.contact_service import ContactService


class FakeClock:
    """Clock advancing by a fixed step on every reading."""

    def __init__(self, start: int = 1_000, step: int = 10) -> None:
        self.current = start
        self.step = step

    def now(self) -> int:
        value = self.current
        self.current += self.step
        return value


def run(coro):
    return asyncio.run(coro)


def ann_payload(**overrides) -> ContactPayload:
    data = {
        "name": "Ann",
        "phoneNumber": "555",
        "email": "a@x.com",
        "category": "Work",
        "address": "1 St",
    }
    data.update(overrides)
    return ContactPayload(**data)


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "contacts.db")


@pytest.fixture
def store(db_path):
    return ContactStore(db_path)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def service(store, clock):
    return ContactService(store, clock=clock)


@pytest.fixture
def make_settings(db_path):
    def _make(**overrides) -> Settings:
        values = {
            "database_url": db_path,
            "secret_key": "test-secret",
            "static_tokens": "svc-token:importer",
            "log_level": "WARNING",
        }
        values.update(overrides)
        return Settings(**values)

    return _make


@pytest.fixture
def settings(make_settings):
    return make_settings()


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture
def auth(settings):
    def _headers(principal: str) -> dict:
        token = create_access_token({"sub": principal}, config=settings)
        return {"Authorization": f"Bearer {token}"}

    return _headers
