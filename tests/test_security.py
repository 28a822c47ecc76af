"""
Identity resolution tests: token round trips, static tokens and the
ownership check.
"""

import pytest

from contact_book_api.app.core.config import Settings
from contact_book_api.app.core.errors import AuthenticationError, UnauthorizedError
from contact_book_api.app.core.security import (
    authorize_owner,
    create_access_token,
    decode_access_token,
    parse_static_tokens,
    resolve_principal,
)
from contact_book_api.app.schemas.contact import Contact


@pytest.fixture
def config():
    return Settings(secret_key="unit-secret", static_tokens="svc-token:importer, broken-entry ,:nobody")


class TestTokens:

    def test_round_trip(self, config):
        token = create_access_token({"sub": "alice"}, config=config)
        payload = decode_access_token(token, config)
        assert payload["sub"] == "alice"
        assert "exp" in payload

    def test_wrong_secret_rejected(self, config):
        token = create_access_token({"sub": "alice"}, config=config)
        other = Settings(secret_key="other-secret")
        assert decode_access_token(token, other) is None

    def test_tampered_payload_rejected(self, config):
        header, _, signature = create_access_token({"sub": "alice"}, config=config).split(".")
        forged_payload = create_access_token({"sub": "mallory"}, config=config).split(".")[1]
        assert decode_access_token(f"{header}.{forged_payload}.{signature}", config) is None

    def test_expired_token_rejected(self, config):
        token = create_access_token({"sub": "alice"}, expires_delta=-10, config=config)
        assert decode_access_token(token, config) is None

    @pytest.mark.parametrize("token", ["", "abc", "a.b", "a.b.c", "!!.??.**"])
    def test_malformed_tokens_rejected(self, config, token):
        assert decode_access_token(token, config) is None


class TestResolvePrincipal:

    def test_jwt_subject(self, config):
        token = create_access_token({"sub": "alice"}, config=config)
        assert resolve_principal(token, config) == "alice"

    def test_static_token(self, config):
        assert resolve_principal("svc-token", config) == "importer"

    @pytest.mark.parametrize("token", ["svc-tokenX", "svc-toke", "SVC-TOKEN", ""])
    def test_static_token_requires_exact_match(self, config, token):
        with pytest.raises(AuthenticationError):
            resolve_principal(token, config)

    def test_invalid_token(self, config):
        with pytest.raises(AuthenticationError):
            resolve_principal("nonsense", config)

    def test_token_without_subject(self, config):
        token = create_access_token({"role": "admin"}, config=config)
        with pytest.raises(AuthenticationError):
            resolve_principal(token, config)

    def test_parse_static_tokens_skips_incomplete_entries(self):
        assert parse_static_tokens("svc-token:importer, broken-entry ,:nobody,") == {"svc-token": "importer"}


class TestAuthorizeOwner:

    contact = Contact(
        id="c1",
        name="Ann",
        phoneNumber="555",
        email="a@x.com",
        category="Work",
        address="1 St",
        owner="alice",
        createdAt=1,
    )

    def test_owner_passes(self):
        authorize_owner(self.contact, "alice")

    def test_other_principal_refused(self):
        with pytest.raises(UnauthorizedError):
            authorize_owner(self.contact, "bob", action="delete")

    def test_missing_caller_is_authentication_error(self):
        with pytest.raises(AuthenticationError):
            authorize_owner(self.contact, None)
