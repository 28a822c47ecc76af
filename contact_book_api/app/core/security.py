"""
Caller identity resolution and ownership checks.

This module implements a lightweight JSON Web Token (JWT) mechanism
using HMAC‑SHA256 signatures and base64url encoding.  Tokens embed
arbitrary claims and an expiration timestamp (``exp``); the ``sub``
claim names the principal making the request.  A secret key from the
application settings is used to sign and verify tokens.

Service accounts can instead present one of the static tokens listed
in ``settings.static_tokens``, each mapped to a fixed principal.

The rest of the application treats a principal as an opaque string
and only ever compares two principals for equality
(:func:`authorize_owner`).
"""

import base64
import hashlib
import hmac
import json
import logging
import time
from typing import Any, Dict, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .config import Settings, settings as default_settings
from .errors import AuthenticationError, UnauthorizedError

logger = logging.getLogger(__name__)


def _b64_url_encode(data: bytes) -> str:
    """Base64‑url encode bytes without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("utf-8")


def _b64_url_decode(data: str) -> bytes:
    """Decode base64‑url encoded string, adding padding if necessary."""
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def _sign(message: bytes, secret: str) -> bytes:
    """Compute HMAC‑SHA256 signature of a message using the given secret."""
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).digest()


def create_access_token(
    data: Dict[str, Any],
    expires_delta: Optional[int] = None,
    config: Optional[Settings] = None,
) -> str:
    """Create a signed JWT token with the given payload.

    The payload is extended with an ``exp`` field representing the
    expiration time as a UNIX timestamp.  Clients send the token in
    the ``Authorization`` header as ``Bearer <token>``.

    Parameters
    ----------
    data : dict
        Claims to embed in the token (e.g. ``{"sub": "alice"}``).
    expires_delta : Optional[int]
        Lifetime of the token in seconds.  Defaults to
        ``access_token_expire_minutes * 60``.
    config : Optional[Settings]
        Settings providing the signing key; the module settings are
        used when omitted.

    Returns
    -------
    str
        A signed token of the form ``header.payload.signature``.
    """
    config = config or default_settings
    to_encode = data.copy()
    exp_seconds = expires_delta if expires_delta is not None else config.access_token_expire_minutes * 60
    to_encode["exp"] = int(time.time()) + exp_seconds
    header = {"alg": config.algorithm, "typ": "JWT"}
    header_b64 = _b64_url_encode(json.dumps(header, separators=(",", ":")).encode("utf-8"))
    payload_b64 = _b64_url_encode(json.dumps(to_encode, separators=(",", ":")).encode("utf-8"))
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    signature_b64 = _b64_url_encode(_sign(signing_input, config.secret_key))
    return f"{header_b64}.{payload_b64}.{signature_b64}"


def decode_access_token(token: str, config: Optional[Settings] = None) -> Optional[Dict[str, Any]]:
    """Verify and decode a JWT token.

    Verifies the HMAC signature and the ``exp`` field.  Returns the
    payload dictionary on success and ``None`` for any malformed,
    tampered or expired token.
    """
    config = config or default_settings
    parts = token.split(".")
    if len(parts) != 3:
        return None
    header_b64, payload_b64, signature_b64 = parts
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    try:
        actual_sig = _b64_url_decode(signature_b64)
        expected_sig = _sign(signing_input, config.secret_key)
        # Constant‑time comparison to prevent timing attacks
        if not hmac.compare_digest(expected_sig, actual_sig):
            return None
        data = json.loads(_b64_url_decode(payload_b64).decode("utf-8"))
    except (ValueError, UnicodeDecodeError):
        return None
    if not isinstance(data, dict):
        return None
    try:
        expires_at = int(data["exp"])
    except (KeyError, TypeError, ValueError):
        return None
    if expires_at < int(time.time()):
        return None
    return data


def parse_static_tokens(raw: str) -> Dict[str, str]:
    """Parse ``"token:principal,token2:principal2"`` into a mapping.

    Entries without a principal are ignored.
    """
    tokens: Dict[str, str] = {}
    for entry in raw.split(","):
        token, sep, principal = entry.strip().partition(":")
        if sep and token.strip() and principal.strip():
            tokens[token.strip()] = principal.strip()
    return tokens


def resolve_principal(token: str, config: Optional[Settings] = None) -> str:
    """Map a bearer token to the principal it identifies.

    Raises :class:`AuthenticationError` when the token is neither a
    configured static token nor a valid JWT with a ``sub`` claim.
    """
    config = config or default_settings
    for static_token, principal in parse_static_tokens(config.static_tokens).items():
        if hmac.compare_digest(static_token.encode("utf-8"), token.encode("utf-8")):
            return principal
    payload = decode_access_token(token, config)
    if not payload:
        raise AuthenticationError("Invalid or expired token")
    subject = payload.get("sub")
    if not isinstance(subject, str) or not subject:
        raise AuthenticationError("Token carries no subject")
    return subject


security = HTTPBearer(auto_error=False)


def _request_settings(request: Request) -> Settings:
    return getattr(request.app.state, "settings", default_settings)


def get_optional_caller_identity(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[str]:
    """Dependency returning the caller's principal, or ``None`` without credentials.

    Credentials that are present but invalid still raise
    :class:`AuthenticationError`.
    """
    if credentials is None:
        return None
    return resolve_principal(credentials.credentials, _request_settings(request))


def get_caller_identity(principal: Optional[str] = Depends(get_optional_caller_identity)) -> str:
    """Dependency that requires an authenticated caller and returns its principal."""
    if principal is None:
        raise AuthenticationError("Not authenticated")
    return principal


def authorize_owner(contact: Any, caller: Optional[str], action: str = "modify") -> None:
    """Raise unless ``caller`` is the owner of ``contact``.

    An unresolved caller (``None``) is an authentication failure; any
    other principal that differs from ``contact.owner`` is refused.
    """
    if caller is None:
        raise AuthenticationError("Not authenticated")
    if contact.owner != caller:
        logger.warning("Principal %s may not %s contact %s", caller, action, contact.id)
        raise UnauthorizedError(f"User does not have the right to {action} contact id={contact.id}")
