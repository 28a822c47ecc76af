"""
Typed errors raised by the contact services.

Every failure of a contact operation is reported as one of the
exceptions below.  Each carries a human readable ``message`` and the
HTTP ``status_code`` used when the error reaches the API layer, where
a single exception handler (see ``main.create_app``) renders it as a
JSON response ``{"detail": ..., "error": ...}``.  None of them are
fatal to the process and none are retried automatically.
"""

from typing import Dict, Optional


class ContactBookError(Exception):
    """Base class for all contact book failures."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    @property
    def kind(self) -> str:
        return type(self).__name__

    def headers(self) -> Optional[Dict[str, str]]:
        return None


class ValidationError(ContactBookError):
    """Malformed or missing input."""

    status_code = 422


class NotFoundError(ContactBookError):
    """The referenced id or filter yields no record."""

    status_code = 404


class UnauthorizedError(ContactBookError):
    """The caller is not the owner of the record."""

    status_code = 403


class AuthenticationError(ContactBookError):
    """The caller identity could not be resolved."""

    status_code = 401

    def headers(self) -> Optional[Dict[str, str]]:
        return {"WWW-Authenticate": "Bearer"}


class StorageError(ContactBookError):
    """The record store rejected a write (e.g. capacity exceeded)."""

    status_code = 507
