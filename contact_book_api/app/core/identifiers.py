"""Identifier generation for contact records."""

import uuid


def new_contact_id() -> str:
    """Return a fresh random (version 4) UUID in canonical text form."""
    return str(uuid.uuid4())
