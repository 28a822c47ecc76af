"""
Service layer for contacts.

``ContactService`` implements both the mutation operations (create,
replace, single‑field update, delete) and the read‑only queries on top
of a :class:`~contact_book_api.app.core.store.ContactStore`.  Every
operation either returns the requested value or raises one of the
errors in :mod:`contact_book_api.app.core.errors`; there are no
partial successes.

Name, category and owner lookups scan the whole store in key order.
Name lookup returns the first match: names are not unique, and several
contacts called "Ann" resolve to the one with the smallest id.

Single‑field updates skip the non‑empty check and the ownership check
that full updates perform.  ``strict_field_updates`` turns both on.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, List, Optional

from ..core.clock import SystemClock
from ..core.errors import NotFoundError, ValidationError
from ..core.identifiers import new_contact_id
from ..core.security import authorize_owner
from ..core.store import ContactStore
from ..schemas.contact import Contact, ContactField, ContactPayload

logger = logging.getLogger(__name__)

LIST_SCOPE_ALL = "all"
LIST_SCOPE_OWNER = "owner"

_PAYLOAD_FIELDS = (
    ContactField.name,
    ContactField.phone_number,
    ContactField.email,
    ContactField.category,
    ContactField.address,
)


class ContactService:
    """Create, query, update and delete contacts."""

    def __init__(
        self,
        store: ContactStore,
        clock: Optional[SystemClock] = None,
        id_factory: Callable[[], str] = new_contact_id,
        list_scope: str = LIST_SCOPE_ALL,
        strict_field_updates: bool = False,
    ) -> None:
        if list_scope not in {LIST_SCOPE_ALL, LIST_SCOPE_OWNER}:
            raise ValueError(f"Unknown contact list scope: {list_scope!r}")
        self.store = store
        self.clock = clock or SystemClock()
        self.id_factory = id_factory
        self.list_scope = list_scope
        self.strict_field_updates = strict_field_updates
        # Guards read‑check‑write sequences against interleaving when the
        # service is called from several threads.
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    async def create_contact(self, payload: ContactPayload, caller: str) -> Contact:
        """Validate ``payload`` and store it as a new contact owned by ``caller``."""
        self._validate_payload(payload)
        contact = Contact(
            id=self.id_factory(),
            name=payload.name,
            phone_number=payload.phone_number,
            email=payload.email,
            category=payload.category,
            address=payload.address,
            owner=caller,
            created_at=self.clock.now(),
            updated_at=None,
        )
        with self._lock:
            self.store.put(contact.id, contact)
        logger.info("Principal %s created contact %s", caller, contact.id)
        return contact

    async def update_contact(self, contact_id: str, payload: ContactPayload, caller: str) -> Contact:
        """Replace the five text fields of a contact owned by ``caller``.

        ``id``, ``owner`` and ``createdAt`` are preserved and
        ``updatedAt`` is refreshed.
        """
        with self._lock:
            existing = self._require(contact_id)
            self._validate_payload(payload)
            authorize_owner(existing, caller, action="update")
            updated = existing.model_copy(
                update={
                    "name": payload.name,
                    "phone_number": payload.phone_number,
                    "email": payload.email,
                    "category": payload.category,
                    "address": payload.address,
                    "updated_at": self._touch(existing),
                }
            )
            self.store.put(contact_id, updated)
        logger.info("Principal %s updated contact %s", caller, contact_id)
        return updated

    async def update_contact_field(
        self,
        contact_id: str,
        field: ContactField,
        value: str,
        caller: Optional[str] = None,
    ) -> Contact:
        """Set one text field of a contact and refresh ``updatedAt``.

        The other four fields are left as they are.
        """
        field = ContactField(field)
        with self._lock:
            existing = self._require(contact_id)
            if self.strict_field_updates:
                if not value:
                    raise ValidationError(f"Field {field.value} must not be empty")
                authorize_owner(existing, caller, action="update")
            updated = existing.model_copy(
                update={field.attribute: value, "updated_at": self._touch(existing)}
            )
            self.store.put(contact_id, updated)
        logger.info("Principal %s updated %s of contact %s", caller, field.value, contact_id)
        return updated

    async def update_contact_name(self, contact_id: str, value: str, caller: Optional[str] = None) -> Contact:
        return await self.update_contact_field(contact_id, ContactField.name, value, caller)

    async def update_contact_phone_number(self, contact_id: str, value: str, caller: Optional[str] = None) -> Contact:
        return await self.update_contact_field(contact_id, ContactField.phone_number, value, caller)

    async def update_contact_email(self, contact_id: str, value: str, caller: Optional[str] = None) -> Contact:
        return await self.update_contact_field(contact_id, ContactField.email, value, caller)

    async def update_contact_category(self, contact_id: str, value: str, caller: Optional[str] = None) -> Contact:
        return await self.update_contact_field(contact_id, ContactField.category, value, caller)

    async def update_contact_address(self, contact_id: str, value: str, caller: Optional[str] = None) -> Contact:
        return await self.update_contact_field(contact_id, ContactField.address, value, caller)

    async def delete_contact(self, contact_id: str, caller: str) -> Contact:
        """Delete a contact owned by ``caller`` and return the deleted value."""
        with self._lock:
            existing = self._require(contact_id)
            authorize_owner(existing, caller, action="delete")
            removed = self.store.remove(contact_id)
        if removed is None:
            # Only reachable if the row vanished underneath the lock, e.g.
            # another process sharing the database file.
            raise NotFoundError(f"Contact with id={contact_id} not found.")
        logger.info("Principal %s deleted contact %s", caller, contact_id)
        return removed

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    async def get_contact(self, contact_id: str) -> Contact:
        return self._require(contact_id)

    async def get_contact_by_name(self, name: str) -> Contact:
        """Return the first contact, in key order, whose name matches case‑insensitively."""
        wanted = name.casefold()
        for contact in self.store.values():
            if contact.name.casefold() == wanted:
                return contact
        raise NotFoundError(f'Contact with name="{name}" not found.')

    async def get_contacts_by_category(self, category: str) -> List[Contact]:
        wanted = category.casefold()
        matches = [c for c in self.store.values() if c.category.casefold() == wanted]
        if not matches:
            raise NotFoundError(f'No contacts found in category="{category}".')
        logger.debug("Category %r matched %d contacts", category, len(matches))
        return matches

    async def get_contacts_by_owner(self, owner: str) -> List[Contact]:
        matches = [c for c in self.store.values() if c.owner == owner]
        if not matches:
            raise NotFoundError(f'No contacts found for owner="{owner}".')
        return matches

    async def get_all_contacts(self, caller: str) -> List[Contact]:
        """Return all contacts, or only the caller's under the ``owner`` list scope."""
        contacts = self.store.values()
        if self.list_scope == LIST_SCOPE_OWNER:
            contacts = [c for c in contacts if c.owner == caller]
        return contacts

    async def get_contact_creation_time(self, contact_id: str) -> int:
        return self._require(contact_id).created_at

    async def get_contact_update_time(self, contact_id: str) -> Optional[int]:
        return self._require(contact_id).updated_at

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _require(self, contact_id: str) -> Contact:
        if not contact_id:
            raise ValidationError(f"Invalid id={contact_id!r}.")
        contact = self.store.get(contact_id)
        if contact is None:
            raise NotFoundError(f"Contact with id={contact_id} not found.")
        return contact

    def _touch(self, existing: Contact) -> int:
        # createdAt <= updatedAt even if an injected clock lags behind.
        return max(self.clock.now(), existing.created_at)

    @staticmethod
    def _validate_payload(payload: ContactPayload) -> None:
        missing = [f.value for f in _PAYLOAD_FIELDS if not getattr(payload, f.attribute)]
        if missing:
            raise ValidationError("Missing required fields in payload: " + ", ".join(missing))
