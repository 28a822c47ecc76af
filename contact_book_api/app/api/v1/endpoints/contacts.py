"""
Contact endpoints for API v1.

These routes expose the contact service over HTTP.  Reads by id, name,
category or owner are public; creating, replacing, deleting and
listing all contacts require an authenticated caller.  Single‑field
updates accept an optional caller, which the service only checks when
``strict_field_updates`` is enabled.

Service errors are not caught here: the application‑wide exception
handler turns them into JSON error responses.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Request, status

from contact_book_api.app.core.security import get_caller_identity, get_optional_caller_identity
from contact_book_api.app.schemas.contact import (
    CallerIdentity,
    Contact,
    ContactCreationTime,
    ContactField,
    ContactFieldUpdate,
    ContactPayload,
    ContactUpdateTime,
)
from contact_book_api.app.services.contact_service import ContactService

router = APIRouter()


def get_contact_service(request: Request) -> ContactService:
    """Dependency returning the service built by ``create_app``."""
    return request.app.state.contact_service


@router.post("/", response_model=Contact, status_code=status.HTTP_201_CREATED)
async def create_contact(
    payload: ContactPayload,
    caller: str = Depends(get_caller_identity),
    service: ContactService = Depends(get_contact_service),
) -> Contact:
    """Create a contact owned by the caller.

    All five text fields are required; missing or empty ones are
    reported together with HTTP 422.
    """
    return await service.create_contact(payload, caller)


@router.get("/", response_model=List[Contact])
async def list_contacts(
    caller: str = Depends(get_caller_identity),
    service: ContactService = Depends(get_contact_service),
) -> List[Contact]:
    """Return all contacts in id order (only the caller's under the ``owner`` scope)."""
    return await service.get_all_contacts(caller)


@router.get("/whoami", response_model=CallerIdentity)
async def whoami(caller: str = Depends(get_caller_identity)) -> CallerIdentity:
    """Return the principal the presented token resolves to."""
    return CallerIdentity(principal=caller)


@router.get("/by-name/{name:path}", response_model=Contact)
async def get_contact_by_name(
    name: str,
    service: ContactService = Depends(get_contact_service),
) -> Contact:
    """Case‑insensitive name lookup; the first match in id order wins."""
    return await service.get_contact_by_name(name)


@router.get("/by-category/{category:path}", response_model=List[Contact])
async def get_contacts_by_category(
    category: str,
    service: ContactService = Depends(get_contact_service),
) -> List[Contact]:
    """Case‑insensitive category filter.  Returns 404 when nothing matches."""
    return await service.get_contacts_by_category(category)


@router.get("/by-owner/{owner:path}", response_model=List[Contact])
async def get_contacts_by_owner(
    owner: str,
    service: ContactService = Depends(get_contact_service),
) -> List[Contact]:
    """Exact owner filter.  Returns 404 when nothing matches."""
    return await service.get_contacts_by_owner(owner)


@router.get("/{contact_id}", response_model=Contact)
async def get_contact(
    contact_id: str,
    service: ContactService = Depends(get_contact_service),
) -> Contact:
    return await service.get_contact(contact_id)


@router.get("/{contact_id}/created-at", response_model=ContactCreationTime)
async def get_contact_creation_time(
    contact_id: str,
    service: ContactService = Depends(get_contact_service),
) -> ContactCreationTime:
    created_at = await service.get_contact_creation_time(contact_id)
    return ContactCreationTime(id=contact_id, created_at=created_at)


@router.get("/{contact_id}/updated-at", response_model=ContactUpdateTime)
async def get_contact_update_time(
    contact_id: str,
    service: ContactService = Depends(get_contact_service),
) -> ContactUpdateTime:
    """``updatedAt`` is ``null`` for contacts that were never updated."""
    updated_at = await service.get_contact_update_time(contact_id)
    return ContactUpdateTime(id=contact_id, updated_at=updated_at)


@router.put("/{contact_id}", response_model=Contact)
async def update_contact(
    contact_id: str,
    payload: ContactPayload,
    caller: str = Depends(get_caller_identity),
    service: ContactService = Depends(get_contact_service),
) -> Contact:
    """Replace all five text fields (owner only)."""
    return await service.update_contact(contact_id, payload, caller)


@router.patch("/{contact_id}/{field}", response_model=Contact)
async def update_contact_field(
    contact_id: str,
    field: ContactField,
    body: ContactFieldUpdate,
    caller: Optional[str] = Depends(get_optional_caller_identity),
    service: ContactService = Depends(get_contact_service),
) -> Contact:
    """Update one of ``name``, ``phoneNumber``, ``email``, ``category`` or ``address``."""
    return await service.update_contact_field(contact_id, field, body.value, caller)


@router.delete("/{contact_id}", response_model=Contact)
async def delete_contact(
    contact_id: str,
    caller: str = Depends(get_caller_identity),
    service: ContactService = Depends(get_contact_service),
) -> Contact:
    """Delete a contact (owner only) and return the deleted record."""
    return await service.delete_contact(contact_id, caller)
