"""
Pydantic models for contact data.

``ContactPayload`` is the input DTO carrying the five mutable text
fields; it is never persisted directly.  ``Contact`` is the stored
record as returned by the API.  On the wire fields use camelCase
(``phoneNumber``, ``createdAt``, ``updatedAt``); in Python they are
snake_case.  Both spellings are accepted on input.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class ContactField(str, Enum):
    """Mutable text fields that can be updated one at a time."""

    name = "name"
    phone_number = "phoneNumber"
    email = "email"
    category = "category"
    address = "address"

    @property
    def attribute(self) -> str:
        """Python attribute name of the field on :class:`Contact`."""
        return "phone_number" if self is ContactField.phone_number else self.value


class ContactPayload(BaseModel):
    """Schema for creating or fully replacing a contact.

    All fields are optional on the wire so that the service can report
    every missing field in one ``ValidationError`` instead of failing on
    the first.
    """

    name: Optional[str] = Field(None, examples=["Ann"])
    phone_number: Optional[str] = Field(None, alias="phoneNumber", examples=["555-0100"])
    email: Optional[str] = Field(None, examples=["ann@example.com"])
    category: Optional[str] = Field(None, examples=["Work"])
    address: Optional[str] = Field(None, examples=["1 Main St"])

    model_config = {
        "populate_by_name": True,
    }


class ContactFieldUpdate(BaseModel):
    """Schema for updating a single contact field."""

    value: str = Field(..., examples=["Personal"])


class Contact(BaseModel):
    """A stored contact record.

    ``created_at`` and ``updated_at`` are nanoseconds since the Unix
    epoch.  ``updated_at`` stays ``None`` until the first update.
    """

    id: str
    name: str
    phone_number: str = Field(..., alias="phoneNumber")
    email: str
    category: str
    address: str
    owner: str
    created_at: int = Field(..., alias="createdAt")
    updated_at: Optional[int] = Field(None, alias="updatedAt")

    model_config = {
        "populate_by_name": True,
    }


class ContactCreationTime(BaseModel):
    id: str
    created_at: int = Field(..., alias="createdAt")

    model_config = {
        "populate_by_name": True,
    }


class ContactUpdateTime(BaseModel):
    id: str
    updated_at: Optional[int] = Field(None, alias="updatedAt")

    model_config = {
        "populate_by_name": True,
    }


class CallerIdentity(BaseModel):
    """The principal the current request was resolved to."""

    principal: str
