from datetime import datetime
from typing import Annotated, Optional

from fastapi import Path
from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    EmailStr,
    Field,
    field_validator,
)
from pydantic.alias_generators import to_camel


MAX_ID = 2**63 - 1
"""Largest id the store can hold (signed 64-bit)."""

RowId = Annotated[int, Field(ge=1, le=MAX_ID)]
RowIdPath = Annotated[int, Path(ge=1, le=MAX_ID)]


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _check_photo(value: Optional[str]) -> Optional[str]:
    if value is not None and not value.startswith("data:"):
        raise ValueError("profilePhoto must be a data URI")
    return value


OptionalText = Annotated[Optional[str], BeforeValidator(_blank_to_none)]
"""Optional string where an empty value means "not set"."""

PhotoURI = Annotated[
    Optional[str], BeforeValidator(_blank_to_none), AfterValidator(_check_photo)
]


class CamelModel(BaseModel):
    """Base schema exposing camelCase field names on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RequestModel(CamelModel):
    """Immutable request payload that rejects unknown fields."""

    model_config = ConfigDict(frozen=True, extra="forbid")


class ContactCreate(RequestModel):
    """Schema for creating new contact."""

    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    role: str = Field(min_length=1)
    company: str = Field(min_length=1)
    linkedin: OptionalText = None
    portfolio: OptionalText = None
    notes: OptionalText = None
    profile_photo: PhotoURI = None


class ContactUpdate(RequestModel):
    """Schema for updating contact (all fields optional)."""

    first_name: Optional[str] = Field(default=None, min_length=1)
    last_name: Optional[str] = Field(default=None, min_length=1)
    role: Optional[str] = Field(default=None, min_length=1)
    company: Optional[str] = Field(default=None, min_length=1)
    linkedin: OptionalText = None
    portfolio: OptionalText = None
    notes: OptionalText = None
    profile_photo: PhotoURI = None

    @field_validator("first_name", "last_name", "role", "company")
    @classmethod
    def not_null(cls, value):
        """Required columns may be changed but never cleared."""
        if value is None:
            raise ValueError("field cannot be null")
        return value


class ContactOut(CamelModel):
    """Schema for returning contact with ID."""

    id: int
    first_name: str
    last_name: str
    role: str
    company: str
    linkedin: Optional[str] = None
    portfolio: Optional[str] = None
    notes: Optional[str] = None
    profile_photo: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ListCreate(RequestModel):
    """Schema for creating a contact list."""

    name: str = Field(min_length=1)
    description: OptionalText = None


class ListUpdate(RequestModel):
    """Schema for updating a contact list (all fields optional)."""

    name: Optional[str] = Field(default=None, min_length=1)
    description: OptionalText = None

    @field_validator("name")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("field cannot be null")
        return value


class ListOut(CamelModel):
    """Response schema for a contact list."""

    id: int
    name: str
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ListContactCreate(RequestModel):
    """Payload for adding a contact to a list."""

    contact_id: RowId


class ListContactOut(CamelModel):
    """Response schema for a list membership."""

    id: int
    list_id: int
    contact_id: int
    added_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserOut(CamelModel):
    """Response schema for user data."""

    id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class SendEmailRequest(RequestModel):
    """Payload for emailing an ad-hoc selection of contacts."""

    to: EmailStr
    subject: str = Field(min_length=1)
    message: str = Field(min_length=1)
    contact_ids: list[RowId]
    from_address: Optional[EmailStr] = Field(default=None, alias="from")


class SendListRequest(RequestModel):
    """Payload for emailing a whole list."""

    to: EmailStr
    from_address: EmailStr = Field(alias="from")
    subject: str = Field(min_length=1)
    message: OptionalText = None


class Message(BaseModel):
    """Plain confirmation message."""

    detail: str
