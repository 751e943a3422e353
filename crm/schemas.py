from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .models import ContactStatus


class CamelModel(BaseModel):
    """Base schema serialized with camelCase keys, accepting either casing."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ContactBase(CamelModel):
    """Shared fields for contact schemas."""

    name: str = Field(min_length=1)
    email: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    company: Optional[str] = None
    position: Optional[str] = None
    status: ContactStatus = ContactStatus.LEAD
    notes: Optional[str] = None


class ContactCreate(ContactBase):
    """Schema for creating new contact."""

    pass


class ContactUpdate(CamelModel):
    """Schema for updating contact (only supplied fields are replaced)."""

    name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[str] = Field(default=None, min_length=1)
    phone: Optional[str] = Field(default=None, min_length=1)
    company: Optional[str] = None
    position: Optional[str] = None
    status: Optional[ContactStatus] = None
    notes: Optional[str] = None

    @field_validator("name", "email", "phone", "status")
    @classmethod
    def not_null(cls, value):
        """Reject an explicit null for fields a contact cannot be without."""
        if value is None:
            raise ValueError("field may not be null")
        return value


class ContactOut(ContactBase):
    """Schema for returning contact with ID, owner and timestamps."""

    id: int
    owner_id: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


class UserCreate(BaseModel):
    """Payload for registering a new user."""

    username: str = Field(min_length=1)
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class LoginRequest(BaseModel):
    """Credentials submitted to the login endpoint."""

    email: str
    password: str


class LoginResponse(BaseModel):
    """Bearer token issued on successful login."""

    token: str
    username: str


class TokenData(BaseModel):
    """Payload stored inside JWT token."""

    sub: str | None = None
    exp: Optional[datetime] = None


class Message(BaseModel):
    """Plain acknowledgement body."""

    message: str


class DashboardStats(CamelModel):
    """Per-status contact counts for the current user."""

    total_contacts: int
    leads: int
    customers: int
    partners: int
