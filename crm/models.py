"""Database models for the CRM API.

This module defines SQLAlchemy ORM models used by the application.
"""

import enum
from datetime import datetime, timezone

from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    DateTime,
    ForeignKey,
)
from sqlalchemy.orm import relationship

from .database import Base


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class ContactStatus(str, enum.Enum):
    """Pipeline stage of a contact. Any stage may be set at any time."""

    LEAD = "Lead"
    CUSTOMER = "Customer"
    PARTNER = "Partner"


class User(Base):
    """
    SQLAlchemy model representing an application user.

    Users are created at registration and never modified afterwards.
    Username and email are both unique.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(100), unique=True, index=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    #: List of contacts owned by the user
    contacts = relationship("Contact", back_populates="owner")


class Contact(Base):
    """
    SQLAlchemy model representing a contact entry.

    Each contact belongs to exactly one user; every lookup filters
    by ``owner_id`` as well as ``id``.
    """

    __tablename__ = "contacts"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=False)
    company = Column(String(255), nullable=True)
    position = Column(String(255), nullable=True)
    status = Column(
        String(20), default=ContactStatus.LEAD.value, nullable=False, index=True
    )
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    #: Identifier of the owning user
    owner_id = Column(
        Integer,
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )

    #: Reference to the owning User object
    owner = relationship("User", back_populates="contacts")
