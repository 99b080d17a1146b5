"""Database models for the Design CRM API.

This module defines SQLAlchemy ORM models used by the application.
"""

from datetime import datetime, timezone

from sqlalchemy import (
    Column,
    DateTime,
    Integer,
    String,
    Text,
    ForeignKey,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from .database import Base


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class User(Base):
    """
    SQLAlchemy model representing an authenticated user.

    Rows mirror the identity provider's claims and are upserted by
    subject id whenever a session is resolved. Users are never deleted.
    """

    __tablename__ = "users"

    id = Column(String(255), primary_key=True)
    email = Column(String(255), unique=True, index=True, nullable=True)
    first_name = Column(String(255), nullable=True)
    last_name = Column(String(255), nullable=True)
    profile_image_url = Column(String(1000), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)


class Contact(Base):
    """
    SQLAlchemy model representing a designer contact.

    Contacts live in a single shared pool. The profile photo is kept
    inline as a ``data:`` URI.
    """

    __tablename__ = "contacts"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(Text, nullable=False)
    last_name = Column(Text, nullable=False)
    role = Column(Text, nullable=False)
    company = Column(Text, nullable=False)
    linkedin = Column(Text, nullable=True)
    portfolio = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    profile_photo = Column(Text, nullable=True)

    #: Memberships of this contact in lists
    memberships = relationship(
        "ListContact",
        back_populates="contact",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class ContactList(Base):
    """
    SQLAlchemy model representing a named list of contacts.

    Deleting a list removes its memberships but never the contacts.
    """

    __tablename__ = "lists"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    #: Membership rows joining this list to contacts
    memberships = relationship(
        "ListContact",
        back_populates="contact_list",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class ListContact(Base):
    """
    SQLAlchemy model joining one list to one contact.

    A contact appears at most once per list.
    """

    __tablename__ = "list_contacts"
    __table_args__ = (
        UniqueConstraint("list_id", "contact_id", name="uq_list_contact"),
    )

    id = Column(Integer, primary_key=True, index=True)
    list_id = Column(
        Integer,
        ForeignKey("lists.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    contact_id = Column(
        Integer,
        ForeignKey("contacts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    added_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    contact_list = relationship("ContactList", back_populates="memberships")
    contact = relationship("Contact", back_populates="memberships")
