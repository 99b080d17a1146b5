"""CRUD operations for users, contacts, lists and list memberships.

This module contains database interaction logic isolated from FastAPI
route handlers. Lookups return ``None`` for a missing id instead of
raising; deciding what a miss means is left to the caller.
"""

import logging
from typing import Iterable

from sqlalchemy import func, select, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from . import models, schemas
from .errors import StoreError

logger = logging.getLogger(__name__)

USER_CLAIM_FIELDS = ("email", "first_name", "last_name", "profile_image_url")


def _commit(db: Session, instance=None):
    """
    Commit the current transaction, refreshing ``instance`` afterwards.

    Raises:
        StoreError: If the store rejects the transaction.
    """
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Commit failed")
        raise StoreError() from exc
    if instance is not None:
        db.refresh(instance)
    return instance


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so ``value`` matches literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def get_user(db: Session, user_id: str) -> models.User | None:
    """
    Retrieve a user by identity provider subject id.

    Args:
        db (Session): Database session.
        user_id (str): Subject id.

    Returns:
        User | None: User if found, otherwise ``None``.
    """
    return db.get(models.User, user_id)


def upsert_user(db: Session, user_id: str, **claims) -> models.User:
    """
    Insert or refresh the user row for a session claim.

    Only the profile fields in ``USER_CLAIM_FIELDS`` are taken from
    ``claims``. An existing row is written (and ``updated_at`` bumped)
    only when one of them changed.

    Args:
        db (Session): Database session.
        user_id (str): Subject id, the primary key.
        **claims: Profile values from the identity provider.

    Returns:
        User: The stored user.
    """
    values = {key: claims.get(key) for key in USER_CLAIM_FIELDS}
    user = get_user(db, user_id)
    if user is None:
        user = models.User(id=user_id, **values)
        db.add(user)
        try:
            db.commit()
        except IntegrityError:
            # Lost a race with a concurrent first request for the same subject.
            db.rollback()
            user = get_user(db, user_id)
            if user is None:
                raise StoreError()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.exception("Failed to create user %s", user_id)
            raise StoreError() from exc
        else:
            db.refresh(user)
            logger.info("Created user %s", user_id)
            return user

    changed = {k: v for k, v in values.items() if getattr(user, k) != v}
    if not changed:
        return user
    for key, value in changed.items():
        setattr(user, key, value)
    user.updated_at = models.utcnow()
    logger.info("Updated user %s (%s)", user_id, ", ".join(sorted(changed)))
    return _commit(db, user)


def get_contacts(db: Session) -> list[models.Contact]:
    """
    Retrieve every contact.

    Args:
        db (Session): Database session.

    Returns:
        list[Contact]: All contacts ordered by id.
    """
    return list(db.scalars(select(models.Contact).order_by(models.Contact.id)))


def get_contact(db: Session, contact_id: int) -> models.Contact | None:
    """
    Retrieve a single contact.

    Args:
        db (Session): Database session.
        contact_id (int): Contact identifier.

    Returns:
        Contact | None: Contact if found, otherwise ``None``.
    """
    return db.get(models.Contact, contact_id)


def get_contacts_by_ids(db: Session, contact_ids: Iterable[int]) -> list[models.Contact]:
    """
    Resolve contact ids to contacts, keeping the requested order.

    Ids that no longer resolve are skipped silently.

    Args:
        db (Session): Database session.
        contact_ids (Iterable[int]): Requested ids.

    Returns:
        list[Contact]: Contacts that exist.
    """
    ids = list(contact_ids)
    if not ids:
        return []
    found = {
        c.id: c
        for c in db.scalars(select(models.Contact).where(models.Contact.id.in_(ids)))
    }
    return [found[i] for i in ids if i in found]


def create_contact(db: Session, contact_in: schemas.ContactCreate) -> models.Contact:
    """
    Create a new contact.

    Args:
        db (Session): Database session.
        contact_in (ContactCreate): Contact data.

    Returns:
        Contact: Newly created contact with its assigned id.
    """
    contact = models.Contact(**contact_in.model_dump())
    db.add(contact)
    return _commit(db, contact)


def update_contact(
    db: Session, contact_id: int, changes: dict
) -> models.Contact | None:
    """
    Apply the supplied fields to a contact.

    Args:
        db (Session): Database session.
        contact_id (int): Contact identifier.
        changes (dict): Fields to update.

    Returns:
        Contact | None: Updated contact, or ``None`` if it does not exist.
    """
    contact = get_contact(db, contact_id)
    if contact is None:
        return None
    for key, value in changes.items():
        setattr(contact, key, value)
    return _commit(db, contact)


def delete_contact(db: Session, contact_id: int) -> bool:
    """
    Delete a contact together with its list memberships.

    Store errors are logged and reported as ``False``.

    Args:
        db (Session): Database session.
        contact_id (int): Contact identifier.

    Returns:
        bool: Whether a contact was deleted.
    """
    try:
        contact = get_contact(db, contact_id)
        if contact is None:
            return False
        db.delete(contact)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to delete contact %s", contact_id)
        return False
    return True


def search_contacts(db: Session, query: str) -> list[models.Contact]:
    """
    Case-insensitive substring search over name, role and company.

    Args:
        db (Session): Database session.
        query (str): Text to look for. Must not be empty.

    Returns:
        list[Contact]: Matching contacts ordered by id.
    """
    columns = (
        models.Contact.first_name,
        models.Contact.last_name,
        models.Contact.role,
        models.Contact.company,
    )
    if db.get_bind().dialect.name == "sqlite":
        # casefold() is registered on every SQLite connection in database.py
        like_q = f"%{escape_like(query.casefold())}%"
        conditions = [func.casefold(col).like(like_q, escape="\\") for col in columns]
    else:
        like_q = f"%{escape_like(query)}%"
        conditions = [col.ilike(like_q, escape="\\") for col in columns]
    stmt = select(models.Contact).where(or_(*conditions)).order_by(models.Contact.id)
    return list(db.scalars(stmt))


def get_lists(db: Session) -> list[models.ContactList]:
    """Retrieve every list ordered by id."""
    return list(db.scalars(select(models.ContactList).order_by(models.ContactList.id)))


def get_list(db: Session, list_id: int) -> models.ContactList | None:
    """Retrieve a list by id, or ``None``."""
    return db.get(models.ContactList, list_id)


def create_list(db: Session, list_in: schemas.ListCreate) -> models.ContactList:
    """
    Create a new list.

    Args:
        db (Session): Database session.
        list_in (ListCreate): List data.

    Returns:
        ContactList: Newly created list.
    """
    contact_list = models.ContactList(**list_in.model_dump())
    db.add(contact_list)
    return _commit(db, contact_list)


def update_list(
    db: Session, list_id: int, changes: dict
) -> models.ContactList | None:
    """
    Apply the supplied fields to a list and refresh ``updated_at``.

    Args:
        db (Session): Database session.
        list_id (int): List identifier.
        changes (dict): Fields to update.

    Returns:
        ContactList | None: Updated list, or ``None`` if it does not exist.
    """
    contact_list = get_list(db, list_id)
    if contact_list is None:
        return None
    for key, value in changes.items():
        setattr(contact_list, key, value)
    contact_list.updated_at = models.utcnow()
    return _commit(db, contact_list)


def delete_list(db: Session, list_id: int) -> bool:
    """
    Delete a list and its memberships. Contacts are left untouched.

    Args:
        db (Session): Database session.
        list_id (int): List identifier.

    Returns:
        bool: Whether a list was deleted.
    """
    try:
        contact_list = get_list(db, list_id)
        if contact_list is None:
            return False
        db.delete(contact_list)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to delete list %s", list_id)
        return False
    return True


def get_list_contacts(db: Session, list_id: int) -> list[models.Contact]:
    """
    Retrieve the contacts that belong to a list.

    Memberships whose contact no longer exists are excluded.

    Args:
        db (Session): Database session.
        list_id (int): List identifier.

    Returns:
        list[Contact]: Members in the order they were added.
    """
    stmt = (
        select(models.Contact)
        .join(models.ListContact, models.ListContact.contact_id == models.Contact.id)
        .where(models.ListContact.list_id == list_id)
        .order_by(models.ListContact.added_at, models.ListContact.id)
    )
    return list(db.scalars(stmt))


def get_list_contact_counts(db: Session) -> dict[int, int]:
    """Return the number of members of every list, including empty ones."""
    stmt = (
        select(models.ContactList.id, func.count(models.ListContact.id))
        .outerjoin(models.ListContact, models.ListContact.list_id == models.ContactList.id)
        .group_by(models.ContactList.id)
    )
    return {list_id: count for list_id, count in db.execute(stmt)}


def get_membership(
    db: Session, list_id: int, contact_id: int
) -> models.ListContact | None:
    """Retrieve the membership row for a list/contact pair, or ``None``."""
    return db.execute(
        select(models.ListContact).where(
            models.ListContact.list_id == list_id,
            models.ListContact.contact_id == contact_id,
        )
    ).scalar_one_or_none()


def add_contact_to_list(
    db: Session, list_id: int, contact_id: int
) -> tuple[models.ListContact, bool]:
    """
    Add a contact to a list.

    Adding a contact that is already a member changes nothing.

    Args:
        db (Session): Database session.
        list_id (int): List identifier.
        contact_id (int): Contact identifier.

    Returns:
        tuple[ListContact, bool]: The membership and whether it was created.
    """
    existing = get_membership(db, list_id, contact_id)
    if existing is not None:
        return existing, False

    membership = models.ListContact(list_id=list_id, contact_id=contact_id)
    db.add(membership)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent add of the same pair.
        db.rollback()
        existing = get_membership(db, list_id, contact_id)
        if existing is None:
            raise StoreError()
        return existing, False
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to add contact %s to list %s", contact_id, list_id)
        raise StoreError() from exc
    db.refresh(membership)
    return membership, True


def remove_contact_from_list(db: Session, list_id: int, contact_id: int) -> bool:
    """
    Remove a contact from a list.

    Args:
        db (Session): Database session.
        list_id (int): List identifier.
        contact_id (int): Contact identifier.

    Returns:
        bool: Whether a membership row was removed.
    """
    try:
        membership = get_membership(db, list_id, contact_id)
        if membership is None:
            return False
        db.delete(membership)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(
            "Failed to remove contact %s from list %s", contact_id, list_id
        )
        return False
    return True
