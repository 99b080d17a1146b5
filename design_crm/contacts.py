"""Contact management routes for the Design CRM API."""

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session
from typing import List

from . import schemas, crud
from .database import get_db
from .auth import get_auth_context
from .errors import NotFoundError, ValidationError

router = APIRouter(
    prefix="/api/contacts",
    tags=["contacts"],
    dependencies=[Depends(get_auth_context)],
)


@router.get("", response_model=List[schemas.ContactOut])
def list_contacts(db: Session = Depends(get_db)):
    """
    Retrieve every contact in the shared pool.

    Args:
        db (Session): Database session.

    Returns:
        list[ContactOut]: List of contacts.
    """
    return crud.get_contacts(db)


@router.get("/search", response_model=List[schemas.ContactOut])
def search_contacts(
    q: str | None = Query(None),
    db: Session = Depends(get_db),
):
    """
    Search contacts by first name, last name, role or company.

    Args:
        q (str | None): Case-insensitive text to look for.
        db (Session): Database session.

    Raises:
        ValidationError: If ``q`` is missing or empty.

    Returns:
        list[ContactOut]: Matching contacts.
    """
    if not q:
        raise ValidationError("Search query is required")
    return crud.search_contacts(db, q)


@router.get("/{contact_id}", response_model=schemas.ContactOut)
def get_contact(contact_id: schemas.RowIdPath, db: Session = Depends(get_db)):
    """
    Retrieve a single contact by ID.

    Args:
        contact_id (int): Contact identifier.
        db (Session): Database session.

    Raises:
        NotFoundError: If contact is not found.

    Returns:
        ContactOut: Contact data.
    """
    c = crud.get_contact(db, contact_id)
    if not c:
        raise NotFoundError("Contact not found")
    return c


@router.post("", response_model=schemas.ContactOut, status_code=status.HTTP_201_CREATED)
def create_contact(
    contact_in: schemas.ContactCreate,
    db: Session = Depends(get_db),
):
    """
    Create a new contact.

    Args:
        contact_in (ContactCreate): Contact input data.
        db (Session): Database session.

    Returns:
        ContactOut: Created contact.
    """
    return crud.create_contact(db, contact_in)


@router.put("/{contact_id}", response_model=schemas.ContactOut)
def update_contact(
    contact_id: schemas.RowIdPath,
    changes: schemas.ContactUpdate,
    db: Session = Depends(get_db),
):
    """
    Partially update an existing contact.

    Only fields provided in the request will be updated.

    Args:
        contact_id (int): Contact identifier.
        changes (ContactUpdate): Fields to update.
        db (Session): Database session.

    Raises:
        NotFoundError: If contact is not found.

    Returns:
        ContactOut: Updated contact.
    """
    c = crud.update_contact(db, contact_id, changes.model_dump(exclude_unset=True))
    if not c:
        raise NotFoundError("Contact not found")
    return c


@router.delete("/{contact_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_contact(contact_id: schemas.RowIdPath, db: Session = Depends(get_db)):
    """
    Delete a contact and drop it from every list.

    Args:
        contact_id (int): Contact identifier.
        db (Session): Database session.

    Raises:
        NotFoundError: If contact is not found.
    """
    if not crud.delete_contact(db, contact_id):
        raise NotFoundError("Contact not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
