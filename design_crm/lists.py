"""Contact list and list membership routes for the Design CRM API."""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from typing import Dict, List

from . import schemas, crud
from .database import get_db
from .auth import get_auth_context
from .errors import NotFoundError, ValidationError

router = APIRouter(
    prefix="/api/lists",
    tags=["lists"],
    dependencies=[Depends(get_auth_context)],
)


@router.get("", response_model=List[schemas.ListOut])
def list_lists(db: Session = Depends(get_db)):
    """Retrieve every contact list."""
    return crud.get_lists(db)


@router.get("/contact-counts", response_model=Dict[int, int])
def list_contact_counts(db: Session = Depends(get_db)):
    """
    Count the members of every list.

    Returns:
        dict[int, int]: Member count keyed by list id.
    """
    return crud.get_list_contact_counts(db)


@router.post("", response_model=schemas.ListOut, status_code=status.HTTP_201_CREATED)
def create_list(list_in: schemas.ListCreate, db: Session = Depends(get_db)):
    """
    Create a new contact list.

    Args:
        list_in (ListCreate): Name and optional description.
        db (Session): Database session.

    Returns:
        ListOut: Created list.
    """
    return crud.create_list(db, list_in)


@router.get("/{list_id}", response_model=schemas.ListOut)
def get_list(list_id: schemas.RowIdPath, db: Session = Depends(get_db)):
    """
    Retrieve a single list by ID.

    Raises:
        NotFoundError: If the list is not found.
    """
    contact_list = crud.get_list(db, list_id)
    if not contact_list:
        raise NotFoundError("List not found")
    return contact_list


@router.put("/{list_id}", response_model=schemas.ListOut)
def update_list(
    list_id: schemas.RowIdPath,
    changes: schemas.ListUpdate,
    db: Session = Depends(get_db),
):
    """
    Partially update a list. ``updatedAt`` is refreshed on every call.

    Args:
        list_id (int): List identifier.
        changes (ListUpdate): Fields to update.
        db (Session): Database session.

    Raises:
        NotFoundError: If the list is not found.

    Returns:
        ListOut: Updated list.
    """
    contact_list = crud.update_list(db, list_id, changes.model_dump(exclude_unset=True))
    if not contact_list:
        raise NotFoundError("List not found")
    return contact_list


@router.delete("/{list_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_list(list_id: schemas.RowIdPath, db: Session = Depends(get_db)):
    """
    Delete a list. Its contacts are kept.

    Raises:
        NotFoundError: If the list is not found.
    """
    if not crud.delete_list(db, list_id):
        raise NotFoundError("List not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{list_id}/contacts", response_model=List[schemas.ContactOut])
def list_members(list_id: schemas.RowIdPath, db: Session = Depends(get_db)):
    """
    Retrieve the contacts in a list.

    An unknown list simply has no members.
    """
    return crud.get_list_contacts(db, list_id)


@router.post("/{list_id}/contacts", response_model=schemas.ListContactOut)
def add_member(
    list_id: schemas.RowIdPath,
    payload: schemas.ListContactCreate,
    response: Response,
    db: Session = Depends(get_db),
):
    """
    Add a contact to a list.

    Responds 201 for a new membership and 200 when the contact was
    already in the list.

    Args:
        list_id (int): List identifier.
        payload (ListContactCreate): Contact to add.
        response (Response): Outgoing response, used to set the status.
        db (Session): Database session.

    Raises:
        NotFoundError: If the list is not found.
        ValidationError: If the contact does not exist.

    Returns:
        ListContactOut: The membership row.
    """
    if not crud.get_list(db, list_id):
        raise NotFoundError("List not found")
    if not crud.get_contact(db, payload.contact_id):
        raise ValidationError("Contact does not exist")
    membership, created = crud.add_contact_to_list(db, list_id, payload.contact_id)
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return membership


@router.delete(
    "/{list_id}/contacts/{contact_id}", status_code=status.HTTP_204_NO_CONTENT
)
def remove_member(
    list_id: schemas.RowIdPath,
    contact_id: schemas.RowIdPath,
    db: Session = Depends(get_db),
):
    """
    Remove a contact from a list.

    Raises:
        NotFoundError: If the contact is not in the list.
    """
    if not crud.remove_contact_from_list(db, list_id, contact_id):
        raise NotFoundError("Contact not found in list")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
