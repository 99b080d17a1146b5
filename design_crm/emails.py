"""Routes that email contacts to a third party."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from . import schemas, crud
from .auth import get_auth_context
from .core import get_settings
from .database import get_db
from .dispatch import EmailPayload, EmailSender, get_email_sender
from .errors import NotFoundError, TransportError
from .formatting import build_list_email, build_selection_email

router = APIRouter(
    prefix="/api",
    tags=["emails"],
    dependencies=[Depends(get_auth_context)],
)


@router.post("/send-email", response_model=schemas.Message)
async def send_selection(
    request: schemas.SendEmailRequest,
    db: Session = Depends(get_db),
    sender: EmailSender = Depends(get_email_sender),
):
    """
    Email a hand-picked selection of contacts.

    Ids that no longer resolve are skipped. The sender defaults to
    ``FROM_EMAIL``.

    Args:
        request (SendEmailRequest): Recipient, subject, message and ids.
        db (Session): Database session.
        sender (EmailSender): Email collaborator.

    Raises:
        TransportError: If the collaborator reports failure.

    Returns:
        Message: Confirmation.
    """
    contacts = crud.get_contacts_by_ids(db, request.contact_ids)
    content = build_selection_email(request.message, contacts)
    sent = await sender.send(
        EmailPayload(
            to=request.to,
            from_address=request.from_address or get_settings().FROM_EMAIL,
            subject=request.subject,
            text=content.text,
            html=content.html,
        )
    )
    if not sent:
        raise TransportError()
    return schemas.Message(detail="Email sent successfully")


@router.post("/lists/{list_id}/send", response_model=schemas.Message)
async def send_list(
    list_id: schemas.RowIdPath,
    request: schemas.SendListRequest,
    db: Session = Depends(get_db),
    sender: EmailSender = Depends(get_email_sender),
):
    """
    Email every member of a list.

    Args:
        list_id (int): List identifier.
        request (SendListRequest): Recipient, sender, subject and message.
        db (Session): Database session.
        sender (EmailSender): Email collaborator.

    Raises:
        NotFoundError: If the list is not found.
        TransportError: If the collaborator reports failure.

    Returns:
        Message: Confirmation.
    """
    contact_list = crud.get_list(db, list_id)
    if not contact_list:
        raise NotFoundError("List not found")
    contacts = crud.get_list_contacts(db, list_id)
    content = build_list_email(contact_list, contacts, request.message)
    sent = await sender.send(
        EmailPayload(
            to=request.to,
            from_address=request.from_address,
            subject=request.subject,
            text=content.text,
            html=content.html,
        )
    )
    if not sent:
        raise TransportError()
    return schemas.Message(detail="List sent successfully")
