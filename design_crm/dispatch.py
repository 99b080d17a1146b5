"""Outbound email port and its FastAPI-Mail adapter."""

import logging
from dataclasses import dataclass
from typing import Protocol

from fastapi_mail import FastMail, MessageSchema
from fastapi_mail.schemas import MessageType, MultipartSubtypeEnum

from .core import get_mail_config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmailPayload:
    """Everything the email collaborator needs for one message."""

    to: str
    from_address: str
    subject: str
    text: str
    html: str


class EmailSender(Protocol):
    """Hands one message to the email collaborator.

    Implementations report the outcome as a boolean and never raise. No
    retries and no delivery guarantee.
    """

    async def send(self, payload: EmailPayload) -> bool: ...


class FastMailSender:
    """Send through SMTP with FastAPI-Mail as a multipart/alternative message."""

    async def send(self, payload: EmailPayload) -> bool:
        message = MessageSchema(
            subject=payload.subject,
            recipients=[payload.to],
            body=payload.html,
            alternative_body=payload.text,
            subtype=MessageType.html,
            multipart_subtype=MultipartSubtypeEnum.alternative,
        )
        try:
            fm = FastMail(get_mail_config(payload.from_address))
            await fm.send_message(message)
        except Exception:
            logger.exception("Email to %s was not accepted", payload.to)
            return False
        logger.info("Email %r sent to %s", payload.subject, payload.to)
        return True


def get_email_sender() -> EmailSender:
    """Dependency returning the configured email sender."""
    return FastMailSender()
