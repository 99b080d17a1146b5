"""Plain-text and HTML bodies for outbound contact emails.

Every builder is a pure function of the contacts it is given, so the
routes decide which contacts go out and these functions only render.
All user-supplied values are escaped before they enter the HTML.
"""

from dataclasses import dataclass
from html import escape
from typing import Sequence

from .models import Contact, ContactList

SIGNATURE = "Sent from Design CRM"
NOT_SPECIFIED = "Not specified"


@dataclass(frozen=True)
class EmailContent:
    """Rendered bodies of one email."""

    text: str
    html: str


def full_name(contact: Contact) -> str:
    return f"{contact.first_name} {contact.last_name}"


def format_contact_line(contact: Contact) -> str:
    """
    One text line for a contact.

    Example:
        ``• Ada Lin — Product Designer at Acme | LinkedIn: https://...``
    """
    line = f"• {full_name(contact)} — {contact.role} at {contact.company}"
    if contact.linkedin:
        line += f" | LinkedIn: {contact.linkedin}"
    if contact.portfolio:
        line += f" | Portfolio: {contact.portfolio}"
    return line


def format_contact_item(contact: Contact) -> str:
    """One ``<li>`` for a contact, with links when present."""
    item = (
        f"<strong>{escape(full_name(contact))}</strong> — "
        f"{escape(contact.role)} at {escape(contact.company)}"
    )
    if contact.linkedin:
        item += f' | <a href="{escape(contact.linkedin)}">LinkedIn</a>'
    if contact.portfolio:
        item += f' | <a href="{escape(contact.portfolio)}">Portfolio</a>'
    return f"<li>{item}</li>"


def html_paragraphs(message: str) -> str:
    """Escape ``message`` and turn its newlines into line breaks."""
    return escape(message).replace("\r\n", "\n").replace("\n", "<br>")


def build_selection_email(message: str, contacts: Sequence[Contact]) -> EmailContent:
    """
    Render an email for an ad-hoc selection of contacts.

    Args:
        message (str): Text written by the sender.
        contacts (Sequence[Contact]): Contacts to include, in order.

    Returns:
        EmailContent: Text and HTML bodies.
    """
    lines = "\n".join(format_contact_line(c) for c in contacts)
    text = f"{message}\n\nCurated Design Talent:\n\n{lines}"
    items = "".join(format_contact_item(c) for c in contacts)
    html = (
        f"<p>{html_paragraphs(message)}</p>"
        "<h3>Curated Design Talent:</h3>"
        f"<ul>{items}</ul>"
    )
    return EmailContent(text=text, html=html)


def _contact_card(contact: Contact) -> str:
    parts = [
        '<div style="border: 1px solid #e2e8f0; border-radius: 8px; padding: 16px; '
        'margin-bottom: 12px; background: #f8fafc;">',
        '<h3 style="margin: 0 0 8px 0; color: #1e293b; font-size: 16px; '
        f'font-weight: 600;">{escape(full_name(contact))}</h3>',
        '<p style="margin: 4px 0; color: #475569; font-size: 14px;">'
        f"<strong>Role:</strong> {escape(contact.role or NOT_SPECIFIED)}</p>",
        '<p style="margin: 4px 0; color: #475569; font-size: 14px;">'
        f"<strong>Company:</strong> {escape(contact.company or NOT_SPECIFIED)}</p>",
    ]
    if contact.linkedin:
        parts.append(
            f'<p style="margin: 4px 0;"><a href="{escape(contact.linkedin)}" '
            'style="color: #3b82f6; text-decoration: none; font-size: 14px;">'
            "LinkedIn Profile</a></p>"
        )
    if contact.portfolio:
        parts.append(
            f'<p style="margin: 4px 0;"><a href="{escape(contact.portfolio)}" '
            'style="color: #3b82f6; text-decoration: none; font-size: 14px;">'
            "Portfolio</a></p>"
        )
    if contact.notes:
        parts.append(
            '<p style="margin: 8px 0 0 0; color: #64748b; font-size: 12px; '
            f'font-style: italic;">{html_paragraphs(contact.notes)}</p>'
        )
    parts.append("</div>")
    return "".join(parts)


def _contact_block(contact: Contact) -> str:
    lines = [
        full_name(contact),
        f"Role: {contact.role or NOT_SPECIFIED}",
        f"Company: {contact.company or NOT_SPECIFIED}",
    ]
    if contact.linkedin:
        lines.append(f"LinkedIn: {contact.linkedin}")
    if contact.portfolio:
        lines.append(f"Portfolio: {contact.portfolio}")
    if contact.notes:
        lines.append(f"Notes: {contact.notes}")
    lines.append("---")
    return "\n".join(lines)


def build_list_email(
    contact_list: ContactList,
    contacts: Sequence[Contact],
    message: str | None = None,
) -> EmailContent:
    """
    Render an email presenting a whole list.

    The header carries the list name, its description and the sender's
    message when present. Each member gets a card; notes are shown in a
    muted italic block.

    Args:
        contact_list (ContactList): The list being sent.
        contacts (Sequence[Contact]): Its members.
        message (str | None): Optional text written by the sender.

    Returns:
        EmailContent: Text and HTML bodies.
    """
    heading = f"Design Talent ({len(contacts)} contacts)"

    text_parts = [contact_list.name]
    if contact_list.description:
        text_parts.append(contact_list.description)
    if message:
        text_parts.append(message)
    text_parts.append("")
    text_parts.append(f"{heading}:")
    text_parts.extend(f"\n{_contact_block(c)}" for c in contacts)
    text_parts.append("")
    text_parts.append(SIGNATURE)
    text = "\n".join(text_parts)

    html_parts = [
        '<div style="max-width: 600px; margin: 0 auto; font-family: -apple-system, '
        "BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;\">",
        '<h1 style="color: #1e293b; margin-bottom: 16px;">'
        f"{escape(contact_list.name)}</h1>",
    ]
    if contact_list.description:
        html_parts.append(
            '<p style="color: #475569; margin-bottom: 24px;">'
            f"{escape(contact_list.description)}</p>"
        )
    if message:
        html_parts.append(
            '<p style="color: #374151; margin-bottom: 24px;">'
            f"{html_paragraphs(message)}</p>"
        )
    html_parts.append(
        f'<h2 style="color: #1e293b; margin-bottom: 16px; font-size: 18px;">{heading}</h2>'
    )
    html_parts.extend(_contact_card(c) for c in contacts)
    html_parts.append(
        '<div style="margin-top: 32px; padding-top: 16px; border-top: 1px solid #e2e8f0; '
        'text-align: center;"><p style="color: #64748b; font-size: 12px; margin: 0;">'
        f"{SIGNATURE}</p></div>"
    )
    html_parts.append("</div>")
    return EmailContent(text=text, html="".join(html_parts))
