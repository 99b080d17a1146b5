import pytest
from fastapi_mail import FastMail

from design_crm.core import get_mail_config, get_settings
from design_crm.dispatch import EmailPayload, FastMailSender


PAYLOAD = EmailPayload(
    to="r@x.com",
    from_address="me@x.com",
    subject="Talent",
    text="Design Talent (1 contacts)",
    html="<h2>Design Talent</h2>",
)


@pytest.fixture()
def suppressed_mail(monkeypatch):
    monkeypatch.setattr(get_settings(), "MAIL_SUPPRESS_SEND", True)


def test_fastmail_sender_builds_alternative_message(suppressed_mail, session_loop):
    with FastMail(get_mail_config()).record_messages() as outbox:
        sent = session_loop.run_until_complete(FastMailSender().send(PAYLOAD))

    assert sent is True
    assert len(outbox) == 1
    message = outbox[0]
    assert "me@x.com" in message["From"]
    assert message["To"] == "r@x.com"
    assert message["Subject"] == "Talent"
    parts = {part.get_content_type(): part for part in message.walk()}
    assert "multipart/alternative" in parts
    assert "text/plain" in parts and "text/html" in parts
    assert "Design Talent (1 contacts)" in parts["text/plain"].get_payload(decode=True).decode()
    assert "<h2>Design Talent</h2>" in parts["text/html"].get_payload(decode=True).decode()


def test_fastmail_sender_reports_transport_error(suppressed_mail, session_loop, monkeypatch):
    async def refuse(self, message, **kwargs):
        raise ConnectionRefusedError("smtp down")

    monkeypatch.setattr(FastMail, "send_message", refuse)
    assert session_loop.run_until_complete(FastMailSender().send(PAYLOAD)) is False


def test_fastmail_sender_reports_bad_sender_address(suppressed_mail, session_loop):
    payload = EmailPayload(
        to="r@x.com", from_address="not-an-address", subject="x", text="x", html="x"
    )
    with FastMail(get_mail_config()).record_messages() as outbox:
        sent = session_loop.run_until_complete(FastMailSender().send(payload))
    assert sent is False
    assert outbox == []
