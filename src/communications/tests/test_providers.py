import json
from types import SimpleNamespace
from uuid import uuid4

import httpx
import pytest

from src.communications.resend_provider import ResendEmailProvider
from src.communications.smtp_provider import SmtpEmailProvider
from src.guests.dtos import CommunicationChannel, OutboundMessageDTO

MESSAGE = OutboundMessageDTO(
    event_id=uuid4(),
    channel=CommunicationChannel.EMAIL,
    recipient="john@example.com",
    subject="You're invited",
    content="Please RSVP",
    html_content="<p>Please RSVP</p>",
)


def resend_config(api_key="re_test"):
    return SimpleNamespace(
        resend_api_key=api_key,
        resend_api_url="https://api.resend.test/emails",
        emails_from="rsvp@wedding.example",
    )


async def test_resend_posts_message():
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"id": "email-123"})

    provider = ResendEmailProvider(resend_config(), transport=httpx.MockTransport(handler))

    assert await provider.send(MESSAGE) == "email-123"

    request = requests[0]
    assert str(request.url) == "https://api.resend.test/emails"
    assert request.headers["Authorization"] == "Bearer re_test"
    assert json.loads(request.content) == {
        "from": "rsvp@wedding.example",
        "to": ["john@example.com"],
        "subject": "You're invited",
        "html": "<p>Please RSVP</p>",
        "text": "Please RSVP",
    }


async def test_resend_raises_on_error_status():
    transport = httpx.MockTransport(lambda request: httpx.Response(422, json={"message": "bad"}))
    provider = ResendEmailProvider(resend_config(), transport=transport)

    with pytest.raises(httpx.HTTPStatusError):
        await provider.send(MESSAGE)


def test_resend_needs_api_key():
    assert ResendEmailProvider(resend_config()).is_configured() is True
    assert ResendEmailProvider(resend_config(api_key="")).is_configured() is False


def test_smtp_builds_multipart_message():
    provider = SmtpEmailProvider(host="mail.test", port=25, from_address="rsvp@wedding.example")

    msg = provider._create_message(MESSAGE)

    assert msg["To"] == "john@example.com"
    assert msg["From"] == "rsvp@wedding.example"
    assert msg["Subject"] == "You're invited"
    assert [part.get_content_type() for part in msg.get_payload()] == ["text/plain", "text/html"]


async def test_smtp_send_uses_relay(monkeypatch):
    sent = []

    class FakeSMTP:
        def __init__(self, host, port):
            self.host, self.port = host, port

        def __enter__(self):
            return self

        def __exit__(self, *exc):
            return False

        def starttls(self):
            sent.append("starttls")

        def login(self, username, password):
            sent.append(("login", username, password))

        def send_message(self, msg):
            sent.append((self.host, self.port, msg["To"]))

    monkeypatch.setattr("src.communications.smtp_provider.smtplib.SMTP", FakeSMTP)
    provider = SmtpEmailProvider(host="mail.test", port=587, username="user", password="secret")

    assert await provider.send(MESSAGE) is None
    assert sent == ["starttls", ("login", "user", "secret"), ("mail.test", 587, "john@example.com")]


def test_smtp_needs_host():
    assert SmtpEmailProvider(host="").is_configured() is False
