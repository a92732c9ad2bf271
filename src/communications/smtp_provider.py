import asyncio
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from src.communications.base import MessageProvider
from src.config.settings import settings
from src.guests.dtos import CommunicationChannel, OutboundMessageDTO


class SmtpEmailProvider(MessageProvider):
    name = "smtp"
    channel = CommunicationChannel.EMAIL

    def __init__(
        self,
        host: str | None = None,
        port: int | None = None,
        username: str | None = None,
        password: str | None = None,
        from_address: str | None = None,
    ):
        self.host = host if host is not None else settings.smtp_host
        self.port = port if port is not None else settings.smtp_port
        self.username = username if username is not None else settings.smtp_user
        self.password = password if password is not None else settings.smtp_password
        self.from_address = from_address or settings.emails_from

    def is_configured(self) -> bool:
        return bool(self.host)

    def _create_message(self, message: OutboundMessageDTO) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = message.subject
        msg["From"] = self.from_address
        msg["To"] = message.recipient

        msg.attach(MIMEText(message.content, "plain"))
        if message.html_content:
            msg.attach(MIMEText(message.html_content, "html"))

        return msg

    def _send(self, msg: MIMEMultipart) -> None:
        with smtplib.SMTP(self.host, self.port) as server:
            if self.username and self.password:
                server.starttls()
                server.login(self.username, self.password)
            server.send_message(msg)

    async def send(self, message: OutboundMessageDTO) -> str | None:
        # smtplib blocks, keep it off the event loop
        await asyncio.to_thread(self._send, self._create_message(message))
        return None
