from src.communications.base import MessageProvider
from src.communications.dispatcher import MessageDispatcher
from src.communications.logger import (
    CommunicationLogger,
    NoOpCommunicationLogger,
    SqlCommunicationLogger,
)
from src.communications.resend_provider import ResendEmailProvider
from src.communications.smtp_provider import SmtpEmailProvider
from src.communications.templates import EmailTemplates, build_invitation_message
from src.config.settings import settings


def get_message_dispatcher() -> MessageDispatcher:
    # Resend first when an API key is set, then the SMTP relay
    return MessageDispatcher(
        providers=[ResendEmailProvider(config=settings), SmtpEmailProvider()],
        communication_logger=SqlCommunicationLogger(),
    )


__all__ = [
    "CommunicationLogger",
    "EmailTemplates",
    "MessageDispatcher",
    "MessageProvider",
    "NoOpCommunicationLogger",
    "ResendEmailProvider",
    "SmtpEmailProvider",
    "SqlCommunicationLogger",
    "build_invitation_message",
    "get_message_dispatcher",
]
