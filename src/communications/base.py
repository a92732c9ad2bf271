from abc import ABC, abstractmethod

from src.guests.dtos import CommunicationChannel, OutboundMessageDTO


class MessageProvider(ABC):
    """One way of delivering a message, e.g. an email API or an SMTP relay."""

    name: str = "provider"
    channel: CommunicationChannel = CommunicationChannel.EMAIL

    @abstractmethod
    def is_configured(self) -> bool:
        pass

    @abstractmethod
    async def send(self, message: OutboundMessageDTO) -> str | None:
        """Deliver the message. Returns the provider's message id when it has one."""
        pass
