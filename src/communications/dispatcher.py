import logging
from datetime import UTC, datetime

from src.communications.base import MessageProvider
from src.communications.logger import CommunicationLogger, NoOpCommunicationLogger
from src.guests.dtos import CommunicationLogDTO, CommunicationStatus, OutboundMessageDTO

logger = logging.getLogger(__name__)


class MessageDispatcher:
    """Tries each provider for the message's channel in order until one delivers.

    Delivery is best-effort: provider errors are logged and recorded, never
    raised to the caller.
    """

    def __init__(
        self,
        providers: list[MessageProvider],
        communication_logger: CommunicationLogger | None = None,
    ):
        self.providers = providers
        self.communication_logger = communication_logger or NoOpCommunicationLogger()

    async def dispatch(self, message: OutboundMessageDTO) -> bool:
        last_error = None
        for provider in self.providers:
            if provider.channel != message.channel:
                continue
            if not provider.is_configured():
                logger.debug("Skipping unconfigured provider %s", provider.name)
                continue
            try:
                await provider.send(message)
            except Exception as e:
                last_error = f"{provider.name}: {str(e) or e.__class__.__name__}"
                logger.warning(
                    "Provider %s failed to deliver %s message to %s: %s",
                    provider.name,
                    message.channel.value,
                    message.recipient,
                    e,
                )
                continue

            logger.info(
                "Delivered %s message to %s via %s",
                message.channel.value,
                message.recipient,
                provider.name,
            )
            await self._record(message, CommunicationStatus.SENT, provider=provider.name)
            return True

        if last_error is None:
            last_error = f"No configured provider for {message.channel.value}"
        logger.error("Could not deliver message to %s: %s", message.recipient, last_error)
        await self._record(message, CommunicationStatus.FAILED, error_message=last_error)
        return False

    async def _record(
        self,
        message: OutboundMessageDTO,
        status: CommunicationStatus,
        provider: str | None = None,
        error_message: str | None = None,
    ) -> None:
        entry = CommunicationLogDTO(
            event_id=message.event_id,
            guest_id=message.guest_id,
            channel=message.channel,
            recipient=message.recipient,
            content=message.content,
            status=status,
            provider=provider,
            error_message=error_message,
            sent_at=datetime.now(UTC) if status == CommunicationStatus.SENT else None,
        )
        try:
            await self.communication_logger.log_communication(entry)
        except Exception:
            # the delivery outcome stands even when it cannot be recorded
            logger.exception(
                "Could not record %s communication to %s", status.value, message.recipient
            )
