from abc import ABC, abstractmethod
from uuid import UUID, uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import async_session_manager
from src.guests.dtos import CommunicationLogDTO
from src.guests.errors import EventNotFound
from src.guests.repository.orm_models import CommunicationLog
from src.models.event import Event


class CommunicationLogger(ABC):
    """Sink for the outcome of every outbound message attempt."""

    @abstractmethod
    async def log_communication(self, entry: CommunicationLogDTO) -> UUID:
        """
        Persist one communication outcome.

        Returns:
            UUID of the created log entry
        """
        pass


class SqlCommunicationLogger(CommunicationLogger):
    """SQL database implementation of CommunicationLogger."""

    def __init__(self, session_overwrite: AsyncSession | None = None):
        self._session_overwrite = session_overwrite

    async def log_communication(self, entry: CommunicationLogDTO) -> UUID:
        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            event = await session.get(Event, entry.event_id)
            if event is None:
                raise EventNotFound()

            log = CommunicationLog(
                event_id=entry.event_id,
                guest_id=entry.guest_id,
                channel=entry.channel,
                recipient=entry.recipient,
                content=entry.content,
                status=entry.status,
                provider=entry.provider,
                error_message=entry.error_message,
                sent_at=entry.sent_at,
            )
            session.add(log)
            await session.flush()
            return log.uuid


class NoOpCommunicationLogger(CommunicationLogger):
    """No-op implementation for testing or when logging is disabled."""

    async def log_communication(self, entry: CommunicationLogDTO) -> UUID:
        return uuid4()
