from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from src.communications.logger import CommunicationLogger, SqlCommunicationLogger
from src.guests.dtos import CommunicationChannel, CommunicationLogDTO, CommunicationStatus

router = APIRouter()

EVENT_COMMUNICATIONS_URL = "/api/v1/events/{event_id}/communications"


class CommunicationLogCreate(BaseModel):
    """Outcome of a message sent by an external provider."""

    channel: CommunicationChannel
    recipient: str = Field(min_length=1)
    content: str
    status: CommunicationStatus
    guest_id: UUID | None = None
    error_message: str | None = None
    sent_at: datetime | None = None
    provider: str | None = None


class CommunicationLogResponse(BaseModel):
    id: UUID


def get_communication_logger() -> CommunicationLogger:
    """Dependency to get communication logger instance."""
    return SqlCommunicationLogger()


@router.post(
    EVENT_COMMUNICATIONS_URL,
    response_model=CommunicationLogResponse,
    status_code=status.HTTP_201_CREATED,
)
async def log_communication(
    event_id: UUID,
    entry: CommunicationLogCreate,
    communication_logger: CommunicationLogger = Depends(get_communication_logger),
) -> CommunicationLogResponse:
    log_id = await communication_logger.log_communication(
        CommunicationLogDTO(event_id=event_id, **entry.model_dump())
    )
    return CommunicationLogResponse(id=log_id)
