from fastapi import APIRouter, Depends
from pydantic import BaseModel

from src.guests.dtos import RSVPStage
from src.guests.repository.read_models import RSVPReadModel, SqlRSVPReadModel
from src.guests.schemas import (
    AttendanceResponse,
    CeremonyResponse,
    EventResponse,
    GuestResponse,
)
from src.guests.urls import GET_GUEST_INFO_URL

router = APIRouter()


class RSVPContextResponse(BaseModel):
    """Everything the RSVP page renders - the token itself stays in the URL."""

    event: EventResponse
    guest: GuestResponse
    ceremonies: list[CeremonyResponse]
    attendance: list[AttendanceResponse]
    stage: RSVPStage
    requires_stage2: bool

    class Config:
        from_attributes = True


def get_rsvp_read_model() -> RSVPReadModel:
    """Dependency to get RSVP read model instance."""
    return SqlRSVPReadModel()


@router.get(GET_GUEST_INFO_URL, response_model=RSVPContextResponse)
async def get_guest_info(
    token: str,
    read_model: RSVPReadModel = Depends(get_rsvp_read_model),
) -> RSVPContextResponse:
    """
    Verify an RSVP token and return the guest, event and ceremonies for the RSVP form.
    Previously recorded ceremony choices are included so the form can be prefilled.
    """
    context = await read_model.verify_token(token)
    return RSVPContextResponse.model_validate(context)
