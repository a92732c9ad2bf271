import datetime as dt
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from src.guests.dtos import Stage2SubmissionDTO
from src.guests.features.get_guest_info.router import get_rsvp_read_model
from src.guests.features.submit_stage1.router import get_rsvp_write_model
from src.guests.repository.read_models import RSVPReadModel
from src.guests.repository.write_models import RSVPWriteModel
from src.guests.schemas import GuestResponse
from src.guests.urls import SUBMIT_STAGE2_URL

router = APIRouter()


class ChildDetailSubmit(BaseModel):
    # age is coerced leniently by the write model, so accept any value here
    name: str = ""
    age: Any = None
    dietary_restrictions: str | None = None


class Stage2Submit(BaseModel):
    """Travel, accommodation, plus-one contact and children details."""

    needs_accommodation: bool
    accommodation_preference: str | None = None
    needs_transportation: bool | None = None
    transportation_preference: str | None = None
    needs_flight_assistance: bool = False
    arrival_date: dt.date | None = None
    departure_date: dt.date | None = None
    plus_one_email: str | None = None
    plus_one_phone: str | None = None
    plus_one_relationship: str | None = None
    children_details: list[ChildDetailSubmit] = []
    special_requests: str | None = None
    notes: str | None = None
    draft: bool = False


@router.put(SUBMIT_STAGE2_URL, response_model=GuestResponse)
async def submit_stage2(
    token: str,
    rsvp_data: Stage2Submit,
    read_model: RSVPReadModel = Depends(get_rsvp_read_model),
    write_model: RSVPWriteModel = Depends(get_rsvp_write_model),
) -> GuestResponse:
    """
    Save step 2 of the RSVP. Each call overwrites the previous answers.
    Send draft=true for auto-saves; only a final save completes the RSVP.
    """
    context = await read_model.verify_token(token)

    submission = Stage2SubmissionDTO(
        needs_accommodation=rsvp_data.needs_accommodation,
        accommodation_preference=rsvp_data.accommodation_preference,
        needs_transportation=rsvp_data.needs_transportation,
        transportation_preference=rsvp_data.transportation_preference,
        needs_flight_assistance=rsvp_data.needs_flight_assistance,
        arrival_date=rsvp_data.arrival_date,
        departure_date=rsvp_data.departure_date,
        plus_one_email=rsvp_data.plus_one_email,
        plus_one_phone=rsvp_data.plus_one_phone,
        plus_one_relationship=rsvp_data.plus_one_relationship,
        children_details=[child.model_dump() for child in rsvp_data.children_details],
        special_requests=rsvp_data.special_requests,
        notes=rsvp_data.notes,
        draft=rsvp_data.draft,
    )
    guest = await write_model.submit_stage2(context.guest.id, submission)
    return GuestResponse.model_validate(guest)
