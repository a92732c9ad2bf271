from uuid import UUID

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from src.guests.dtos import (
    CeremonyAttendanceDTO,
    GuestStatus,
    RSVPStage,
    Stage1SubmissionDTO,
)
from src.guests.features.get_guest_info.router import get_rsvp_read_model
from src.guests.repository.read_models import RSVPReadModel
from src.guests.repository.write_models import RSVPWriteModel, SqlRSVPWriteModel
from src.guests.schemas import GuestResponse
from src.guests.urls import SUBMIT_STAGE1_URL

router = APIRouter()


class CeremonyAttendanceSubmit(BaseModel):
    ceremony_id: UUID
    attending: bool
    meal_preference: str | None = None


class Stage1Submit(BaseModel):
    """Attendance decision, plus-one and dietary details."""

    rsvp_status: GuestStatus
    is_local_guest: bool
    plus_one_attending: bool = False
    plus_one_name: str | None = None
    dietary_restrictions: str | None = None
    allergies: str | None = None
    ceremony_attendance: list[CeremonyAttendanceSubmit] = []
    message: str | None = None


class Stage1Response(BaseModel):
    guest: GuestResponse
    requires_stage2: bool
    stage: RSVPStage

    class Config:
        from_attributes = True


def get_rsvp_write_model() -> RSVPWriteModel:
    """Dependency to get RSVP write model instance."""
    return SqlRSVPWriteModel()


@router.post(SUBMIT_STAGE1_URL, response_model=Stage1Response)
async def submit_stage1(
    token: str,
    rsvp_data: Stage1Submit,
    read_model: RSVPReadModel = Depends(get_rsvp_read_model),
    write_model: RSVPWriteModel = Depends(get_rsvp_write_model),
) -> Stage1Response:
    """
    Submit step 1 of the RSVP.
    Confirmed guests who travel in are asked for step 2; everyone else is done.
    """
    context = await read_model.verify_token(token)

    submission = Stage1SubmissionDTO(
        rsvp_status=rsvp_data.rsvp_status,
        is_local_guest=rsvp_data.is_local_guest,
        plus_one_attending=rsvp_data.plus_one_attending,
        plus_one_name=rsvp_data.plus_one_name,
        dietary_restrictions=rsvp_data.dietary_restrictions,
        allergies=rsvp_data.allergies,
        ceremony_attendance=[
            CeremonyAttendanceDTO(
                ceremony_id=choice.ceremony_id,
                attending=choice.attending,
                meal_preference=choice.meal_preference,
            )
            for choice in rsvp_data.ceremony_attendance
        ],
        message=rsvp_data.message,
    )
    result = await write_model.submit_stage1(context.guest.id, submission)
    return Stage1Response.model_validate(result)
