from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, EmailStr, Field

from src.communications import get_message_dispatcher
from src.config.settings import settings
from src.guests.dtos import DuplicatePolicy, GuestRecordDTO, GuestSide
from src.guests.features.attendance.router import get_guest_read_model
from src.guests.features.create_guest.write_model import (
    GuestCreateWriteModel,
    SqlGuestCreateWriteModel,
)
from src.guests.repository.read_models import GuestReadModel
from src.guests.schemas import GuestResponse
from src.guests.urls import EVENT_GUESTS_IMPORT_URL, EVENT_GUESTS_URL, GUEST_URL

router = APIRouter()


class GuestRecordSubmit(BaseModel):
    first_name: str = Field(min_length=1, max_length=255)
    last_name: str = Field(min_length=1, max_length=255)
    email: EmailStr | None = None
    phone: str | None = None
    side: GuestSide = GuestSide.BRIDE
    relationship: str | None = None
    is_family: bool = False
    is_vip: bool = False
    plus_one_allowed: bool = False
    is_local_guest: bool = False
    notes: str | None = None

    def to_dto(self) -> GuestRecordDTO:
        return GuestRecordDTO(**self.model_dump(include=set(GuestRecordSubmit.model_fields)))


class GuestCreate(GuestRecordSubmit):
    on_duplicate: DuplicatePolicy = DuplicatePolicy.REJECT
    send_invitation: bool = False


class GuestImport(BaseModel):
    guests: list[GuestRecordSubmit]
    on_duplicate: DuplicatePolicy = DuplicatePolicy.SKIP
    send_invitations: bool = False


class GuestCreatedResponse(BaseModel):
    guest: GuestResponse
    rsvp_link: str | None = None


class GuestImportResponse(BaseModel):
    created: int
    updated: int
    skipped: int
    guests: list[GuestResponse]


def get_guest_create_write_model() -> GuestCreateWriteModel:
    """Dependency to get guest creation write model instance."""
    return SqlGuestCreateWriteModel(message_dispatcher=get_message_dispatcher())


@router.post(EVENT_GUESTS_URL, response_model=GuestCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_guest(
    event_id: UUID,
    data: GuestCreate,
    write_model: GuestCreateWriteModel = Depends(get_guest_create_write_model),
) -> GuestCreatedResponse:
    """
    Add a guest to an event and issue their RSVP token.
    With send_invitation the invitation email goes out right away.
    """
    guest = await write_model.create_guest(
        event_id,
        data.to_dto(),
        on_duplicate=data.on_duplicate,
        send_invitation=data.send_invitation,
    )
    link = settings.build_rsvp_link(guest.rsvp_token) if guest.rsvp_token else None
    return GuestCreatedResponse(guest=GuestResponse.model_validate(guest), rsvp_link=link)


@router.post(EVENT_GUESTS_IMPORT_URL, response_model=GuestImportResponse)
async def import_guests(
    event_id: UUID,
    data: GuestImport,
    write_model: GuestCreateWriteModel = Depends(get_guest_create_write_model),
) -> GuestImportResponse:
    """Bulk add guests. Rows matching an existing guest follow on_duplicate."""
    result = await write_model.import_guests(
        event_id,
        [row.to_dto() for row in data.guests],
        on_duplicate=data.on_duplicate,
        send_invitations=data.send_invitations,
    )
    return GuestImportResponse(
        created=result.created,
        updated=result.updated,
        skipped=result.skipped,
        guests=[GuestResponse.model_validate(guest) for guest in result.guests],
    )


@router.get(GUEST_URL, response_model=GuestResponse)
async def get_guest(
    guest_id: UUID,
    read_model: GuestReadModel = Depends(get_guest_read_model),
) -> GuestResponse:
    guest = await read_model.get_guest(guest_id)
    return GuestResponse.model_validate(guest)


@router.delete(GUEST_URL, status_code=status.HTTP_204_NO_CONTENT)
async def delete_guest(
    guest_id: UUID,
    write_model: GuestCreateWriteModel = Depends(get_guest_create_write_model),
) -> Response:
    await write_model.delete_guest(guest_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
