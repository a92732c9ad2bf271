from uuid import UUID

from fastapi import APIRouter, Depends

from src.guests.repository.read_models import GuestReadModel, SqlGuestReadModel
from src.guests.schemas import AttendanceResponse
from src.guests.urls import GUEST_ATTENDANCE_URL

router = APIRouter()


def get_guest_read_model() -> GuestReadModel:
    """Dependency to get guest read model instance."""
    return SqlGuestReadModel()


@router.get(GUEST_ATTENDANCE_URL, response_model=list[AttendanceResponse])
async def get_attendance(
    guest_id: UUID,
    read_model: GuestReadModel = Depends(get_guest_read_model),
) -> list[AttendanceResponse]:
    """Per-ceremony attendance of a guest, in ceremony order."""
    attendance = await read_model.get_attendance(guest_id)
    return [AttendanceResponse.model_validate(row) for row in attendance]
