from uuid import UUID

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from src.guests.completion import calculate_progress
from src.guests.features.attendance.router import get_guest_read_model
from src.guests.repository.read_models import GuestReadModel
from src.guests.urls import GUEST_PROGRESS_URL

router = APIRouter()


class ProgressResponse(BaseModel):
    stage1: int
    stage2: int
    overall: int


@router.get(GUEST_PROGRESS_URL, response_model=ProgressResponse)
async def get_progress(
    guest_id: UUID,
    read_model: GuestReadModel = Depends(get_guest_read_model),
) -> ProgressResponse:
    """Completion percentages of both RSVP stages."""
    guest = await read_model.get_guest(guest_id)
    progress = calculate_progress(guest)
    return ProgressResponse(
        stage1=progress.stage1, stage2=progress.stage2, overall=progress.overall
    )
