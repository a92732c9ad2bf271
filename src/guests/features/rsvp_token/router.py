from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel

from src.guests.dtos import GuestStatus, RSVPStage
from src.guests.features.rsvp_token.write_model import (
    RSVPTokenWriteModel,
    SqlRSVPTokenWriteModel,
)
from src.guests.urls import RSVP_TOKEN_URL

router = APIRouter()


class RSVPTokenResponse(BaseModel):
    token: str
    link: str
    status: GuestStatus
    stage: RSVPStage


def get_rsvp_token_write_model() -> RSVPTokenWriteModel:
    """Dependency to get RSVP token write model instance."""
    return SqlRSVPTokenWriteModel()


@router.post(RSVP_TOKEN_URL, response_model=RSVPTokenResponse, status_code=status.HTTP_201_CREATED)
async def issue_rsvp_token(
    guest_id: UUID,
    write_model: RSVPTokenWriteModel = Depends(get_rsvp_token_write_model),
) -> RSVPTokenResponse:
    """
    Issue a new RSVP token for a guest, e.g. when re-sending an invitation.
    The previous token stops working immediately.
    """
    rsvp = await write_model.issue_token(guest_id)
    return RSVPTokenResponse(token=rsvp.token, link=rsvp.link, status=rsvp.status, stage=rsvp.stage)


@router.delete(RSVP_TOKEN_URL, status_code=status.HTTP_204_NO_CONTENT)
async def invalidate_rsvp_token(
    guest_id: UUID,
    write_model: RSVPTokenWriteModel = Depends(get_rsvp_token_write_model),
) -> Response:
    await write_model.invalidate_token(guest_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
