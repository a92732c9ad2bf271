from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, Field

from src.guests.dtos import GuestSide
from src.guests.features.family.read_model import FamilyReadModel, SqlFamilyReadModel
from src.guests.features.family.write_model import FamilyWriteModel, SqlFamilyWriteModel
from src.guests.urls import GUEST_FAMILY_MEMBER_URL, GUEST_FAMILY_URL

router = APIRouter()


class GuestSummaryResponse(BaseModel):
    id: UUID
    first_name: str
    last_name: str
    email: str | None = None
    side: GuestSide

    class Config:
        from_attributes = True


class FamilyMemberResponse(BaseModel):
    relationship_id: UUID
    related_guest: GuestSummaryResponse
    relationship: str
    description: str | None = None
    is_primary: bool

    class Config:
        from_attributes = True


class RelationshipCreate(BaseModel):
    related_guest_id: UUID
    relationship: str = Field(min_length=1, max_length=100)
    description: str | None = None


class RelationshipResponse(BaseModel):
    id: UUID
    primary_guest: GuestSummaryResponse
    related_guest: GuestSummaryResponse
    relationship: str
    description: str | None = None

    class Config:
        from_attributes = True


def get_family_read_model() -> FamilyReadModel:
    """Dependency to get family read model instance."""
    return SqlFamilyReadModel()


def get_family_write_model() -> FamilyWriteModel:
    """Dependency to get family write model instance."""
    return SqlFamilyWriteModel()


@router.get(GUEST_FAMILY_URL, response_model=list[FamilyMemberResponse])
async def list_family(
    guest_id: UUID,
    read_model: FamilyReadModel = Depends(get_family_read_model),
) -> list[FamilyMemberResponse]:
    members = await read_model.list_relationships(guest_id)
    return [FamilyMemberResponse.model_validate(member) for member in members]


@router.post(
    GUEST_FAMILY_URL,
    response_model=RelationshipResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_family_member(
    guest_id: UUID,
    data: RelationshipCreate,
    write_model: FamilyWriteModel = Depends(get_family_write_model),
) -> RelationshipResponse:
    """Link another guest of the same event to this guest."""
    relationship = await write_model.add_relationship(
        primary_guest_id=guest_id,
        related_guest_id=data.related_guest_id,
        relationship=data.relationship,
        description=data.description,
    )
    return RelationshipResponse.model_validate(relationship)


@router.delete(GUEST_FAMILY_MEMBER_URL, status_code=status.HTTP_204_NO_CONTENT)
async def remove_family_member(
    guest_id: UUID,
    relationship_id: UUID,
    write_model: FamilyWriteModel = Depends(get_family_write_model),
) -> Response:
    await write_model.remove_relationship(guest_id, relationship_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
