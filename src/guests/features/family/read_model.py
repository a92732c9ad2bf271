from abc import ABC, abstractmethod
from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import async_session_manager
from src.guests.dtos import FamilyMemberDTO, GuestSummaryDTO
from src.guests.errors import GuestNotFound
from src.guests.repository.orm_models import FamilyRelationship, Guest


class FamilyReadModel(ABC):
    @abstractmethod
    async def list_relationships(self, guest_id: UUID) -> list[FamilyMemberDTO]:
        """
        List every edge touching the guest, in either direction.
        The other guest is always reported as related_guest.
        """
        raise NotImplementedError


class SqlFamilyReadModel(FamilyReadModel):
    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self._session_overwrite = session_overwrite

    async def list_relationships(self, guest_id: UUID) -> list[FamilyMemberDTO]:
        async with async_session_manager(
            auto_commit=False, session_overwrite=self._session_overwrite
        ) as session:
            if await session.get(Guest, guest_id) is None:
                raise GuestNotFound(f"Guest {guest_id} not found")

            result = await session.execute(
                select(FamilyRelationship)
                .where(
                    or_(
                        FamilyRelationship.primary_guest_id == guest_id,
                        FamilyRelationship.related_guest_id == guest_id,
                    )
                )
                .order_by(FamilyRelationship.created_at, FamilyRelationship.uuid)
            )
            edges = list(result.scalars().all())
            if not edges:
                return []

            others = await session.execute(
                select(Guest).where(Guest.uuid.in_({edge.other_side(guest_id) for edge in edges}))
            )
            by_id = {guest.uuid: guest for guest in others.scalars().all()}

            return [
                FamilyMemberDTO(
                    relationship_id=edge.uuid,
                    related_guest=GuestSummaryDTO.from_guest(by_id[edge.other_side(guest_id)]),
                    relationship=edge.relationship,
                    description=edge.description,
                    is_primary=edge.primary_guest_id == guest_id,
                )
                for edge in edges
            ]
