"""Write model for the family relationship graph.

Edges are undirected for uniqueness: a pair of guests can be linked once,
whichever of them was named first.
"""

import logging
from abc import ABC, abstractmethod
from functools import partial
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import async_session_manager
from src.guests.dtos import GuestSummaryDTO, RelationshipDTO
from src.guests.errors import (
    CrossEventRelationship,
    GuestNotFound,
    RelationshipExists,
    RelationshipNotFound,
    ValidationError,
)
from src.guests.repository.orm_models import FamilyRelationship, Guest

logger = logging.getLogger(__name__)

PAIR_CONSTRAINT = "uq_family_relationship_pair"


def is_pair_conflict(error: IntegrityError) -> bool:
    message = str(error.orig)
    # PostgreSQL names the constraint, SQLite lists its columns
    return PAIR_CONSTRAINT in message or "family_relationships.pair_low_id" in message


class FamilyWriteModel(ABC):
    @abstractmethod
    async def add_relationship(
        self,
        primary_guest_id: UUID,
        related_guest_id: UUID,
        relationship: str,
        description: str | None = None,
    ) -> RelationshipDTO:
        """
        Link two guests of the same event.
        Raises RelationshipExists if the pair is already linked in either direction.
        """
        raise NotImplementedError

    @abstractmethod
    async def remove_relationship(self, guest_id: UUID, relationship_id: UUID) -> None:
        """Remove an edge, addressed through either of its guests."""
        raise NotImplementedError


class SqlFamilyWriteModel(FamilyWriteModel):
    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def add_relationship(
        self,
        primary_guest_id: UUID,
        related_guest_id: UUID,
        relationship: str,
        description: str | None = None,
    ) -> RelationshipDTO:
        relationship = (relationship or "").strip()
        if not relationship:
            raise ValidationError("relationship", "Please describe the relationship")
        if primary_guest_id == related_guest_id:
            raise ValidationError("related_guest_id", "A guest cannot be related to themselves")

        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            result = await session.execute(
                select(Guest).where(Guest.uuid.in_([primary_guest_id, related_guest_id]))
            )
            guests = {guest.uuid: guest for guest in result.scalars().all()}
            for guest_id in (primary_guest_id, related_guest_id):
                if guest_id not in guests:
                    raise GuestNotFound(f"Guest {guest_id} not found")

            primary, related = guests[primary_guest_id], guests[related_guest_id]
            if primary.event_id != related.event_id:
                raise CrossEventRelationship()

            edge = FamilyRelationship.between(
                event_id=primary.event_id,
                primary_guest_id=primary.uuid,
                related_guest_id=related.uuid,
                relationship=relationship,
                description=description,
            )
            if await self._pair_exists(session, edge):
                raise RelationshipExists()

            try:
                async with session.begin_nested():
                    session.add(edge)
            except IntegrityError as e:
                if not is_pair_conflict(e):
                    raise
                # a concurrent request linked the same pair first
                raise RelationshipExists() from e

            logger.info(
                "Linked guests %s and %s as %s", primary.uuid, related.uuid, relationship
            )
            return RelationshipDTO(
                id=edge.uuid,
                primary_guest=GuestSummaryDTO.from_guest(primary),
                related_guest=GuestSummaryDTO.from_guest(related),
                relationship=edge.relationship,
                description=edge.description,
            )

    async def remove_relationship(self, guest_id: UUID, relationship_id: UUID) -> None:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            edge = await session.get(FamilyRelationship, relationship_id)
            if edge is None or not edge.touches(guest_id):
                raise RelationshipNotFound()

            await session.delete(edge)
            await session.flush()
            logger.info("Removed family relationship %s", relationship_id)

    @staticmethod
    async def _pair_exists(session, edge: FamilyRelationship) -> bool:
        result = await session.execute(
            select(FamilyRelationship.uuid).where(
                FamilyRelationship.pair_low_id == edge.pair_low_id,
                FamilyRelationship.pair_high_id == edge.pair_high_id,
            )
        )
        return result.scalar_one_or_none() is not None
