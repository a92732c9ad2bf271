"""Query helpers shared by the guest read and write models.

They take an open session and return ORM objects; callers convert to DTOs
before leaving their session block.
"""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.guests.errors import EventNotFound, GuestNotFound
from src.guests.repository.orm_models import Guest, GuestCeremonyAttendance, RSVPInfo
from src.models.event import Ceremony, Event


async def get_guest_with_rsvp(
    session: AsyncSession, guest_id: UUID, for_update: bool = False
) -> tuple[Guest, RSVPInfo]:
    """Load a guest and its RSVP row, optionally locking both for the transaction."""
    stmt = (
        select(Guest, RSVPInfo)
        .join(RSVPInfo, RSVPInfo.guest_id == Guest.uuid)
        .where(Guest.uuid == guest_id)
    )
    if for_update:
        stmt = stmt.with_for_update()
    result = await session.execute(stmt)
    row = result.one_or_none()
    if row is None:
        raise GuestNotFound(f"Guest {guest_id} not found")
    return row[0], row[1]


async def get_live_event(session: AsyncSession, event_id: UUID) -> Event:
    event = await session.get(Event, event_id)
    if event is None or event.deleted_at is not None:
        raise EventNotFound()
    return event


async def list_event_ceremonies(session: AsyncSession, event_id: UUID) -> list[Ceremony]:
    result = await session.execute(
        select(Ceremony)
        .where(Ceremony.event_id == event_id)
        .order_by(Ceremony.date, Ceremony.start_time)
    )
    return list(result.scalars().all())


async def list_guest_attendance(
    session: AsyncSession, guest_id: UUID
) -> list[tuple[GuestCeremonyAttendance, Ceremony]]:
    result = await session.execute(
        select(GuestCeremonyAttendance, Ceremony)
        .join(Ceremony, Ceremony.uuid == GuestCeremonyAttendance.ceremony_id)
        .where(GuestCeremonyAttendance.guest_id == guest_id)
        .order_by(Ceremony.date, Ceremony.start_time)
    )
    return [(row[0], row[1]) for row in result.all()]
