import abc
import datetime as dt
import logging
from collections.abc import Callable
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import async_session_manager
from src.guests.dtos import AttendanceDTO, CeremonyDTO, EventDTO, GuestDTO, RSVPContextDTO
from src.guests.errors import TokenExpired, TokenNotFound
from src.guests.repository.orm_models import Guest, RSVPInfo
from src.guests.repository.queries import (
    get_guest_with_rsvp,
    get_live_event,
    list_event_ceremonies,
    list_guest_attendance,
)

logger = logging.getLogger(__name__)


def utc_today() -> dt.date:
    return dt.datetime.now(dt.UTC).date()


def to_attendance_dto(attendance, ceremony) -> AttendanceDTO:
    # a meal choice on a declined ceremony is kept but never reported
    return AttendanceDTO(
        ceremony=CeremonyDTO.from_ceremony(ceremony),
        attending=attendance.attending,
        meal_preference=attendance.meal_preference if attendance.attending else None,
    )


class RSVPReadModel(abc.ABC):
    @abc.abstractmethod
    async def verify_token(self, token: str) -> RSVPContextDTO:
        """
        Resolve an RSVP token to its guest, event and ceremonies.
        Raises TokenNotFound, EventNotFound or TokenExpired.
        """
        raise NotImplementedError


class SqlRSVPReadModel(RSVPReadModel):
    """SQL implementation of RSVP read model. Never writes."""

    def __init__(
        self,
        session_overwrite: AsyncSession | None = None,
        today: Callable[[], dt.date] = utc_today,
    ) -> None:
        self._session_overwrite = session_overwrite
        self._today = today

    async def verify_token(self, token: str) -> RSVPContextDTO:
        if not token:
            raise TokenNotFound()

        async with async_session_manager(
            auto_commit=False, session_overwrite=self._session_overwrite
        ) as session:
            result = await session.execute(
                select(Guest, RSVPInfo)
                .join(RSVPInfo, RSVPInfo.guest_id == Guest.uuid)
                .where(RSVPInfo.rsvp_token == token)
            )
            row = result.one_or_none()
            if row is None:
                logger.info("RSVP token lookup failed for token ending %s", token[-4:])
                raise TokenNotFound()
            guest, rsvp_info = row

            event = await get_live_event(session, guest.event_id)

            if not rsvp_info.active:
                raise TokenExpired(
                    "This RSVP link has been deactivated. Please ask the couple for a new one."
                )
            if event.rsvp_deadline is not None and self._today() > event.rsvp_deadline:
                raise TokenExpired(
                    f"The RSVP deadline ({event.rsvp_deadline.isoformat()}) has passed."
                )

            ceremonies = await list_event_ceremonies(session, event.uuid)
            attendance = await list_guest_attendance(session, guest.uuid)

            return RSVPContextDTO(
                event=EventDTO.from_event(event),
                guest=GuestDTO.from_guest(guest, rsvp_info),
                ceremonies=[CeremonyDTO.from_ceremony(c) for c in ceremonies],
                attendance=[to_attendance_dto(a, c) for a, c in attendance],
            )


class GuestReadModel(abc.ABC):
    @abc.abstractmethod
    async def get_guest(self, guest_id: UUID) -> GuestDTO:
        """Get a single guest snapshot. Raises GuestNotFound."""
        raise NotImplementedError

    @abc.abstractmethod
    async def get_attendance(self, guest_id: UUID) -> list[AttendanceDTO]:
        """Get the guest's ceremony attendance rows, ordered by ceremony time."""
        raise NotImplementedError


class SqlGuestReadModel(GuestReadModel):
    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self._session_overwrite = session_overwrite

    async def get_guest(self, guest_id: UUID) -> GuestDTO:
        async with async_session_manager(
            auto_commit=False, session_overwrite=self._session_overwrite
        ) as session:
            guest, rsvp_info = await get_guest_with_rsvp(session, guest_id)
            return GuestDTO.from_guest(guest, rsvp_info)

    async def get_attendance(self, guest_id: UUID) -> list[AttendanceDTO]:
        async with async_session_manager(
            auto_commit=False, session_overwrite=self._session_overwrite
        ) as session:
            # raises GuestNotFound for unknown guests instead of an empty list
            await get_guest_with_rsvp(session, guest_id)
            rows = await list_guest_attendance(session, guest_id)
            return [to_attendance_dto(a, c) for a, c in rows]
