"""Write model for creating guests.

Creates the Guest together with its RSVPInfo and a fresh token, applies the
duplicate policy, and optionally sends the invitation. Returns DTOs instead of
ORM models.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import replace
from datetime import UTC, datetime
from functools import partial
from uuid import UUID

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.communications.dispatcher import MessageDispatcher
from src.communications.templates import build_invitation_message
from src.config.database import async_session_manager
from src.config.settings import settings
from src.guests.dtos import (
    DuplicatePolicy,
    EventDTO,
    GuestDTO,
    GuestRecordDTO,
    GuestStatus,
    ImportResultDTO,
    RSVPStage,
)
from src.guests.errors import GuestAlreadyExistsError, ValidationError
from src.guests.features.rsvp_token.write_model import generate_rsvp_token
from src.guests.repository.orm_models import (
    FamilyRelationship,
    Guest,
    GuestCeremonyAttendance,
    RSVPInfo,
)
from src.guests.repository.queries import get_guest_with_rsvp, get_live_event

logger = logging.getLogger(__name__)

CREATED = "created"
UPDATED = "updated"
SKIPPED = "skipped"


def clean_record(record: GuestRecordDTO) -> GuestRecordDTO:
    """Trim the record and check the required fields."""
    first_name = (record.first_name or "").strip()
    last_name = (record.last_name or "").strip()
    if not first_name:
        raise ValidationError("first_name", "First name is required")
    if not last_name:
        raise ValidationError("last_name", "Last name is required")
    email = (record.email or "").strip() or None
    phone = (record.phone or "").strip() or None
    return replace(record, first_name=first_name, last_name=last_name, email=email, phone=phone)


class GuestCreateWriteModel(ABC):
    """Abstract base class for guest creation write operations."""

    @abstractmethod
    async def create_guest(
        self,
        event_id: UUID,
        record: GuestRecordDTO,
        on_duplicate: DuplicatePolicy = DuplicatePolicy.REJECT,
        send_invitation: bool = False,
    ) -> GuestDTO:
        """Create a guest with RSVP info and token. Returns DTO.

        Args:
            event_id: The event the guest is invited to
            record: Name, contact and profile of the guest
            on_duplicate: What to do when the guest already exists (default reject)
            send_invitation: Whether to send the invitation email (best-effort)
        """
        raise NotImplementedError

    @abstractmethod
    async def import_guests(
        self,
        event_id: UUID,
        records: list[GuestRecordDTO],
        on_duplicate: DuplicatePolicy = DuplicatePolicy.SKIP,
        send_invitations: bool = False,
    ) -> ImportResultDTO:
        """Create many guests in one transaction, counting created/updated/skipped."""
        raise NotImplementedError

    @abstractmethod
    async def delete_guest(self, guest_id: UUID) -> None:
        """Delete a guest with its RSVP info, attendance and relationships."""
        raise NotImplementedError


class SqlGuestCreateWriteModel(GuestCreateWriteModel):
    """SQL implementation of guest creation write operations."""

    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(
        self,
        session_overwrite: AsyncSession | None = None,
        message_dispatcher: MessageDispatcher | None = None,
    ) -> None:
        self.session_overwrite = session_overwrite
        self.message_dispatcher = message_dispatcher

    async def create_guest(
        self,
        event_id: UUID,
        record: GuestRecordDTO,
        on_duplicate: DuplicatePolicy = DuplicatePolicy.REJECT,
        send_invitation: bool = False,
    ) -> GuestDTO:
        record = clean_record(record)
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            event = await get_live_event(session, event_id)
            guest, rsvp_info, outcome = await self._add_guest(session, event_id, record, on_duplicate)
            event_dto = EventDTO.from_event(event)
            guest_dto = GuestDTO.from_guest(guest, rsvp_info)
            rsvp_link = rsvp_info.rsvp_link

        # the guest is committed before anything is sent or logged about it
        if send_invitation and outcome == CREATED:
            await self._send_invitations(event_dto, [(guest_dto, rsvp_link)])
        return guest_dto

    async def import_guests(
        self,
        event_id: UUID,
        records: list[GuestRecordDTO],
        on_duplicate: DuplicatePolicy = DuplicatePolicy.SKIP,
        send_invitations: bool = False,
    ) -> ImportResultDTO:
        # validate every row before touching the database
        cleaned = [clean_record(record) for record in records]
        counts = {CREATED: 0, UPDATED: 0, SKIPPED: 0}
        guests = []
        to_invite = []

        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            event = await get_live_event(session, event_id)
            event_dto = EventDTO.from_event(event)
            for record in cleaned:
                guest, rsvp_info, outcome = await self._add_guest(
                    session, event_id, record, on_duplicate
                )
                counts[outcome] += 1
                guest_dto = GuestDTO.from_guest(guest, rsvp_info)
                if send_invitations and outcome == CREATED:
                    to_invite.append((guest_dto, rsvp_info.rsvp_link))
                guests.append(guest_dto)

        logger.info(
            "Imported %d guests into event %s: %d created, %d updated, %d skipped",
            len(cleaned),
            event_id,
            counts[CREATED],
            counts[UPDATED],
            counts[SKIPPED],
        )
        if to_invite:
            await self._send_invitations(event_dto, to_invite)
        return ImportResultDTO(
            created=counts[CREATED],
            updated=counts[UPDATED],
            skipped=counts[SKIPPED],
            guests=guests,
        )

    async def delete_guest(self, guest_id: UUID) -> None:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            guest, _ = await get_guest_with_rsvp(session, guest_id, for_update=True)

            await session.execute(
                delete(GuestCeremonyAttendance).where(GuestCeremonyAttendance.guest_id == guest_id)
            )
            await session.execute(
                delete(FamilyRelationship).where(
                    or_(
                        FamilyRelationship.primary_guest_id == guest_id,
                        FamilyRelationship.related_guest_id == guest_id,
                    )
                )
            )
            await session.execute(delete(RSVPInfo).where(RSVPInfo.guest_id == guest_id))
            await session.delete(guest)
            await session.flush()
            logger.info("Deleted guest %s", guest_id)

    async def _find_duplicate(
        self, session, event_id: UUID, record: GuestRecordDTO
    ) -> Guest | None:
        stmt = select(Guest).where(
            Guest.event_id == event_id,
            func.lower(Guest.first_name) == record.first_name.lower(),
            func.lower(Guest.last_name) == record.last_name.lower(),
        )
        if record.email:
            stmt = stmt.where(func.lower(Guest.email) == record.email.lower())
        else:
            stmt = stmt.where(Guest.email.is_(None))
        result = await session.execute(stmt.limit(1))
        return result.scalar_one_or_none()

    async def _add_guest(
        self,
        session,
        event_id: UUID,
        record: GuestRecordDTO,
        on_duplicate: DuplicatePolicy,
    ) -> tuple[Guest, RSVPInfo, str]:
        existing = await self._find_duplicate(session, event_id, record)
        if existing is not None:
            if on_duplicate == DuplicatePolicy.REJECT:
                raise GuestAlreadyExistsError(record.first_name, record.last_name, record.email)

            _, rsvp_info = await get_guest_with_rsvp(session, existing.uuid)
            if on_duplicate == DuplicatePolicy.SKIP:
                return existing, rsvp_info, SKIPPED

            # overwrite profile and contact, keep token and RSVP answers
            self._apply_record(existing, record)
            await session.flush()
            return existing, rsvp_info, UPDATED

        guest = Guest(event_id=event_id, first_name=record.first_name, last_name=record.last_name)
        self._apply_record(guest, record)
        session.add(guest)
        await session.flush()  # Get guest.uuid without full refresh

        token = generate_rsvp_token()
        rsvp_info = RSVPInfo(
            guest_id=guest.uuid,
            status=GuestStatus.PENDING,
            stage=RSVPStage.STAGE1,
            active=True,
            rsvp_token=token,
            rsvp_link=settings.build_rsvp_link(token),
            email_sent_on=None,
        )
        session.add(rsvp_info)
        await session.flush()
        return guest, rsvp_info, CREATED

    @staticmethod
    def _apply_record(guest: Guest, record: GuestRecordDTO) -> None:
        guest.first_name = record.first_name
        guest.last_name = record.last_name
        guest.email = record.email
        guest.phone = record.phone
        guest.side = record.side
        guest.relationship = record.relationship
        guest.is_family = record.is_family
        guest.is_vip = record.is_vip
        guest.plus_one_allowed = record.plus_one_allowed
        guest.is_local_guest = record.is_local_guest
        guest.notes = record.notes

    async def _send_invitations(
        self, event: EventDTO, invitations: list[tuple[GuestDTO, str]]
    ) -> None:
        """Send invitations for committed guests and stamp the ones delivered."""
        if not self.message_dispatcher:
            return

        delivered = []
        for guest, rsvp_link in invitations:
            if not guest.email:
                continue
            try:
                if await self.message_dispatcher.dispatch(
                    build_invitation_message(event, guest, rsvp_link)
                ):
                    delivered.append(guest.id)
            except Exception:
                # Log error but don't fail guest creation
                logger.exception("Could not send invitation to guest %s", guest.id)

        if not delivered:
            return
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            await session.execute(
                update(RSVPInfo)
                .where(RSVPInfo.guest_id.in_(delivered))
                .values(email_sent_on=datetime.now(UTC))
            )
