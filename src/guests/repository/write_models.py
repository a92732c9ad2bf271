"""RSVP write models - the two-stage state machine. Returns DTOs, never ORM models."""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import async_session_manager
from src.guests.dtos import (
    CeremonyAttendanceDTO,
    ChildDetailDTO,
    GuestDTO,
    GuestStatus,
    RSVPStage,
    Stage1ResultDTO,
    Stage1SubmissionDTO,
    Stage2SubmissionDTO,
    requires_stage2,
)
from src.guests.errors import InvalidCeremonyReference, InvalidStageTransition, ValidationError
from src.guests.repository.orm_models import Guest, GuestCeremonyAttendance, RSVPInfo
from src.guests.repository.queries import get_guest_with_rsvp, get_live_event
from src.models.event import Ceremony

logger = logging.getLogger(__name__)


def coerce_child_age(value) -> int:
    """Lenient age parsing: anything that is not a number becomes 0."""
    if isinstance(value, bool):
        return 0
    try:
        age = int(float(str(value).strip()))
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(age, 0)


def normalize_children(entries: Iterable[dict | ChildDetailDTO]) -> list[ChildDetailDTO]:
    children = []
    for i, entry in enumerate(entries):
        data = entry.to_dict() if isinstance(entry, ChildDetailDTO) else dict(entry)
        name = (data.get("name") or "").strip()
        if not name:
            raise ValidationError(f"children_details[{i}].name", "Each child needs a name")
        dietary = (data.get("dietary_restrictions") or "").strip() or None
        children.append(
            ChildDetailDTO(
                name=name,
                age=coerce_child_age(data.get("age")),
                dietary_restrictions=dietary,
            )
        )
    return children


class RSVPWriteModel(ABC):
    @abstractmethod
    async def submit_stage1(
        self, guest_id: UUID, submission: Stage1SubmissionDTO
    ) -> Stage1ResultDTO:
        """
        Record the attendance decision, plus-one, dietary info and per-ceremony choices.
        Raises ValidationError, InvalidStageTransition or InvalidCeremonyReference.
        """
        raise NotImplementedError

    @abstractmethod
    async def submit_stage2(self, guest_id: UUID, submission: Stage2SubmissionDTO) -> GuestDTO:
        """
        Record travel, accommodation, plus-one contact and children details.
        Only confirmed, non-local guests who finished Stage 1 may call this.
        """
        raise NotImplementedError


class SqlRSVPWriteModel(RSVPWriteModel):
    """Write operations for RSVP. Every submission runs in a single transaction."""

    def __init__(self, session_overwrite: AsyncSession | None = None):
        self._session_overwrite = session_overwrite

    async def _check_ceremonies(
        self, session, event_id: UUID, choices: list[CeremonyAttendanceDTO]
    ) -> None:
        ceremony_ids = {choice.ceremony_id for choice in choices}
        if not ceremony_ids:
            return
        result = await session.execute(
            select(Ceremony.uuid).where(
                Ceremony.uuid.in_(ceremony_ids), Ceremony.event_id == event_id
            )
        )
        known = set(result.scalars().all())
        missing = ceremony_ids - known
        if missing:
            raise InvalidCeremonyReference(
                f"Ceremony {sorted(missing, key=str)[0]} does not belong to this event"
            )

    async def _upsert_attendance(
        self, session, guest: Guest, choice: CeremonyAttendanceDTO
    ) -> None:
        result = await session.execute(
            select(GuestCeremonyAttendance).where(
                GuestCeremonyAttendance.guest_id == guest.uuid,
                GuestCeremonyAttendance.ceremony_id == choice.ceremony_id,
            )
        )
        attendance = result.scalar_one_or_none()
        if attendance is None:
            attendance = GuestCeremonyAttendance(
                guest_id=guest.uuid,
                ceremony_id=choice.ceremony_id,
                event_id=guest.event_id,
            )
            session.add(attendance)
        attendance.attending = choice.attending
        attendance.meal_preference = choice.meal_preference if choice.attending else None

    async def submit_stage1(
        self, guest_id: UUID, submission: Stage1SubmissionDTO
    ) -> Stage1ResultDTO:
        status = GuestStatus(submission.rsvp_status)
        if status == GuestStatus.PENDING:
            raise ValidationError("rsvp_status", "Please let us know whether you can attend")

        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            guest, rsvp_info = await get_guest_with_rsvp(session, guest_id, for_update=True)

            current = GuestStatus(rsvp_info.status)
            if current != GuestStatus.PENDING and current != status:
                raise InvalidStageTransition(
                    f"Your RSVP has already been recorded as {current.value}. "
                    "Please contact the couple to change it."
                )

            event = await get_live_event(session, guest.event_id)
            # nothing is written unless every ceremony belongs to the guest's event
            await self._check_ceremonies(session, guest.event_id, submission.ceremony_attendance)

            attending = status == GuestStatus.CONFIRMED
            plus_one = bool(
                attending
                and submission.plus_one_attending
                and event.allow_plus_ones
                and guest.plus_one_allowed
            )

            guest.is_local_guest = submission.is_local_guest
            guest.plus_one_confirmed = plus_one
            plus_one_name = (submission.plus_one_name or "").strip() or None
            guest.plus_one_name = plus_one_name if plus_one else None
            guest.dietary_restrictions = submission.dietary_restrictions
            guest.allergies = submission.allergies

            for choice in submission.ceremony_attendance:
                await self._upsert_attendance(session, guest, choice)

            needs_stage2 = requires_stage2(status, submission.is_local_guest)
            if needs_stage2 and rsvp_info.stage2_submitted_at is None:
                stage = RSVPStage.STAGE2
            else:
                stage = RSVPStage.COMPLETE

            rsvp_info.status = status
            rsvp_info.stage = stage
            rsvp_info.message = submission.message
            rsvp_info.responded_at = datetime.now(UTC)
            await session.flush()

            logger.info(
                "Stage 1 submitted for guest %s: status=%s stage=%s",
                guest.uuid,
                status.value,
                stage.value,
            )
            return Stage1ResultDTO(
                guest=GuestDTO.from_guest(guest, rsvp_info),
                requires_stage2=needs_stage2,
                stage=stage,
            )

    async def submit_stage2(self, guest_id: UUID, submission: Stage2SubmissionDTO) -> GuestDTO:
        children = normalize_children(submission.children_details)

        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            # re-read under lock so a concurrent Stage 1 change is seen
            guest, rsvp_info = await get_guest_with_rsvp(session, guest_id, for_update=True)

            if rsvp_info.responded_at is None or RSVPStage(rsvp_info.stage) == RSVPStage.STAGE1:
                raise InvalidStageTransition()
            if not requires_stage2(GuestStatus(rsvp_info.status), guest.is_local_guest):
                raise InvalidStageTransition(
                    "Travel details are only collected from confirmed guests travelling in"
                )

            event = await get_live_event(session, guest.event_id)
            if children and not event.allow_children_details:
                logger.info(
                    "Ignoring %d children for guest %s: event %s does not collect them",
                    len(children),
                    guest.uuid,
                    event.uuid,
                )
                children = []

            guest.needs_accommodation = submission.needs_accommodation
            guest.accommodation_preference = submission.accommodation_preference
            guest.needs_transportation = submission.needs_transportation
            guest.transportation_preference = submission.transportation_preference
            guest.needs_flight_assistance = submission.needs_flight_assistance
            guest.arrival_date = submission.arrival_date
            guest.departure_date = submission.departure_date
            guest.special_requests = submission.special_requests
            guest.notes = submission.notes
            guest.children_details = [child.to_dict() for child in children]

            if guest.plus_one_confirmed:
                guest.plus_one_email = submission.plus_one_email
                guest.plus_one_phone = submission.plus_one_phone
                guest.plus_one_relationship = submission.plus_one_relationship
            else:
                guest.plus_one_email = None
                guest.plus_one_phone = None
                guest.plus_one_relationship = None

            if not submission.draft:
                rsvp_info.stage2_submitted_at = datetime.now(UTC)
                rsvp_info.stage = RSVPStage.COMPLETE
            await session.flush()

            logger.info(
                "Stage 2 %s for guest %s",
                "draft saved" if submission.draft else "submitted",
                guest.uuid,
            )
            return GuestDTO.from_guest(guest, rsvp_info)
