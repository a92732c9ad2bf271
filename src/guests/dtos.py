import datetime as dt
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID

if TYPE_CHECKING:
    from src.guests.repository.orm_models import Guest, RSVPInfo
    from src.models.event import Ceremony, Event


class GuestStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    DECLINED = "declined"


class RSVPStage(str, Enum):
    """Persisted position of a guest in the two-stage RSVP flow.

    The client-side "unverified" state (before the token was checked) is
    never stored.
    """

    STAGE1 = "stage1"
    STAGE2 = "stage2"
    COMPLETE = "complete"


class GuestSide(str, Enum):
    BRIDE = "bride"
    GROOM = "groom"


class DuplicatePolicy(str, Enum):
    """What guest creation does when a record matches an existing guest."""

    REJECT = "reject"
    SKIP = "skip"
    OVERWRITE = "overwrite"


class CommunicationChannel(str, Enum):
    EMAIL = "email"
    SMS = "sms"
    WHATSAPP = "whatsapp"


class CommunicationStatus(str, Enum):
    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"


def requires_stage2(status: GuestStatus, is_local_guest: bool) -> bool:
    return status == GuestStatus.CONFIRMED and not is_local_guest


@dataclass(frozen=True)
class ChildDetailDTO:
    name: str
    age: int = 0
    dietary_restrictions: str | None = None

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "age": self.age,
            "dietary_restrictions": self.dietary_restrictions,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ChildDetailDTO":
        return cls(
            name=data.get("name", ""),
            age=data.get("age", 0),
            dietary_restrictions=data.get("dietary_restrictions"),
        )


@dataclass(frozen=True)
class EventDTO:
    id: UUID
    name: str
    start_date: dt.date
    couple_names: str = ""
    location: str = ""
    description: str | None = None
    rsvp_deadline: dt.date | None = None
    allow_plus_ones: bool = True
    allow_children_details: bool = True

    @classmethod
    def from_event(cls, event: "Event") -> "EventDTO":
        return cls(
            id=event.uuid,
            name=event.name,
            start_date=event.start_date,
            couple_names=event.couple_names,
            location=event.location,
            description=event.description,
            rsvp_deadline=event.rsvp_deadline,
            allow_plus_ones=event.allow_plus_ones,
            allow_children_details=event.allow_children_details,
        )


@dataclass(frozen=True)
class CeremonyDTO:
    id: UUID
    event_id: UUID
    name: str
    date: dt.date
    start_time: str
    end_time: str
    location: str
    description: str | None = None
    attire_code: str | None = None

    @classmethod
    def from_ceremony(cls, ceremony: "Ceremony") -> "CeremonyDTO":
        return cls(
            id=ceremony.uuid,
            event_id=ceremony.event_id,
            name=ceremony.name,
            date=ceremony.date,
            start_time=ceremony.start_time,
            end_time=ceremony.end_time,
            location=ceremony.location,
            description=ceremony.description,
            attire_code=ceremony.attire_code,
        )


@dataclass(frozen=True)
class RSVPDTO:
    """Token and link handed out to a guest."""

    status: GuestStatus
    token: str
    link: str
    stage: RSVPStage = RSVPStage.STAGE1


@dataclass(frozen=True)
class GuestDTO:
    """Snapshot of a guest and every RSVP-relevant attribute."""

    id: UUID
    event_id: UUID
    first_name: str
    last_name: str
    email: str | None = None
    phone: str | None = None
    side: GuestSide = GuestSide.BRIDE
    relationship: str | None = None
    is_family: bool = False
    is_vip: bool = False
    rsvp_status: GuestStatus = GuestStatus.PENDING
    rsvp_stage: RSVPStage = RSVPStage.STAGE1
    rsvp_token: str | None = None
    plus_one_allowed: bool = False
    plus_one_confirmed: bool = False
    plus_one_name: str | None = None
    plus_one_email: str | None = None
    plus_one_phone: str | None = None
    plus_one_relationship: str | None = None
    children_details: list[ChildDetailDTO] = field(default_factory=list)
    dietary_restrictions: str | None = None
    allergies: str | None = None
    # None means the question has not been answered yet
    needs_accommodation: bool | None = None
    accommodation_preference: str | None = None
    needs_transportation: bool | None = None
    transportation_preference: str | None = None
    needs_flight_assistance: bool = False
    arrival_date: dt.date | None = None
    departure_date: dt.date | None = None
    special_requests: str | None = None
    notes: str | None = None
    is_local_guest: bool = False
    stage2_submitted: bool = False

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def requires_stage2(self) -> bool:
        return requires_stage2(self.rsvp_status, self.is_local_guest)

    @classmethod
    def from_guest(cls, guest: "Guest", rsvp_info: "RSVPInfo | None" = None) -> "GuestDTO":
        """Create GuestDTO from the Guest ORM model and its RSVP row."""
        return cls(
            id=guest.uuid,
            event_id=guest.event_id,
            first_name=guest.first_name,
            last_name=guest.last_name,
            email=guest.email,
            phone=guest.phone,
            side=GuestSide(guest.side),
            relationship=guest.relationship,
            is_family=guest.is_family,
            is_vip=guest.is_vip,
            rsvp_status=GuestStatus(rsvp_info.status) if rsvp_info else GuestStatus.PENDING,
            rsvp_stage=RSVPStage(rsvp_info.stage) if rsvp_info else RSVPStage.STAGE1,
            rsvp_token=rsvp_info.rsvp_token if rsvp_info else None,
            plus_one_allowed=guest.plus_one_allowed,
            plus_one_confirmed=guest.plus_one_confirmed,
            plus_one_name=guest.plus_one_name,
            plus_one_email=guest.plus_one_email,
            plus_one_phone=guest.plus_one_phone,
            plus_one_relationship=guest.plus_one_relationship,
            children_details=[ChildDetailDTO.from_dict(c) for c in guest.children_details or []],
            dietary_restrictions=guest.dietary_restrictions,
            allergies=guest.allergies,
            needs_accommodation=guest.needs_accommodation,
            accommodation_preference=guest.accommodation_preference,
            needs_transportation=guest.needs_transportation,
            transportation_preference=guest.transportation_preference,
            needs_flight_assistance=guest.needs_flight_assistance,
            arrival_date=guest.arrival_date,
            departure_date=guest.departure_date,
            special_requests=guest.special_requests,
            notes=guest.notes,
            is_local_guest=guest.is_local_guest,
            stage2_submitted=bool(rsvp_info and rsvp_info.stage2_submitted_at),
        )


@dataclass(frozen=True)
class GuestSummaryDTO:
    id: UUID
    first_name: str
    last_name: str
    email: str | None = None
    side: GuestSide = GuestSide.BRIDE

    @classmethod
    def from_guest(cls, guest: "Guest") -> "GuestSummaryDTO":
        return cls(
            id=guest.uuid,
            first_name=guest.first_name,
            last_name=guest.last_name,
            email=guest.email,
            side=GuestSide(guest.side),
        )


@dataclass(frozen=True)
class GuestRecordDTO:
    """Incoming guest record, from manual entry or a bulk import row."""

    first_name: str
    last_name: str
    email: str | None = None
    phone: str | None = None
    side: GuestSide = GuestSide.BRIDE
    relationship: str | None = None
    is_family: bool = False
    is_vip: bool = False
    plus_one_allowed: bool = False
    is_local_guest: bool = False
    notes: str | None = None


@dataclass(frozen=True)
class ImportResultDTO:
    created: int
    updated: int
    skipped: int
    guests: list[GuestDTO] = field(default_factory=list)


@dataclass(frozen=True)
class CeremonyAttendanceDTO:
    """One ceremony choice submitted in Stage 1."""

    ceremony_id: UUID
    attending: bool
    meal_preference: str | None = None


@dataclass(frozen=True)
class AttendanceDTO:
    ceremony: CeremonyDTO
    attending: bool
    meal_preference: str | None = None


@dataclass(frozen=True)
class Stage1SubmissionDTO:
    rsvp_status: GuestStatus
    is_local_guest: bool
    plus_one_attending: bool = False
    plus_one_name: str | None = None
    dietary_restrictions: str | None = None
    allergies: str | None = None
    ceremony_attendance: list[CeremonyAttendanceDTO] = field(default_factory=list)
    message: str | None = None


@dataclass(frozen=True)
class Stage2SubmissionDTO:
    needs_accommodation: bool
    needs_flight_assistance: bool = False
    plus_one_email: str | None = None
    plus_one_phone: str | None = None
    plus_one_relationship: str | None = None
    # raw entries, validated by the stage machine
    children_details: list[dict] = field(default_factory=list)
    accommodation_preference: str | None = None
    needs_transportation: bool | None = None
    transportation_preference: str | None = None
    arrival_date: dt.date | None = None
    departure_date: dt.date | None = None
    special_requests: str | None = None
    notes: str | None = None
    draft: bool = False


@dataclass(frozen=True)
class Stage1ResultDTO:
    guest: GuestDTO
    requires_stage2: bool
    stage: RSVPStage


@dataclass(frozen=True)
class RSVPContextDTO:
    """Everything the RSVP page needs after a token was verified."""

    event: EventDTO
    guest: GuestDTO
    ceremonies: list[CeremonyDTO] = field(default_factory=list)
    attendance: list[AttendanceDTO] = field(default_factory=list)

    @property
    def stage(self) -> RSVPStage:
        return self.guest.rsvp_stage

    @property
    def requires_stage2(self) -> bool:
        return self.guest.requires_stage2


@dataclass(frozen=True)
class RelationshipDTO:
    """A stored family edge with both guests resolved."""

    id: UUID
    primary_guest: GuestSummaryDTO
    related_guest: GuestSummaryDTO
    relationship: str
    description: str | None = None


@dataclass(frozen=True)
class FamilyMemberDTO:
    """A family edge seen from one guest: the other side is always related_guest."""

    relationship_id: UUID
    related_guest: GuestSummaryDTO
    relationship: str
    description: str | None = None
    is_primary: bool = True


@dataclass(frozen=True)
class RSVPProgressDTO:
    stage1: int
    stage2: int
    overall: int


@dataclass(frozen=True)
class CommunicationLogDTO:
    event_id: UUID
    channel: CommunicationChannel
    recipient: str
    content: str
    status: CommunicationStatus
    guest_id: UUID | None = None
    error_message: str | None = None
    sent_at: dt.datetime | None = None
    provider: str | None = None


@dataclass(frozen=True)
class OutboundMessageDTO:
    event_id: UUID
    channel: CommunicationChannel
    recipient: str
    subject: str
    content: str
    html_content: str | None = None
    guest_id: UUID | None = None
