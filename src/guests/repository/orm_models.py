import datetime as dt
from uuid import UUID

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    ForeignKeyConstraint,
    String,
    Text,
    UniqueConstraint,
    orm,
)
from sqlalchemy.orm import Mapped, mapped_column

from src.config.table_names import TableNames
from src.guests.dtos import (
    CommunicationChannel,
    CommunicationStatus,
    GuestSide,
    GuestStatus,
    RSVPStage,
)
from src.models.base import Base, TimeStamp


def _values(enum_cls):
    return [e.value for e in enum_cls]


class Guest(Base, TimeStamp):
    __tablename__ = TableNames.GUESTS.value
    # target of the composite foreign keys that pin rows to one event
    __table_args__ = (UniqueConstraint("uuid", "event_id", name="uq_guests_uuid_event"),)

    event_id: Mapped[UUID] = mapped_column(
        ForeignKey(f"{TableNames.EVENTS.value}.uuid", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    first_name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    last_name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)

    side: Mapped[str] = mapped_column(
        Enum(GuestSide, name="guest_side_enum", values_callable=_values),
        default=GuestSide.BRIDE,
        nullable=False,
    )
    relationship: Mapped[str | None] = mapped_column(String(255), nullable=True)
    is_family: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_vip: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_local_guest: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Plus one
    plus_one_allowed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    plus_one_confirmed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    plus_one_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    plus_one_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    plus_one_phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    plus_one_relationship: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # list of {name, age, dietary_restrictions}
    children_details: Mapped[list] = mapped_column(JSON, default=list, nullable=False)

    dietary_restrictions: Mapped[str | None] = mapped_column(Text, nullable=True)
    allergies: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Travel and accommodation, None until answered
    needs_accommodation: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    accommodation_preference: Mapped[str | None] = mapped_column(String(255), nullable=True)
    needs_transportation: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    transportation_preference: Mapped[str | None] = mapped_column(String(255), nullable=True)
    needs_flight_assistance: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    arrival_date: Mapped[dt.date | None] = mapped_column(Date, nullable=True)
    departure_date: Mapped[dt.date | None] = mapped_column(Date, nullable=True)
    special_requests: Mapped[str | None] = mapped_column(Text, nullable=True)

    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    rsvp_info: Mapped["RSVPInfo | None"] = orm.relationship(
        "RSVPInfo",
        back_populates="guest",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Guest {self.first_name} {self.last_name}>"


class RSVPInfo(Base, TimeStamp):
    __tablename__ = TableNames.RSVP_INFO.value

    guest_id: Mapped[UUID] = mapped_column(
        ForeignKey(f"{TableNames.GUESTS.value}.uuid", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )

    status: Mapped[str] = mapped_column(
        Enum(GuestStatus, name="guest_status_enum", values_callable=_values),
        default=GuestStatus.PENDING,
        nullable=False,
    )
    stage: Mapped[str] = mapped_column(
        Enum(RSVPStage, name="rsvp_stage_enum", values_callable=_values),
        default=RSVPStage.STAGE1,
        nullable=False,
    )
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    rsvp_token: Mapped[str] = mapped_column(String(64), nullable=False, unique=True, index=True)
    rsvp_link: Mapped[str] = mapped_column(String(512), nullable=False)
    # Free-text message left for the couple in Stage 1
    message: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Track when invitation email was sent (None if not sent)
    email_sent_on: Mapped[dt.datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, default=None
    )
    responded_at: Mapped[dt.datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, default=None
    )
    # Set by a final (non-draft) Stage 2 submission
    stage2_submitted_at: Mapped[dt.datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, default=None
    )

    guest: Mapped[Guest] = orm.relationship("Guest", back_populates="rsvp_info")

    def __repr__(self) -> str:
        return f"<RSVPInfo guest={self.guest_id} status={self.status} stage={self.stage}>"


class GuestCeremonyAttendance(Base, TimeStamp):
    __tablename__ = TableNames.GUEST_CEREMONY_ATTENDANCE.value
    __table_args__ = (
        UniqueConstraint("guest_id", "ceremony_id", name="uq_attendance_guest_ceremony"),
        ForeignKeyConstraint(
            ["guest_id", "event_id"],
            [f"{TableNames.GUESTS.value}.uuid", f"{TableNames.GUESTS.value}.event_id"],
            ondelete="CASCADE",
            name="fk_attendance_guest_event",
        ),
        ForeignKeyConstraint(
            ["ceremony_id", "event_id"],
            [f"{TableNames.CEREMONIES.value}.uuid", f"{TableNames.CEREMONIES.value}.event_id"],
            ondelete="CASCADE",
            name="fk_attendance_ceremony_event",
        ),
    )

    guest_id: Mapped[UUID] = mapped_column(nullable=False, index=True)
    ceremony_id: Mapped[UUID] = mapped_column(nullable=False, index=True)
    event_id: Mapped[UUID] = mapped_column(nullable=False)
    attending: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    # Only meaningful while attending is true
    meal_preference: Mapped[str | None] = mapped_column(String(255), nullable=True)

    def __repr__(self) -> str:
        return f"<GuestCeremonyAttendance guest={self.guest_id} ceremony={self.ceremony_id}>"


class FamilyRelationship(Base, TimeStamp):
    __tablename__ = TableNames.FAMILY_RELATIONSHIPS.value
    __table_args__ = (
        # undirected uniqueness: {a, b} is stored once whatever the direction
        UniqueConstraint("pair_low_id", "pair_high_id", name="uq_family_relationship_pair"),
        CheckConstraint("primary_guest_id <> related_guest_id", name="ck_family_relationship_not_self"),
        ForeignKeyConstraint(
            ["primary_guest_id", "event_id"],
            [f"{TableNames.GUESTS.value}.uuid", f"{TableNames.GUESTS.value}.event_id"],
            ondelete="CASCADE",
            name="fk_family_relationship_primary_event",
        ),
        ForeignKeyConstraint(
            ["related_guest_id", "event_id"],
            [f"{TableNames.GUESTS.value}.uuid", f"{TableNames.GUESTS.value}.event_id"],
            ondelete="CASCADE",
            name="fk_family_relationship_related_event",
        ),
    )

    event_id: Mapped[UUID] = mapped_column(nullable=False, index=True)
    primary_guest_id: Mapped[UUID] = mapped_column(nullable=False, index=True)
    related_guest_id: Mapped[UUID] = mapped_column(nullable=False, index=True)
    pair_low_id: Mapped[UUID] = mapped_column(nullable=False)
    pair_high_id: Mapped[UUID] = mapped_column(nullable=False)
    relationship: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    @classmethod
    def between(
        cls,
        event_id: UUID,
        primary_guest_id: UUID,
        related_guest_id: UUID,
        relationship: str,
        description: str | None = None,
    ) -> "FamilyRelationship":
        """Build an edge with its normalized pair columns filled in."""
        low, high = sorted([primary_guest_id, related_guest_id], key=str)
        return cls(
            event_id=event_id,
            primary_guest_id=primary_guest_id,
            related_guest_id=related_guest_id,
            pair_low_id=low,
            pair_high_id=high,
            relationship=relationship,
            description=description,
        )

    def touches(self, guest_id: UUID) -> bool:
        return guest_id in (self.primary_guest_id, self.related_guest_id)

    def other_side(self, guest_id: UUID) -> UUID:
        return self.related_guest_id if self.primary_guest_id == guest_id else self.primary_guest_id

    def __repr__(self) -> str:
        return (
            f"<FamilyRelationship {self.primary_guest_id} "
            f"-{self.relationship}- {self.related_guest_id}>"
        )


class CommunicationLog(Base, TimeStamp):
    __tablename__ = TableNames.COMMUNICATION_LOGS.value

    event_id: Mapped[UUID] = mapped_column(
        ForeignKey(f"{TableNames.EVENTS.value}.uuid", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    guest_id: Mapped[UUID | None] = mapped_column(
        ForeignKey(f"{TableNames.GUESTS.value}.uuid", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    channel: Mapped[str] = mapped_column(
        Enum(CommunicationChannel, name="communication_channel_enum", values_callable=_values),
        nullable=False,
        index=True,
    )
    recipient: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(
        Enum(CommunicationStatus, name="communication_status_enum", values_callable=_values),
        default=CommunicationStatus.PENDING,
        nullable=False,
        index=True,
    )
    provider: Mapped[str | None] = mapped_column(String(100), nullable=True)
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    sent_at: Mapped[dt.datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return f"<CommunicationLog {self.channel} to={self.recipient} status={self.status}>"
