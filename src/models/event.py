import datetime as dt
from uuid import UUID

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.config.table_names import TableNames
from src.models.base import Base, TimeStamp


class Event(Base, TimeStamp):
    __tablename__ = TableNames.EVENTS.value

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    couple_names: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    start_date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    location: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    # RSVP settings
    rsvp_deadline: Mapped[dt.date | None] = mapped_column(Date, nullable=True)
    allow_plus_ones: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    allow_children_details: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # Soft delete, guests keep pointing at the event but tokens stop resolving
    deleted_at: Mapped[dt.datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    ceremonies: Mapped[list["Ceremony"]] = relationship(
        "Ceremony", back_populates="event", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Event {self.name} on {self.start_date}>"


class Ceremony(Base, TimeStamp):
    __tablename__ = TableNames.CEREMONIES.value
    __table_args__ = (UniqueConstraint("uuid", "event_id", name="uq_ceremonies_uuid_event"),)

    event_id: Mapped[UUID] = mapped_column(
        ForeignKey(f"{TableNames.EVENTS.value}.uuid", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    start_time: Mapped[str] = mapped_column(String(10), nullable=False)
    end_time: Mapped[str] = mapped_column(String(10), nullable=False)
    location: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    attire_code: Mapped[str | None] = mapped_column(String(255), nullable=True)

    event: Mapped[Event] = relationship("Event", back_populates="ceremonies")

    def __repr__(self) -> str:
        return f"<Ceremony {self.name} on {self.date}>"
