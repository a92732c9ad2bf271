"""Response models shared by the guest routers."""

import datetime as dt
from uuid import UUID

from pydantic import BaseModel

from src.guests.dtos import GuestSide, GuestStatus, RSVPStage


class ChildDetailResponse(BaseModel):
    name: str
    age: int
    dietary_restrictions: str | None = None

    class Config:
        from_attributes = True


class GuestResponse(BaseModel):
    id: UUID
    event_id: UUID
    first_name: str
    last_name: str
    email: str | None = None
    phone: str | None = None
    side: GuestSide
    relationship: str | None = None
    is_family: bool
    is_vip: bool
    rsvp_status: GuestStatus
    rsvp_stage: RSVPStage
    requires_stage2: bool
    is_local_guest: bool
    plus_one_allowed: bool
    plus_one_confirmed: bool
    plus_one_name: str | None = None
    plus_one_email: str | None = None
    plus_one_phone: str | None = None
    plus_one_relationship: str | None = None
    children_details: list[ChildDetailResponse] = []
    dietary_restrictions: str | None = None
    allergies: str | None = None
    needs_accommodation: bool | None = None
    accommodation_preference: str | None = None
    needs_transportation: bool | None = None
    transportation_preference: str | None = None
    needs_flight_assistance: bool
    arrival_date: dt.date | None = None
    departure_date: dt.date | None = None
    special_requests: str | None = None
    notes: str | None = None
    stage2_submitted: bool

    class Config:
        from_attributes = True


class EventResponse(BaseModel):
    id: UUID
    name: str
    couple_names: str
    start_date: dt.date
    location: str
    description: str | None = None
    rsvp_deadline: dt.date | None = None
    allow_plus_ones: bool
    allow_children_details: bool

    class Config:
        from_attributes = True


class CeremonyResponse(BaseModel):
    id: UUID
    name: str
    date: dt.date
    start_time: str
    end_time: str
    location: str
    description: str | None = None
    attire_code: str | None = None

    class Config:
        from_attributes = True


class AttendanceResponse(BaseModel):
    ceremony: CeremonyResponse
    attending: bool
    meal_preference: str | None = None

    class Config:
        from_attributes = True
