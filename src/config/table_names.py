from enum import Enum


class TableNames(str, Enum):
    EVENTS = "events"
    CEREMONIES = "ceremonies"
    GUESTS = "guests"
    RSVP_INFO = "rsvp_info"
    GUEST_CEREMONY_ATTENDANCE = "guest_ceremony_attendance"
    FAMILY_RELATIONSHIPS = "family_relationships"
    COMMUNICATION_LOGS = "communication_logs"
