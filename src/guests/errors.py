"""Recoverable RSVP errors.

Each error carries a stable ``code`` for clients and an HTTP status used by
the exception handler in ``src.main``.
"""


class RSVPError(Exception):
    code = "rsvp_error"
    status_code = 400
    default_message = "The request could not be processed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class TokenNotFound(RSVPError):
    code = "token_not_found"
    status_code = 404
    default_message = "This RSVP link is not valid. Please check the link in your invitation."


class TokenExpired(RSVPError):
    code = "token_expired"
    status_code = 410
    default_message = "This RSVP link has expired. Please contact the couple."


class EventNotFound(RSVPError):
    code = "event_not_found"
    status_code = 404
    default_message = "This event is no longer available"


class GuestNotFound(RSVPError):
    code = "guest_not_found"
    status_code = 404
    default_message = "Guest not found"


class InvalidStageTransition(RSVPError):
    code = "invalid_stage_transition"
    status_code = 409
    default_message = "Please complete step 1 of your RSVP first"


class InvalidCeremonyReference(RSVPError):
    code = "invalid_ceremony_reference"
    status_code = 422
    default_message = "One or more ceremonies do not belong to this event"


class CrossEventRelationship(RSVPError):
    code = "cross_event_relationship"
    status_code = 422
    default_message = "Guests must belong to the same event"


class RelationshipExists(RSVPError):
    code = "relationship_exists"
    status_code = 409
    default_message = "Relationship already exists between these guests"


class RelationshipNotFound(RSVPError):
    code = "relationship_not_found"
    status_code = 404
    default_message = "Family relationship not found"


class ValidationError(RSVPError):
    code = "validation_error"
    status_code = 422
    default_message = "Invalid input"

    def __init__(self, field: str, message: str | None = None) -> None:
        self.field = field
        super().__init__(message or f"Invalid value for '{field}'")


class GuestAlreadyExistsError(RSVPError):
    """Raised when an imported or added guest matches an existing one."""

    code = "guest_already_exists"
    status_code = 409

    def __init__(self, first_name: str, last_name: str, email: str | None = None) -> None:
        self.first_name = first_name
        self.last_name = last_name
        self.email = email
        super().__init__(f"Guest '{first_name} {last_name}' already exists for this event")
