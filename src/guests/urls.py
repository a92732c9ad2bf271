# RSVP flow, addressed by token
GET_GUEST_INFO_URL = "/api/v1/rsvp/{token}"
SUBMIT_STAGE1_URL = "/api/v1/rsvp/{token}/stage1"
SUBMIT_STAGE2_URL = "/api/v1/rsvp/{token}/stage2"

# Guest administration, addressed by id
EVENT_GUESTS_URL = "/api/v1/events/{event_id}/guests"
EVENT_GUESTS_IMPORT_URL = "/api/v1/events/{event_id}/guests/import"
GUEST_URL = "/api/v1/guests/{guest_id}"
RSVP_TOKEN_URL = "/api/v1/guests/{guest_id}/rsvp-token"
GUEST_FAMILY_URL = "/api/v1/guests/{guest_id}/family"
GUEST_FAMILY_MEMBER_URL = "/api/v1/guests/{guest_id}/family/{relationship_id}"
GUEST_ATTENDANCE_URL = "/api/v1/guests/{guest_id}/attendance"
GUEST_PROGRESS_URL = "/api/v1/guests/{guest_id}/progress"
