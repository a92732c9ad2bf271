"""RSVP completion percentages derived from a guest snapshot.

Pure functions: no I/O and no mutation, so they can be checked against
literal ``GuestDTO`` values.
"""

import math

from src.guests.dtos import GuestDTO, GuestStatus, RSVPProgressDTO

STAGE2_CHECKLIST_POINTS = 6


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def stage1_progress(guest: GuestDTO) -> int:
    if guest.rsvp_status == GuestStatus.PENDING:
        return 0
    return 100


def _answered_with_preference(needed: bool | None, preference: str | None) -> int:
    if needed is None:
        return 0
    points = 1
    if needed and preference:
        points += 1
    return points


def stage2_progress(guest: GuestDTO) -> int:
    if guest.rsvp_status != GuestStatus.CONFIRMED:
        return 0
    if guest.is_local_guest:
        return 100
    # a final Stage 2 submission is complete whatever was left blank
    if guest.stage2_submitted:
        return 100

    points = _answered_with_preference(guest.needs_accommodation, guest.accommodation_preference)
    points += _answered_with_preference(
        guest.needs_transportation, guest.transportation_preference
    )
    if guest.arrival_date:
        points += 1
    if guest.departure_date:
        points += 1

    return round_half_up(points / STAGE2_CHECKLIST_POINTS * 100)


def overall_progress(guest: GuestDTO) -> int:
    return round_half_up((stage1_progress(guest) + stage2_progress(guest)) / 2)


def calculate_progress(guest: GuestDTO) -> RSVPProgressDTO:
    stage1 = stage1_progress(guest)
    stage2 = stage2_progress(guest)
    return RSVPProgressDTO(
        stage1=stage1,
        stage2=stage2,
        overall=round_half_up((stage1 + stage2) / 2),
    )
