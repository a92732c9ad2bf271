import datetime as dt
from uuid import uuid4

import pytest

from src.guests.completion import (
    calculate_progress,
    overall_progress,
    round_half_up,
    stage1_progress,
    stage2_progress,
)
from src.guests.dtos import GuestDTO, GuestStatus, RSVPProgressDTO


def make_guest(**overrides) -> GuestDTO:
    values = {"id": uuid4(), "event_id": uuid4(), "first_name": "Ana", "last_name": "Silva"}
    values.update(overrides)
    return GuestDTO(**values)


def test_pending_guest_has_no_progress():
    guest = make_guest(rsvp_status=GuestStatus.PENDING, needs_accommodation=True)
    assert calculate_progress(guest) == RSVPProgressDTO(stage1=0, stage2=0, overall=0)


def test_declined_guest_is_half_way():
    guest = make_guest(rsvp_status=GuestStatus.DECLINED)
    assert calculate_progress(guest) == RSVPProgressDTO(stage1=100, stage2=0, overall=50)


def test_local_confirmed_guest_is_done():
    guest = make_guest(rsvp_status=GuestStatus.CONFIRMED, is_local_guest=True)
    assert calculate_progress(guest) == RSVPProgressDTO(stage1=100, stage2=100, overall=100)


def test_final_stage2_submission_is_done():
    guest = make_guest(
        rsvp_status=GuestStatus.CONFIRMED,
        needs_accommodation=True,
        accommodation_preference="provided",
        stage2_submitted=True,
    )
    assert overall_progress(guest) == 100


@pytest.mark.parametrize(
    "fields, expected",
    [
        ({}, 0),
        ({"needs_accommodation": False}, 17),
        ({"needs_accommodation": True}, 17),
        ({"needs_accommodation": True, "accommodation_preference": "hotel"}, 33),
        ({"needs_accommodation": False, "needs_transportation": False}, 33),
        (
            {
                "needs_accommodation": True,
                "accommodation_preference": "hotel",
                "arrival_date": dt.date(2027, 6, 10),
            },
            50,
        ),
        (
            {
                "needs_accommodation": True,
                "accommodation_preference": "hotel",
                "needs_transportation": True,
                "transportation_preference": "shuttle",
                "arrival_date": dt.date(2027, 6, 10),
                "departure_date": dt.date(2027, 6, 14),
            },
            100,
        ),
    ],
)
def test_stage2_checklist(fields, expected):
    guest = make_guest(rsvp_status=GuestStatus.CONFIRMED, **fields)
    assert stage2_progress(guest) == expected
    assert stage1_progress(guest) == 100


def test_overall_rounds_half_up():
    # one checklist point: (100 + 17) / 2 = 58.5
    guest = make_guest(rsvp_status=GuestStatus.CONFIRMED, needs_accommodation=False)
    assert overall_progress(guest) == 59


def test_round_half_up():
    assert round_half_up(0.5) == 1
    assert round_half_up(2.5) == 3
    assert round_half_up(16.666) == 17
    assert round_half_up(16.4) == 16
