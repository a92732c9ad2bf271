"""Tests for SqlRSVPWriteModel, the two-stage RSVP state machine."""

import datetime as dt
from uuid import uuid4

import pytest
from sqlalchemy import select

from src.guests.completion import calculate_progress
from src.guests.dtos import (
    CeremonyAttendanceDTO,
    GuestStatus,
    RSVPStage,
    Stage1SubmissionDTO,
    Stage2SubmissionDTO,
)
from src.guests.errors import (
    GuestNotFound,
    InvalidCeremonyReference,
    InvalidStageTransition,
    ValidationError,
)
from src.guests.repository.orm_models import GuestCeremonyAttendance
from src.guests.repository.write_models import SqlRSVPWriteModel, coerce_child_age


async def test_confirmed_travelling_guest_goes_through_both_stages(
    db_session, make_event, make_ceremony, make_guest
):
    event = await make_event(db_session)
    ceremony = await make_ceremony(db_session, event)
    guest, _ = await make_guest(db_session, event)
    write_model = SqlRSVPWriteModel(session_overwrite=db_session)

    result = await write_model.submit_stage1(
        guest.uuid,
        Stage1SubmissionDTO(
            rsvp_status=GuestStatus.CONFIRMED,
            is_local_guest=False,
            ceremony_attendance=[CeremonyAttendanceDTO(ceremony_id=ceremony.uuid, attending=True)],
        ),
    )

    assert result.requires_stage2 is True
    assert result.stage == RSVPStage.STAGE2
    assert result.guest.rsvp_status == GuestStatus.CONFIRMED

    guest_dto = await write_model.submit_stage2(
        guest.uuid,
        Stage2SubmissionDTO(needs_accommodation=True, accommodation_preference="provided"),
    )

    assert guest_dto.rsvp_stage == RSVPStage.COMPLETE
    assert guest_dto.stage2_submitted is True
    assert calculate_progress(guest_dto).overall == 100


async def test_declined_guest_is_complete_after_stage1(db_session, make_event, make_guest):
    event = await make_event(db_session)
    guest, _ = await make_guest(db_session, event)
    write_model = SqlRSVPWriteModel(session_overwrite=db_session)

    result = await write_model.submit_stage1(
        guest.uuid,
        Stage1SubmissionDTO(rsvp_status=GuestStatus.DECLINED, is_local_guest=False),
    )

    assert result.requires_stage2 is False
    assert result.stage == RSVPStage.COMPLETE
    assert calculate_progress(result.guest).overall == 50


async def test_local_confirmed_guest_skips_stage2(db_session, make_event, make_guest):
    event = await make_event(db_session)
    guest, _ = await make_guest(db_session, event)
    write_model = SqlRSVPWriteModel(session_overwrite=db_session)

    result = await write_model.submit_stage1(
        guest.uuid,
        Stage1SubmissionDTO(rsvp_status=GuestStatus.CONFIRMED, is_local_guest=True),
    )

    assert result.requires_stage2 is False
    assert result.stage == RSVPStage.COMPLETE
    assert calculate_progress(result.guest).overall == 100

    with pytest.raises(InvalidStageTransition):
        await write_model.submit_stage2(guest.uuid, Stage2SubmissionDTO(needs_accommodation=False))


async def test_stage2_before_stage1_is_rejected(db_session, make_event, make_guest):
    event = await make_event(db_session)
    guest, rsvp_info = await make_guest(db_session, event)
    write_model = SqlRSVPWriteModel(session_overwrite=db_session)

    with pytest.raises(InvalidStageTransition):
        await write_model.submit_stage2(
            guest.uuid,
            Stage2SubmissionDTO(needs_accommodation=True, accommodation_preference="hotel"),
        )

    assert guest.needs_accommodation is None
    assert rsvp_info.stage == RSVPStage.STAGE1


async def test_stage2_rejected_for_declined_guest(db_session, make_event, make_guest):
    event = await make_event(db_session)
    guest, _ = await make_guest(db_session, event)
    write_model = SqlRSVPWriteModel(session_overwrite=db_session)
    await write_model.submit_stage1(
        guest.uuid, Stage1SubmissionDTO(rsvp_status=GuestStatus.DECLINED, is_local_guest=False)
    )

    with pytest.raises(InvalidStageTransition):
        await write_model.submit_stage2(guest.uuid, Stage2SubmissionDTO(needs_accommodation=True))


async def test_pending_status_is_not_a_valid_answer(db_session, make_event, make_guest):
    event = await make_event(db_session)
    guest, _ = await make_guest(db_session, event)
    write_model = SqlRSVPWriteModel(session_overwrite=db_session)

    with pytest.raises(ValidationError) as exc_info:
        await write_model.submit_stage1(
            guest.uuid,
            Stage1SubmissionDTO(rsvp_status=GuestStatus.PENDING, is_local_guest=False),
        )
    assert exc_info.value.field == "rsvp_status"


async def test_recorded_answer_cannot_be_flipped(db_session, make_event, make_guest):
    event = await make_event(db_session)
    guest, rsvp_info = await make_guest(db_session, event)
    write_model = SqlRSVPWriteModel(session_overwrite=db_session)
    await write_model.submit_stage1(
        guest.uuid, Stage1SubmissionDTO(rsvp_status=GuestStatus.CONFIRMED, is_local_guest=False)
    )

    with pytest.raises(InvalidStageTransition):
        await write_model.submit_stage1(
            guest.uuid,
            Stage1SubmissionDTO(rsvp_status=GuestStatus.DECLINED, is_local_guest=False),
        )
    assert rsvp_info.status == GuestStatus.CONFIRMED


async def test_resubmitting_stage1_upserts_attendance(
    db_session, make_event, make_ceremony, make_guest
):
    event = await make_event(db_session)
    ceremony = await make_ceremony(db_session, event)
    guest, _ = await make_guest(db_session, event)
    write_model = SqlRSVPWriteModel(session_overwrite=db_session)

    for attending, meal in ((True, "fish"), (False, "meat")):
        await write_model.submit_stage1(
            guest.uuid,
            Stage1SubmissionDTO(
                rsvp_status=GuestStatus.CONFIRMED,
                is_local_guest=True,
                ceremony_attendance=[
                    CeremonyAttendanceDTO(
                        ceremony_id=ceremony.uuid, attending=attending, meal_preference=meal
                    )
                ],
            ),
        )

    result = await db_session.execute(
        select(GuestCeremonyAttendance).where(GuestCeremonyAttendance.guest_id == guest.uuid)
    )
    rows = result.scalars().all()
    assert len(rows) == 1
    assert rows[0].attending is False
    assert rows[0].meal_preference is None


async def test_ceremony_of_another_event_writes_nothing(
    db_session, make_event, make_ceremony, make_guest
):
    event = await make_event(db_session)
    other_event = await make_event(db_session, name="Another wedding")
    own_ceremony = await make_ceremony(db_session, event)
    foreign_ceremony = await make_ceremony(db_session, other_event)
    guest, rsvp_info = await make_guest(db_session, event)
    write_model = SqlRSVPWriteModel(session_overwrite=db_session)

    with pytest.raises(InvalidCeremonyReference):
        await write_model.submit_stage1(
            guest.uuid,
            Stage1SubmissionDTO(
                rsvp_status=GuestStatus.CONFIRMED,
                is_local_guest=False,
                ceremony_attendance=[
                    CeremonyAttendanceDTO(ceremony_id=own_ceremony.uuid, attending=True),
                    CeremonyAttendanceDTO(ceremony_id=foreign_ceremony.uuid, attending=True),
                ],
            ),
        )

    assert rsvp_info.status == GuestStatus.PENDING
    result = await db_session.execute(select(GuestCeremonyAttendance))
    assert result.scalars().all() == []


async def test_unknown_ceremony_is_rejected(db_session, make_event, make_guest):
    event = await make_event(db_session)
    guest, _ = await make_guest(db_session, event)
    write_model = SqlRSVPWriteModel(session_overwrite=db_session)

    with pytest.raises(InvalidCeremonyReference):
        await write_model.submit_stage1(
            guest.uuid,
            Stage1SubmissionDTO(
                rsvp_status=GuestStatus.CONFIRMED,
                is_local_guest=True,
                ceremony_attendance=[CeremonyAttendanceDTO(ceremony_id=uuid4(), attending=True)],
            ),
        )


@pytest.mark.parametrize(
    "event_allows, guest_allowed, status, expected",
    [
        (True, True, GuestStatus.CONFIRMED, True),
        (False, True, GuestStatus.CONFIRMED, False),
        (True, False, GuestStatus.CONFIRMED, False),
        (True, True, GuestStatus.DECLINED, False),
    ],
)
async def test_plus_one_is_clamped(
    db_session, make_event, make_guest, event_allows, guest_allowed, status, expected
):
    event = await make_event(db_session, allow_plus_ones=event_allows)
    guest, _ = await make_guest(db_session, event, plus_one_allowed=guest_allowed)
    write_model = SqlRSVPWriteModel(session_overwrite=db_session)

    result = await write_model.submit_stage1(
        guest.uuid,
        Stage1SubmissionDTO(
            rsvp_status=status,
            is_local_guest=True,
            plus_one_attending=True,
            plus_one_name="Maria",
        ),
    )

    assert result.guest.plus_one_confirmed is expected
    assert result.guest.plus_one_name == ("Maria" if expected else None)


async def test_stage1_stores_message_and_dietary_info(db_session, make_event, make_guest):
    event = await make_event(db_session)
    guest, rsvp_info = await make_guest(db_session, event)
    write_model = SqlRSVPWriteModel(session_overwrite=db_session)

    result = await write_model.submit_stage1(
        guest.uuid,
        Stage1SubmissionDTO(
            rsvp_status=GuestStatus.CONFIRMED,
            is_local_guest=True,
            dietary_restrictions="vegetarian",
            allergies="peanuts",
            message="Can't wait!",
        ),
    )

    assert result.guest.dietary_restrictions == "vegetarian"
    assert result.guest.allergies == "peanuts"
    assert rsvp_info.message == "Can't wait!"
    assert rsvp_info.responded_at is not None


async def test_stage2_draft_keeps_stage_until_final_save(db_session, make_event, make_guest):
    event = await make_event(db_session)
    guest, _ = await make_guest(db_session, event)
    write_model = SqlRSVPWriteModel(session_overwrite=db_session)
    await write_model.submit_stage1(
        guest.uuid, Stage1SubmissionDTO(rsvp_status=GuestStatus.CONFIRMED, is_local_guest=False)
    )

    draft = await write_model.submit_stage2(
        guest.uuid,
        Stage2SubmissionDTO(
            needs_accommodation=True,
            accommodation_preference="hotel",
            arrival_date=dt.date(2027, 6, 10),
            draft=True,
        ),
    )
    assert draft.rsvp_stage == RSVPStage.STAGE2
    assert draft.stage2_submitted is False
    assert calculate_progress(draft).stage2 == 50

    # last write wins: the arrival date is gone after the next save
    final = await write_model.submit_stage2(
        guest.uuid,
        Stage2SubmissionDTO(needs_accommodation=False),
    )
    assert final.rsvp_stage == RSVPStage.COMPLETE
    assert final.arrival_date is None
    assert final.accommodation_preference is None

    later_draft = await write_model.submit_stage2(
        guest.uuid,
        Stage2SubmissionDTO(needs_accommodation=True, draft=True),
    )
    assert later_draft.rsvp_stage == RSVPStage.COMPLETE


async def test_stage2_children_are_validated_and_coerced(db_session, make_event, make_guest):
    event = await make_event(db_session)
    guest, _ = await make_guest(db_session, event)
    write_model = SqlRSVPWriteModel(session_overwrite=db_session)
    await write_model.submit_stage1(
        guest.uuid, Stage1SubmissionDTO(rsvp_status=GuestStatus.CONFIRMED, is_local_guest=False)
    )

    with pytest.raises(ValidationError) as exc_info:
        await write_model.submit_stage2(
            guest.uuid,
            Stage2SubmissionDTO(
                needs_accommodation=False,
                children_details=[{"name": "Lea", "age": 4}, {"name": "  ", "age": 2}],
            ),
        )
    assert exc_info.value.field == "children_details[1].name"

    result = await write_model.submit_stage2(
        guest.uuid,
        Stage2SubmissionDTO(
            needs_accommodation=False,
            children_details=[{"name": " Lea ", "age": "seven"}, {"name": "Tom", "age": "3"}],
        ),
    )
    assert [(c.name, c.age) for c in result.children_details] == [("Lea", 0), ("Tom", 3)]


async def test_stage2_children_are_dropped_when_event_does_not_collect_them(
    db_session, make_event, make_guest
):
    event = await make_event(db_session, allow_children_details=False)
    guest, _ = await make_guest(db_session, event)
    write_model = SqlRSVPWriteModel(session_overwrite=db_session)
    await write_model.submit_stage1(
        guest.uuid, Stage1SubmissionDTO(rsvp_status=GuestStatus.CONFIRMED, is_local_guest=False)
    )

    result = await write_model.submit_stage2(
        guest.uuid,
        Stage2SubmissionDTO(needs_accommodation=False, children_details=[{"name": "Lea", "age": 4}]),
    )

    assert result.children_details == []
    assert result.rsvp_stage == RSVPStage.COMPLETE


async def test_resubmitting_stage1_after_final_stage2_stays_complete(
    db_session, make_event, make_guest
):
    event = await make_event(db_session)
    guest, _ = await make_guest(db_session, event)
    write_model = SqlRSVPWriteModel(session_overwrite=db_session)
    stage1 = Stage1SubmissionDTO(rsvp_status=GuestStatus.CONFIRMED, is_local_guest=False)
    await write_model.submit_stage1(guest.uuid, stage1)
    await write_model.submit_stage2(guest.uuid, Stage2SubmissionDTO(needs_accommodation=False))

    result = await write_model.submit_stage1(
        guest.uuid,
        Stage1SubmissionDTO(
            rsvp_status=GuestStatus.CONFIRMED, is_local_guest=False, dietary_restrictions="vegan"
        ),
    )

    assert result.requires_stage2 is True
    assert result.stage == RSVPStage.COMPLETE
    assert result.guest.rsvp_stage == RSVPStage.COMPLETE
    assert result.guest.stage2_submitted is True
    assert result.guest.dietary_restrictions == "vegan"


async def test_resubmitting_stage1_after_stage2_draft_returns_to_stage2(
    db_session, make_event, make_guest
):
    event = await make_event(db_session)
    guest, _ = await make_guest(db_session, event)
    write_model = SqlRSVPWriteModel(session_overwrite=db_session)
    stage1 = Stage1SubmissionDTO(rsvp_status=GuestStatus.CONFIRMED, is_local_guest=False)
    await write_model.submit_stage1(guest.uuid, stage1)
    await write_model.submit_stage2(
        guest.uuid, Stage2SubmissionDTO(needs_accommodation=True, draft=True)
    )

    result = await write_model.submit_stage1(guest.uuid, stage1)

    assert result.stage == RSVPStage.STAGE2
    assert result.guest.needs_accommodation is True


async def test_stage2_plus_one_contact_requires_confirmed_plus_one(
    db_session, make_event, make_guest
):
    event = await make_event(db_session)
    guest, _ = await make_guest(db_session, event, plus_one_allowed=False)
    write_model = SqlRSVPWriteModel(session_overwrite=db_session)
    await write_model.submit_stage1(
        guest.uuid, Stage1SubmissionDTO(rsvp_status=GuestStatus.CONFIRMED, is_local_guest=False)
    )

    result = await write_model.submit_stage2(
        guest.uuid,
        Stage2SubmissionDTO(needs_accommodation=False, plus_one_email="maria@example.com"),
    )
    assert result.plus_one_email is None


async def test_unknown_guest(db_session):
    write_model = SqlRSVPWriteModel(session_overwrite=db_session)

    with pytest.raises(GuestNotFound):
        await write_model.submit_stage1(
            uuid4(), Stage1SubmissionDTO(rsvp_status=GuestStatus.CONFIRMED, is_local_guest=True)
        )


@pytest.mark.parametrize(
    "value, expected",
    [(5, 5), ("7", 7), (" 12 ", 12), ("4.5", 4), ("abc", 0), (None, 0), (-3, 0), (True, 0)],
)
def test_coerce_child_age(value, expected):
    assert coerce_child_age(value) == expected
