import datetime as dt
from uuid import UUID, uuid4

from src.guests.dtos import AttendanceDTO, CeremonyDTO, GuestDTO
from src.guests.errors import GuestNotFound
from src.guests.features.attendance.router import get_guest_read_model
from src.guests.repository.read_models import GuestReadModel
from src.guests.urls import GUEST_ATTENDANCE_URL


class InMemoryGuestReadModel(GuestReadModel):
    def __init__(self, guests: dict[UUID, GuestDTO], attendance: dict[UUID, list] = None):
        self.guests = guests
        self.attendance = attendance or {}

    async def get_guest(self, guest_id: UUID) -> GuestDTO:
        if guest_id not in self.guests:
            raise GuestNotFound()
        return self.guests[guest_id]

    async def get_attendance(self, guest_id: UUID) -> list[AttendanceDTO]:
        if guest_id not in self.guests:
            raise GuestNotFound()
        return self.attendance.get(guest_id, [])


def ceremony(name: str, start_time: str) -> CeremonyDTO:
    return CeremonyDTO(
        id=uuid4(),
        event_id=uuid4(),
        name=name,
        date=dt.date(2027, 6, 12),
        start_time=start_time,
        end_time="23:00",
        location="Sintra",
    )


async def test_get_attendance(client_factory):
    guest = GuestDTO(id=uuid4(), event_id=uuid4(), first_name="John", last_name="Doe")
    read_model = InMemoryGuestReadModel(
        {guest.id: guest},
        {
            guest.id: [
                AttendanceDTO(ceremony("Vows", "16:00"), attending=True, meal_preference="fish"),
                AttendanceDTO(ceremony("Party", "21:00"), attending=False),
            ]
        },
    )

    async with client_factory({get_guest_read_model: lambda: read_model}) as client:
        response = await client.get(GUEST_ATTENDANCE_URL.format(guest_id=guest.id))

    assert response.status_code == 200
    assert [
        (row["ceremony"]["name"], row["attending"], row["meal_preference"])
        for row in response.json()
    ] == [("Vows", True, "fish"), ("Party", False, None)]


async def test_attendance_of_unknown_guest(client_factory):
    read_model = InMemoryGuestReadModel({})

    async with client_factory({get_guest_read_model: lambda: read_model}) as client:
        response = await client.get(GUEST_ATTENDANCE_URL.format(guest_id=uuid4()))

    assert response.status_code == 404
    assert response.json()["code"] == "guest_not_found"
