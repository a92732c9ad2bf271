import datetime as dt
from contextlib import asynccontextmanager

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import create_engine

from src.config.database import async_session_maker
from src.config.settings import settings
from src.guests.dtos import GuestStatus, RSVPStage
from src.guests.features.rsvp_token.write_model import generate_rsvp_token
from src.guests.repository.orm_models import Guest, RSVPInfo
from src.main import app
from src.models import BaseModel, Ceremony, Event


@pytest.fixture(scope="session", autouse=True)
def database_schema():
    """Create the schema once on the test database with a plain sync engine."""
    engine = create_engine(settings.test_database_url.replace("+aiosqlite", ""))
    BaseModel.metadata.drop_all(engine)
    BaseModel.metadata.create_all(engine)
    yield engine
    BaseModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(autouse=True)
def clean_tables(database_schema):
    yield
    with database_schema.begin() as conn:
        for table in reversed(BaseModel.metadata.sorted_tables):
            conn.execute(table.delete())


@pytest_asyncio.fixture
async def db_session():
    """Session handed to SQL models as session_overwrite; nothing is committed."""
    async with async_session_maker() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def client_factory():
    """Build a client with FastAPI dependency overrides, e.g. in-memory models."""

    @asynccontextmanager
    async def _client_factory(overrides: dict | None = None):
        app.dependency_overrides.update(overrides or {})
        try:
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://test") as ac:
                yield ac
        finally:
            app.dependency_overrides.clear()

    return _client_factory


@pytest.fixture
def make_event():
    async def _make_event(session, **overrides) -> Event:
        values = {
            "name": "Ana & Ben's Wedding",
            "couple_names": "Ana & Ben",
            "start_date": dt.date(2027, 6, 12),
            "location": "Quinta da Regaleira, Sintra",
            "rsvp_deadline": None,
            "allow_plus_ones": True,
        }
        values.update(overrides)
        event = Event(**values)
        session.add(event)
        await session.flush()
        return event

    return _make_event


@pytest.fixture
def make_ceremony():
    async def _make_ceremony(session, event: Event, **overrides) -> Ceremony:
        values = {
            "name": "Ceremony",
            "date": event.start_date,
            "start_time": "16:00",
            "end_time": "17:00",
            "location": "Chapel",
        }
        values.update(overrides)
        ceremony = Ceremony(event_id=event.uuid, **values)
        session.add(ceremony)
        await session.flush()
        return ceremony

    return _make_ceremony


@pytest.fixture
def make_guest():
    async def _make_guest(session, event: Event, **overrides) -> tuple[Guest, RSVPInfo]:
        values = {"first_name": "John", "last_name": "Doe", "email": "john@example.com"}
        values.update(overrides)
        guest = Guest(event_id=event.uuid, **values)
        session.add(guest)
        await session.flush()

        token = generate_rsvp_token()
        rsvp_info = RSVPInfo(
            guest_id=guest.uuid,
            status=GuestStatus.PENDING,
            stage=RSVPStage.STAGE1,
            active=True,
            rsvp_token=token,
            rsvp_link=settings.build_rsvp_link(token),
        )
        session.add(rsvp_info)
        await session.flush()
        return guest, rsvp_info

    return _make_guest
