from uuid import UUID, uuid4

from src.communications.base import MessageProvider
from src.communications.dispatcher import MessageDispatcher
from src.communications.logger import CommunicationLogger
from src.guests.dtos import (
    CommunicationChannel,
    CommunicationLogDTO,
    CommunicationStatus,
    OutboundMessageDTO,
)


class FakeProvider(MessageProvider):
    def __init__(self, name, configured=True, error=None, channel=CommunicationChannel.EMAIL):
        self.name = name
        self.channel = channel
        self.configured = configured
        self.error = error
        self.sent = []

    def is_configured(self) -> bool:
        return self.configured

    async def send(self, message):
        if self.error:
            raise self.error
        self.sent.append(message)
        return f"{self.name}-id"


class InMemoryCommunicationLogger(CommunicationLogger):
    def __init__(self):
        self.entries: list[CommunicationLogDTO] = []

    async def log_communication(self, entry: CommunicationLogDTO) -> UUID:
        self.entries.append(entry)
        return uuid4()


def build_message(channel=CommunicationChannel.EMAIL) -> OutboundMessageDTO:
    return OutboundMessageDTO(
        event_id=uuid4(),
        guest_id=uuid4(),
        channel=channel,
        recipient="john@example.com",
        subject="You're invited",
        content="Please RSVP",
    )


async def test_first_configured_provider_delivers():
    primary, backup = FakeProvider("primary"), FakeProvider("backup")
    log = InMemoryCommunicationLogger()

    delivered = await MessageDispatcher([primary, backup], log).dispatch(build_message())

    assert delivered is True
    assert len(primary.sent) == 1
    assert backup.sent == []
    assert len(log.entries) == 1
    assert log.entries[0].status == CommunicationStatus.SENT
    assert log.entries[0].provider == "primary"
    assert log.entries[0].sent_at is not None


async def test_falls_through_to_next_provider(caplog):
    broken = FakeProvider("broken", error=ConnectionError("timed out"))
    backup = FakeProvider("backup")
    log = InMemoryCommunicationLogger()

    delivered = await MessageDispatcher([broken, backup], log).dispatch(build_message())

    assert delivered is True
    assert len(backup.sent) == 1
    assert [entry.provider for entry in log.entries] == ["backup"]
    assert any(
        record.levelname == "WARNING" and "broken" in record.getMessage()
        for record in caplog.records
    )


async def test_unconfigured_and_other_channel_providers_are_skipped():
    unconfigured = FakeProvider("unconfigured", configured=False)
    sms = FakeProvider("sms", channel=CommunicationChannel.SMS)
    email = FakeProvider("email")

    delivered = await MessageDispatcher(
        [unconfigured, sms, email], InMemoryCommunicationLogger()
    ).dispatch(build_message())

    assert delivered is True
    assert unconfigured.sent == []
    assert sms.sent == []
    assert len(email.sent) == 1


async def test_all_providers_fail():
    log = InMemoryCommunicationLogger()
    dispatcher = MessageDispatcher(
        [
            FakeProvider("first", error=RuntimeError("bounced")),
            FakeProvider("second", error=RuntimeError()),
        ],
        log,
    )

    delivered = await dispatcher.dispatch(build_message())

    assert delivered is False
    assert len(log.entries) == 1
    assert log.entries[0].status == CommunicationStatus.FAILED
    assert log.entries[0].error_message == "second: RuntimeError"
    assert log.entries[0].sent_at is None


async def test_no_provider_for_channel():
    log = InMemoryCommunicationLogger()

    delivered = await MessageDispatcher([FakeProvider("email")], log).dispatch(
        build_message(CommunicationChannel.WHATSAPP)
    )

    assert delivered is False
    assert log.entries[0].error_message == "No configured provider for whatsapp"


async def test_default_logger_is_a_no_op():
    assert await MessageDispatcher([]).dispatch(build_message()) is False


class BrokenCommunicationLogger(CommunicationLogger):
    async def log_communication(self, entry: CommunicationLogDTO) -> UUID:
        raise RuntimeError("database is locked")


async def test_logging_failure_does_not_change_the_outcome(caplog):
    provider = FakeProvider("primary")

    delivered = await MessageDispatcher([provider], BrokenCommunicationLogger()).dispatch(
        build_message()
    )

    assert delivered is True
    assert len(provider.sent) == 1
    assert any("Could not record sent communication" in r.getMessage() for r in caplog.records)
