"""Issue and invalidate the opaque RSVP tokens guests use instead of logging in."""

import logging
import secrets
from abc import ABC, abstractmethod
from functools import partial
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import async_session_manager
from src.config.settings import settings
from src.guests.dtos import RSVPDTO, GuestStatus, RSVPStage
from src.guests.repository.queries import get_guest_with_rsvp

logger = logging.getLogger(__name__)


def generate_rsvp_token() -> str:
    # 32 random bytes, url-safe: not guessable or enumerable
    return secrets.token_urlsafe(32)


class RSVPTokenWriteModel(ABC):
    @abstractmethod
    async def issue_token(self, guest_id: UUID) -> RSVPDTO:
        """Replace the guest's token with a fresh one and reactivate it."""
        raise NotImplementedError

    @abstractmethod
    async def invalidate_token(self, guest_id: UUID) -> None:
        """Deactivate the guest's current token."""
        raise NotImplementedError


class SqlRSVPTokenWriteModel(RSVPTokenWriteModel):
    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def issue_token(self, guest_id: UUID) -> RSVPDTO:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            _, rsvp_info = await get_guest_with_rsvp(session, guest_id, for_update=True)

            token = generate_rsvp_token()
            rsvp_info.rsvp_token = token
            rsvp_info.rsvp_link = settings.build_rsvp_link(token)
            rsvp_info.active = True
            await session.flush()

            logger.info("Issued RSVP token ...%s for guest %s", token[-4:], guest_id)
            return RSVPDTO(
                status=GuestStatus(rsvp_info.status),
                token=token,
                link=rsvp_info.rsvp_link,
                stage=RSVPStage(rsvp_info.stage),
            )

    async def invalidate_token(self, guest_id: UUID) -> None:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            _, rsvp_info = await get_guest_with_rsvp(session, guest_id, for_update=True)
            rsvp_info.active = False
            await session.flush()
            logger.info("Invalidated RSVP token for guest %s", guest_id)
