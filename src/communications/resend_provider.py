from typing import Protocol

import httpx

from src.communications.base import MessageProvider
from src.guests.dtos import CommunicationChannel, OutboundMessageDTO


class ResendEmailConfig(Protocol):
    resend_api_key: str
    resend_api_url: str
    emails_from: str


class ResendEmailProvider(MessageProvider):
    name = "resend"
    channel = CommunicationChannel.EMAIL

    def __init__(
        self,
        config: ResendEmailConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._config = config
        self._transport = transport

    def is_configured(self) -> bool:
        return bool(self._config.resend_api_key)

    async def send(self, message: OutboundMessageDTO) -> str | None:
        async with httpx.AsyncClient(transport=self._transport) as client:
            response = await client.post(
                self._config.resend_api_url,
                headers={
                    "Authorization": f"Bearer {self._config.resend_api_key}",
                    "Content-Type": "application/json",
                },
                json={
                    "from": self._config.emails_from,
                    "to": [message.recipient],
                    "subject": message.subject,
                    "html": message.html_content or message.content,
                    "text": message.content,
                },
            )
            response.raise_for_status()
            return response.json().get("id")
