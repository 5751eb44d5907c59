"""Outbound dispatch - route a reply to the customer's platform."""

import logging

from inbox.config import Settings
from inbox.models import Customer, Platform
from inbox.services.instagram import InstagramClient
from inbox.services.whatsapp import WhatsAppClient

logger = logging.getLogger(__name__)


class PlatformDispatcher:
    """Holds one client per platform for the lifetime of the process."""

    def __init__(self, whatsapp: WhatsAppClient, instagram: InstagramClient):
        self.whatsapp = whatsapp
        self.instagram = instagram

    @classmethod
    def from_settings(cls, settings: Settings) -> "PlatformDispatcher":
        return cls(
            whatsapp=WhatsAppClient.from_settings(settings),
            instagram=InstagramClient.from_settings(settings),
        )

    async def send(self, platform: Platform | str, customer: Customer, text: str) -> None:
        """Deliver ``text`` to ``customer`` on ``platform``.

        WhatsApp is addressed by phone number (falling back to the wa_id),
        Instagram by the Instagram-scoped user id.

        Raises:
            DispatchError: if the platform rejected the message
        """
        platform = Platform(platform)
        if platform is Platform.WHATSAPP:
            await self.whatsapp.send_message(
                customer.phone_number or customer.platform_user_id, text
            )
        else:
            await self.instagram.send_message(customer.platform_user_id, text)

    async def close(self) -> None:
        await self.whatsapp.close()
        await self.instagram.close()
