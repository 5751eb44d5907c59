"""WhatsApp Cloud API - sending replies and parsing inbound webhooks."""

import logging
import uuid
from typing import Any

from inbox.config import Settings, get_settings
from inbox.models import Platform
from inbox.schemas.webhook import InboundWhatsAppMessage
from inbox.services.platform_client import PlatformClient

logger = logging.getLogger(__name__)

UNKNOWN_CONTACT_NAME = "Unknown"


class WhatsAppClient(PlatformClient):
    """Client for the WhatsApp Cloud API."""

    platform = Platform.WHATSAPP.value

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "WhatsAppClient":
        """Build a client from configuration; mock mode when no token is set."""
        settings = settings or get_settings()
        mock_mode = not settings.whatsapp_access_token
        if mock_mode:
            logger.info("🔧 WhatsApp client in MOCK mode (no WHATSAPP_ACCESS_TOKEN)")
        return cls(
            access_token=settings.whatsapp_access_token,
            messages_url=settings.whatsapp_messages_url,
            mock_mode=mock_mode,
            timeout=settings.outbound_timeout_seconds,
        )

    async def send_message(self, recipient_phone: str, text: str) -> dict[str, Any]:
        """Send a text message to a phone number.

        Args:
            recipient_phone: Recipient's phone number (wa_id)
            text: Message body

        Returns:
            Response from the Cloud API (or mock response)
        """
        payload = {
            "messaging_product": "whatsapp",
            "recipient_type": "individual",
            "to": recipient_phone,
            "type": "text",
            "text": {"body": text},
        }

        if self.mock_mode:
            logger.info(f"📱 [MOCK] Sending WhatsApp message to {recipient_phone}: {text[:50]}")
            return {"messages": [{"id": f"mock_wamid_{uuid.uuid4().hex}"}]}

        result = await self._post(payload)
        message_ids = [m.get("id") for m in result.get("messages", []) if isinstance(m, dict)]
        logger.info(f"✅ WhatsApp message sent to {recipient_phone} (id: {message_ids[:1]})")
        return result


def parse_webhook_payload(body: Any) -> list[InboundWhatsAppMessage]:
    """Extract inbound text messages from a WhatsApp webhook body.

    Walks entry -> changes -> value, keeps only WhatsApp text messages and
    resolves the sender's profile name from the contacts block. Never
    raises: a payload of unexpected shape yields an empty list.
    """
    messages: list[InboundWhatsAppMessage] = []

    try:
        for entry in body.get("entry") or []:
            for change in entry.get("changes") or []:
                value = change.get("value")
                if not value or value.get("messaging_product") != "whatsapp":
                    continue

                contacts = value.get("contacts") or []
                for msg in value.get("messages") or []:
                    if msg.get("type") != "text":
                        continue  # Only text messages for now

                    contact = next(
                        (c for c in contacts if c.get("wa_id") == msg.get("from")), None
                    )
                    name = ((contact or {}).get("profile") or {}).get("name")
                    messages.append(
                        InboundWhatsAppMessage(
                            from_=str(msg["from"]),
                            name=name or UNKNOWN_CONTACT_NAME,
                            text=(msg.get("text") or {}).get("body") or "",
                            message_id=str(msg.get("id") or ""),
                            timestamp=str(msg.get("timestamp") or ""),
                        )
                    )
    except Exception as e:
        logger.error(f"Failed to parse WhatsApp webhook: {e}", exc_info=True)
        return []

    return messages
