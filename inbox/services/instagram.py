"""Instagram Graph API - sending replies and parsing inbound webhooks."""

import logging
import time
import uuid
from typing import Any

from inbox.config import Settings, get_settings
from inbox.models import Platform
from inbox.schemas.webhook import InboundInstagramMessage
from inbox.services.platform_client import PlatformClient

logger = logging.getLogger(__name__)


class InstagramClient(PlatformClient):
    """Client for Instagram Direct messaging through the Graph API."""

    platform = Platform.INSTAGRAM.value

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "InstagramClient":
        """Build a client from configuration; mock mode when no token is set."""
        settings = settings or get_settings()
        mock_mode = not settings.instagram_access_token
        if mock_mode:
            logger.info("🔧 Instagram client in MOCK mode (no INSTAGRAM_ACCESS_TOKEN)")
        return cls(
            access_token=settings.instagram_access_token,
            messages_url=settings.instagram_messages_url,
            mock_mode=mock_mode,
            timeout=settings.outbound_timeout_seconds,
        )

    async def send_message(self, recipient_id: str, text: str) -> dict[str, Any]:
        """Send a text message to an Instagram-scoped user id."""
        payload = {
            "recipient": {"id": recipient_id},
            "message": {"text": text},
        }

        if self.mock_mode:
            logger.info(f"📸 [MOCK] Sending Instagram message to {recipient_id}: {text[:50]}")
            return {"recipient_id": recipient_id, "message_id": f"mock_mid_{uuid.uuid4().hex}"}

        result = await self._post(payload)
        logger.info(f"✅ Instagram message sent to {recipient_id} (id: {result.get('message_id')})")
        return result


def _event_timestamp(value: Any) -> int:
    """Epoch milliseconds of an event, now when absent or unreadable."""
    if value:
        try:
            return int(value)
        except (TypeError, ValueError):
            logger.warning(f"Unreadable Instagram event timestamp {value!r}, using now")
    return int(time.time() * 1000)


def parse_webhook_payload(body: Any) -> list[InboundInstagramMessage]:
    """Extract inbound text messages from an Instagram webhook body.

    Reads both ``messaging`` and ``standby`` events of every entry. Echoes
    of messages the business sent itself and events without text are
    skipped. Never raises: a payload of unexpected shape yields an empty
    list.
    """
    messages: list[InboundInstagramMessage] = []

    try:
        for entry in body.get("entry") or []:
            events = [*(entry.get("messaging") or []), *(entry.get("standby") or [])]
            for event in events:
                message = event.get("message") or {}
                if message.get("is_echo"):
                    continue
                if not message.get("text"):
                    continue

                sender_id = (event.get("sender") or {}).get("id")
                if not sender_id:
                    logger.warning("Skipping Instagram event without sender id")
                    continue

                messages.append(
                    InboundInstagramMessage(
                        sender_id=str(sender_id),
                        text=message["text"],
                        message_id=str(message.get("mid") or ""),
                        timestamp=_event_timestamp(event.get("timestamp")),
                    )
                )
    except Exception as e:
        logger.error(f"Failed to parse Instagram webhook: {e}", exc_info=True)
        return []

    return messages
