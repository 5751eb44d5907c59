"""Inbound processing - turn normalized webhook events into stored messages.

Runs after the webhook has been acknowledged, so nothing here may raise
back to the caller. Each event gets its own session and commit: one bad
event never loses the ones before or after it.
"""

import logging
from collections.abc import Sequence

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from inbox.models import Platform, SenderType
from inbox.schemas.webhook import InboundInstagramMessage, InboundWhatsAppMessage
from inbox.services.conversation import find_or_create_conversation
from inbox.services.customer import find_or_create_customer
from inbox.services.message import store_message
from inbox.services.whatsapp import UNKNOWN_CONTACT_NAME

logger = logging.getLogger(__name__)


async def ingest_message(
    db: AsyncSession,
    *,
    platform: Platform,
    platform_user_id: str,
    text: str,
    name: str | None = None,
    phone_number: str | None = None,
) -> None:
    """Resolve customer and conversation, then append the customer's message."""
    customer = await find_or_create_customer(
        db, platform, platform_user_id, name=name, phone_number=phone_number
    )
    conversation = await find_or_create_conversation(db, customer.id, platform)
    await store_message(
        db,
        conversation_id=conversation.id,
        sender_type=SenderType.CUSTOMER,
        content=text,
        platform=platform,
    )


async def process_whatsapp_messages(
    session_factory: async_sessionmaker[AsyncSession],
    events: Sequence[InboundWhatsAppMessage],
) -> None:
    """Store WhatsApp events in order. Failures are logged, never raised."""
    for event in events:
        try:
            async with session_factory() as db:
                await ingest_message(
                    db,
                    platform=Platform.WHATSAPP,
                    platform_user_id=event.from_,
                    text=event.text,
                    # The placeholder name must not overwrite a real one
                    name=None if event.name == UNKNOWN_CONTACT_NAME else event.name,
                    phone_number=event.from_,
                )
                await db.commit()
            logger.info(f"📥 WhatsApp message stored from {event.from_} ({event.message_id})")
        except Exception as e:
            logger.error(
                f"Failed to process WhatsApp message {event.message_id} from {event.from_}: {e}",
                exc_info=True,
            )


async def process_instagram_messages(
    session_factory: async_sessionmaker[AsyncSession],
    events: Sequence[InboundInstagramMessage],
) -> None:
    """Store Instagram events in order. Failures are logged, never raised."""
    for event in events:
        try:
            async with session_factory() as db:
                await ingest_message(
                    db,
                    platform=Platform.INSTAGRAM,
                    platform_user_id=event.sender_id,
                    text=event.text,
                )
                await db.commit()
            logger.info(f"📥 Instagram message stored from {event.sender_id} ({event.message_id})")
        except Exception as e:
            logger.error(
                f"Failed to process Instagram message {event.message_id} from {event.sender_id}: {e}",
                exc_info=True,
            )
