"""Message service - storing messages and replying to customers."""

import logging
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from inbox.exceptions import DispatchError, InternalError, InvalidStateError, UpstreamError
from inbox.models import (
    Conversation,
    ConversationStatus,
    Message,
    Platform,
    SenderType,
    utcnow,
)
from inbox.services.permissions import get_accessible_conversation

if TYPE_CHECKING:
    from inbox.services.dispatch import PlatformDispatcher

logger = logging.getLogger(__name__)


async def store_message(
    db: AsyncSession,
    *,
    conversation_id: UUID,
    sender_type: SenderType | str,
    content: str,
    platform: Platform | str,
) -> Message:
    """Append a message to a conversation and touch the conversation."""
    message = Message(
        conversation_id=conversation_id,
        sender_type=SenderType(sender_type).value,
        content=content,
        platform=Platform(platform).value,
    )
    try:
        db.add(message)
        await db.flush()
        await db.execute(
            update(Conversation)
            .where(Conversation.id == conversation_id)
            .values(updated_at=utcnow())
        )
    except SQLAlchemyError as e:
        logger.error(f"Failed to store message in conversation {conversation_id}: {e}")
        raise InternalError("Failed to store message.") from e

    return message


async def get_messages(
    db: AsyncSession,
    conversation_id: UUID,
    *,
    role: str,
    user_id: UUID,
    page: int = 1,
    limit: int = 50,
) -> tuple[list[Message], int]:
    """Messages of an accessible conversation, oldest first.

    Returns (page of messages, total count).
    """
    await get_accessible_conversation(db, conversation_id, role, user_id)

    total = (
        await db.execute(
            select(func.count())
            .select_from(Message)
            .where(Message.conversation_id == conversation_id)
        )
    ).scalar_one()

    result = await db.execute(
        select(Message)
        .where(Message.conversation_id == conversation_id)
        .order_by(Message.created_at.asc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    return list(result.scalars().all()), total


async def reply_to_conversation(
    db: AsyncSession,
    dispatcher: "PlatformDispatcher",
    conversation_id: UUID,
    content: str,
    *,
    role: str,
    user_id: UUID,
) -> Message:
    """Send a staff reply to the customer and record it.

    The message is delivered first and stored only after the platform
    accepted it, so a failed delivery leaves no local record. A successful
    reply always leaves the conversation open.

    The read transaction is committed before the outbound call so that no
    pooled connection is held while the platform API responds.
    """
    conversation = await get_accessible_conversation(
        db, conversation_id, role, user_id, selectinload(Conversation.customer)
    )

    if conversation.status == ConversationStatus.RESOLVED.value:
        raise InvalidStateError("Cannot reply to a resolved conversation. Reopen it first.")

    platform = conversation.platform
    customer = conversation.customer
    await db.commit()

    try:
        await dispatcher.send(platform, customer, content)
    except DispatchError as e:
        logger.error(
            f"Failed to send reply in conversation {conversation.id} via {platform}: {e.detail}"
        )
        raise UpstreamError(
            f"Failed to send message via {platform}.", platform=platform, detail=e.detail
        ) from e

    message = await store_message(
        db,
        conversation_id=conversation.id,
        sender_type=SenderType.STAFF,
        content=content,
        platform=platform,
    )

    try:
        async with db.begin_nested():
            await db.execute(
                update(Conversation)
                .where(Conversation.id == conversation.id)
                .values(status=ConversationStatus.OPEN.value, updated_at=utcnow())
            )
    except IntegrityError:
        # Resolved during delivery while a newer thread was opened
        await db.refresh(conversation)
        logger.warning(
            f"Reply stored in conversation {conversation.id} but it was not reopened: "
            "customer already has another open conversation"
        )

    logger.info(f"Reply sent in conversation {conversation.id} via {platform} by user {user_id}")
    return message
