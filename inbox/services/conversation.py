"""Conversation service - threads, inbox listing, assignment and status."""

import logging
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from inbox.exceptions import ConflictError, InternalError, NotFoundError
from inbox.models import (
    Conversation,
    ConversationStatus,
    Platform,
    User,
    UserRole,
    utcnow,
)
from inbox.services import notification as notification_service
from inbox.services.permissions import get_accessible_conversation, scope_conversations

logger = logging.getLogger(__name__)

INBOX_OPTIONS = (selectinload(Conversation.customer), selectinload(Conversation.assignee))


async def get_open_conversation(
    db: AsyncSession, customer_id: UUID, platform: str
) -> Conversation | None:
    """Most recent open conversation for a customer on a platform."""
    result = await db.execute(
        select(Conversation)
        .where(
            Conversation.customer_id == customer_id,
            Conversation.platform == platform,
            Conversation.status == ConversationStatus.OPEN.value,
        )
        .order_by(Conversation.created_at.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def find_or_create_conversation(
    db: AsyncSession, customer_id: UUID, platform: Platform | str
) -> Conversation:
    """Return the customer's open conversation, opening one if needed.

    Resolved conversations are never reused here: a new inbound message
    after resolution starts a new thread. The insert runs in a savepoint so
    that losing a race against the open-conversation unique index falls back
    to the row the other writer created.
    """
    platform = Platform(platform).value

    existing = await get_open_conversation(db, customer_id, platform)
    if existing:
        existing.updated_at = utcnow()
        await db.flush()
        return existing

    conversation = Conversation(
        customer_id=customer_id,
        platform=platform,
        status=ConversationStatus.OPEN.value,
        assigned_to=None,
    )
    try:
        async with db.begin_nested():
            db.add(conversation)
    except IntegrityError:
        existing = await get_open_conversation(db, customer_id, platform)
        if existing is None:
            logger.error(f"Failed to create conversation for customer {customer_id}")
            raise InternalError("Failed to create conversation.")
        return existing

    logger.info(f"New conversation created: {conversation.id} ({platform})")
    return conversation


async def list_conversations(
    db: AsyncSession,
    *,
    role: str,
    user_id: UUID,
    platform: Platform | str | None = None,
    status: ConversationStatus | str | None = None,
    page: int = 1,
    limit: int = 20,
) -> tuple[list[Conversation], int]:
    """List conversations visible to the caller, most recently active first.

    Returns (page of conversations, total matching count).
    """
    filters = []
    if platform:
        filters.append(Conversation.platform == Platform(platform).value)
    if status:
        filters.append(Conversation.status == ConversationStatus(status).value)

    count_query = scope_conversations(
        select(func.count()).select_from(Conversation).where(*filters), role, user_id
    )
    total = (await db.execute(count_query)).scalar_one()

    query = scope_conversations(select(Conversation).where(*filters), role, user_id)
    query = (
        query.options(*INBOX_OPTIONS)
        .order_by(Conversation.updated_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    result = await db.execute(query)
    return list(result.scalars().all()), total


async def get_conversation(
    db: AsyncSession, conversation_id: UUID, *, role: str, user_id: UUID
) -> Conversation:
    """Get a conversation with customer, assignee and ordered messages."""
    return await get_accessible_conversation(
        db,
        conversation_id,
        role,
        user_id,
        *INBOX_OPTIONS,
        selectinload(Conversation.messages),
    )


async def assign_conversation(
    db: AsyncSession, conversation_id: UUID, staff_id: UUID
) -> Conversation:
    """Assign a conversation to a staff member and notify them."""
    result = await db.execute(
        select(User).where(User.id == staff_id, User.role == UserRole.STAFF.value)
    )
    staff = result.scalar_one_or_none()
    if staff is None:
        raise NotFoundError("Staff member not found.")

    result = await db.execute(
        select(Conversation)
        .where(Conversation.id == conversation_id)
        .options(*INBOX_OPTIONS)
    )
    conversation = result.scalar_one_or_none()
    if conversation is None:
        raise NotFoundError("Conversation not found.")

    conversation.assigned_to = staff.id
    conversation.assignee = staff
    conversation.updated_at = utcnow()
    await db.flush()

    customer = conversation.customer
    await notification_service.create_notification(
        db,
        user_id=staff.id,
        conversation_id=conversation.id,
        message=(
            f"You have been assigned a new {customer.platform or 'unknown'} conversation "
            f"with {customer.name or 'Unknown Customer'}."
        ),
    )

    logger.info(f"Conversation {conversation.id} assigned to staff {staff.id}")
    return conversation


async def update_status(
    db: AsyncSession,
    conversation_id: UUID,
    status: ConversationStatus | str,
    *,
    role: str,
    user_id: UUID,
) -> Conversation:
    """Open or resolve a conversation the caller has access to.

    Any status may be set from any status. Reopening fails with a conflict
    when the customer already has another open thread on the platform.
    """
    conversation = await get_accessible_conversation(db, conversation_id, role, user_id)

    try:
        async with db.begin_nested():
            conversation.status = ConversationStatus(status).value
            conversation.updated_at = utcnow()
    except IntegrityError as e:
        await db.refresh(conversation)
        raise ConflictError(
            "Customer already has an open conversation on this platform."
        ) from e

    logger.info(f"Conversation {conversation.id} status updated to {conversation.status}")
    return conversation
