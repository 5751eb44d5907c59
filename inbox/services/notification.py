"""Notification service - per-user notification inbox."""

import logging
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from inbox.models import Notification, NotificationType

logger = logging.getLogger(__name__)

MAX_NOTIFICATIONS = 50


async def create_notification(
    db: AsyncSession,
    *,
    user_id: UUID,
    conversation_id: UUID,
    message: str,
    type: NotificationType | str = NotificationType.ASSIGNMENT,
) -> Notification | None:
    """Create a notification for a user.

    Notifications are a side effect: a failure is logged and reported as
    None, never raised, so the operation that triggered it still succeeds.
    """
    notification = Notification(
        user_id=user_id,
        conversation_id=conversation_id,
        type=NotificationType(type).value,
        message=message,
        is_read=False,
    )
    try:
        async with db.begin_nested():
            db.add(notification)
    except SQLAlchemyError as e:
        logger.error(f"Failed to create notification for user {user_id}: {e}", exc_info=True)
        return None

    logger.info(f"Notification created for user {user_id} ({notification.type})")
    return notification


async def list_notifications(
    db: AsyncSession, user_id: UUID, unread_only: bool = False
) -> list[Notification]:
    """Latest notifications for a user, newest first."""
    query = select(Notification).where(Notification.user_id == user_id)
    if unread_only:
        query = query.where(Notification.is_read.is_(False))
    query = query.order_by(Notification.created_at.desc()).limit(MAX_NOTIFICATIONS)

    result = await db.execute(query)
    return list(result.scalars().all())


async def mark_as_read(db: AsyncSession, notification_id: UUID, user_id: UUID) -> None:
    """Mark one of the user's notifications as read. Other users' ids are ignored."""
    await db.execute(
        update(Notification)
        .where(Notification.id == notification_id, Notification.user_id == user_id)
        .values(is_read=True)
    )
    await db.flush()


async def mark_all_as_read(db: AsyncSession, user_id: UUID) -> None:
    """Mark every unread notification of the user as read."""
    await db.execute(
        update(Notification)
        .where(Notification.user_id == user_id, Notification.is_read.is_(False))
        .values(is_read=True)
    )
    await db.flush()
