"""Staff service - business logic for staff management."""

import logging
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from inbox.exceptions import NotFoundError
from inbox.models import Conversation, Message, SenderType, User, UserRole
from inbox.schemas.staff import StaffActivity, StaffCreate, StaffReply, StaffResponse
from inbox.services import auth as auth_service

logger = logging.getLogger(__name__)

RECENT_REPLIES_LIMIT = 20


async def get_staff(db: AsyncSession, staff_id: UUID) -> User:
    """Get a staff member by ID. Admins are not staff here."""
    result = await db.execute(
        select(User).where(User.id == staff_id, User.role == UserRole.STAFF.value)
    )
    staff = result.scalar_one_or_none()
    if staff is None:
        raise NotFoundError("Staff member not found.")
    return staff


async def list_staff(db: AsyncSession) -> list[User]:
    """List all staff members, newest first."""
    result = await db.execute(
        select(User)
        .where(User.role == UserRole.STAFF.value)
        .order_by(User.created_at.desc())
    )
    return list(result.scalars().all())


async def create_staff(db: AsyncSession, staff_data: StaffCreate) -> User:
    """Create a new staff member."""
    return await auth_service.register(
        db,
        name=staff_data.name,
        email=staff_data.email,
        password=staff_data.password,
        role=UserRole.STAFF,
    )


async def delete_staff(db: AsyncSession, staff_id: UUID) -> None:
    """Delete a staff member.

    Their conversations go back to the unassigned pool; messages they sent
    stay in place.
    """
    staff = await get_staff(db, staff_id)

    await db.execute(
        update(Conversation)
        .where(Conversation.assigned_to == staff.id)
        .values(assigned_to=None)
    )
    await db.execute(
        delete(User).where(User.id == staff.id, User.role == UserRole.STAFF.value)
    )
    await db.flush()

    logger.info(f"Staff member deleted: {staff_id}")


async def get_staff_activity(db: AsyncSession, staff_id: UUID) -> StaffActivity:
    """Workload report: assigned conversations and staff replies in them."""
    staff = await get_staff(db, staff_id)

    assigned_ids = select(Conversation.id).where(Conversation.assigned_to == staff.id)

    assigned_count = (
        await db.execute(
            select(func.count())
            .select_from(Conversation)
            .where(Conversation.assigned_to == staff.id)
        )
    ).scalar_one()

    staff_messages = (
        Message.sender_type == SenderType.STAFF.value,
        Message.conversation_id.in_(assigned_ids),
    )
    messages_sent = (
        await db.execute(select(func.count()).select_from(Message).where(*staff_messages))
    ).scalar_one()

    result = await db.execute(
        select(Message)
        .where(*staff_messages)
        .order_by(Message.created_at.desc())
        .limit(RECENT_REPLIES_LIMIT)
    )
    recent = result.scalars().all()

    return StaffActivity(
        staff=StaffResponse.model_validate(staff),
        assigned_conversations=assigned_count,
        messages_sent=messages_sent,
        recent_replies=[StaffReply.model_validate(m) for m in recent],
    )
