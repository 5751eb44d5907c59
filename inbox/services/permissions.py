"""Role-based conversation scoping.

Admins see and act on every conversation. Staff see and act only on
conversations assigned to them; anything else looks exactly like a missing
conversation so the caller cannot discover which ids exist.
"""

from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.interfaces import ORMOption

from inbox.exceptions import NotFoundError
from inbox.models import Conversation, UserRole

ACCESS_DENIED_MESSAGE = "Conversation not found or access denied."


def is_admin(role: str) -> bool:
    return role == UserRole.ADMIN.value


def scope_conversations(query: Select, role: str, user_id: UUID) -> Select:
    """Restrict a Conversation query to what the caller may see."""
    if is_admin(role):
        return query
    return query.where(Conversation.assigned_to == user_id)


async def get_accessible_conversation(
    db: AsyncSession,
    conversation_id: UUID,
    role: str,
    user_id: UUID,
    *options: ORMOption,
) -> Conversation:
    """Load a conversation the caller may access or raise NotFoundError."""
    query = select(Conversation).where(Conversation.id == conversation_id)
    query = scope_conversations(query, role, user_id)
    if options:
        query = query.options(*options)

    result = await db.execute(query)
    conversation = result.scalar_one_or_none()
    if conversation is None:
        raise NotFoundError(ACCESS_DENIED_MESSAGE)
    return conversation
