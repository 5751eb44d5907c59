"""Message model - a single text message in a conversation."""

import uuid
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from inbox.models.base import Base, CreatedAtMixin, UUIDMixin
from inbox.models.customer import PLATFORM_CHECK

if TYPE_CHECKING:
    from inbox.models.conversation import Conversation


class SenderType(str, Enum):
    """Message sender type enum."""

    CUSTOMER = "customer"
    STAFF = "staff"


class Message(Base, UUIDMixin, CreatedAtMixin):
    """Individual messages in a conversation. Immutable once stored."""

    __tablename__ = "messages"
    __table_args__ = (
        CheckConstraint("sender_type IN ('customer', 'staff')", name="ck_messages_sender_type"),
        CheckConstraint(PLATFORM_CHECK, name="ck_messages_platform"),
        Index("ix_message_conversation_id", "conversation_id"),
        Index("ix_message_created_at", "created_at"),
    )

    conversation_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("conversations.id", ondelete="CASCADE"), nullable=False
    )
    sender_type: Mapped[str] = mapped_column(String(20), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    platform: Mapped[str] = mapped_column(String(20), nullable=False)

    # Relationships
    conversation: Mapped["Conversation"] = relationship("Conversation", back_populates="messages")

    def __repr__(self) -> str:
        """String representation."""
        content_preview = self.content[:50] + "..." if len(self.content) > 50 else self.content
        return f"<Message(id={self.id}, sender_type='{self.sender_type}', content='{content_preview}')>"
