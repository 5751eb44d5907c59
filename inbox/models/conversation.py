"""Conversation model - a support thread with one customer on one platform."""

import uuid
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, ForeignKey, Index, String, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from inbox.models.base import Base, TimestampMixin, UUIDMixin
from inbox.models.customer import PLATFORM_CHECK

if TYPE_CHECKING:
    from inbox.models.customer import Customer
    from inbox.models.message import Message
    from inbox.models.user import User


class ConversationStatus(str, Enum):
    """Conversation status enum."""

    OPEN = "open"
    RESOLVED = "resolved"


OPEN_CONVERSATION_INDEX = "uq_conversation_open_per_customer"


class Conversation(Base, UUIDMixin, TimestampMixin):
    """A conversation thread.

    A customer has at most one open conversation per platform; the partial
    unique index below enforces it in the database.
    """

    __tablename__ = "conversations"
    __table_args__ = (
        CheckConstraint(PLATFORM_CHECK, name="ck_conversations_platform"),
        CheckConstraint("status IN ('open', 'resolved')", name="ck_conversations_status"),
        Index("ix_conversation_customer_id", "customer_id"),
        Index("ix_conversation_status", "status"),
        Index("ix_conversation_assigned_to", "assigned_to"),
        Index("ix_conversation_platform", "platform"),
        Index("ix_conversation_updated_at", "updated_at"),
        Index(
            OPEN_CONVERSATION_INDEX,
            "customer_id",
            "platform",
            unique=True,
            postgresql_where=text("status = 'open'"),
            sqlite_where=text("status = 'open'"),
        ),
    )

    customer_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("customers.id", ondelete="CASCADE"), nullable=False
    )
    platform: Mapped[str] = mapped_column(String(20), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ConversationStatus.OPEN.value
    )
    assigned_to: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    # Relationships
    customer: Mapped["Customer"] = relationship("Customer", back_populates="conversations")
    assignee: Mapped["User | None"] = relationship(
        "User", back_populates="assigned_conversations"
    )
    messages: Mapped[list["Message"]] = relationship(
        "Message",
        back_populates="conversation",
        order_by="Message.created_at",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<Conversation(id={self.id}, platform='{self.platform}', "
            f"status='{self.status}', assigned_to={self.assigned_to})>"
        )
