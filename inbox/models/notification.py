"""Notification model - per-user inbox entries (e.g. new assignments)."""

import uuid
from enum import Enum

from sqlalchemy import Boolean, ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from inbox.models.base import Base, CreatedAtMixin, UUIDMixin


class NotificationType(str, Enum):
    """Notification type enum."""

    ASSIGNMENT = "assignment"


class Notification(Base, UUIDMixin, CreatedAtMixin):
    """A notification for one user. Only ``is_read`` ever changes."""

    __tablename__ = "notifications"
    __table_args__ = (
        Index("ix_notification_user_id", "user_id"),
        Index("ix_notification_is_read", "is_read"),
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    conversation_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("conversations.id", ondelete="CASCADE"), nullable=False
    )
    type: Mapped[str] = mapped_column(
        String(50), nullable=False, default=NotificationType.ASSIGNMENT.value
    )
    message: Mapped[str] = mapped_column(Text, nullable=False)
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    def __repr__(self) -> str:
        """String representation."""
        return f"<Notification(id={self.id}, user_id={self.user_id}, type='{self.type}', is_read={self.is_read})>"
