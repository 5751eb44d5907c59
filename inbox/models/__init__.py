"""SQLAlchemy models for the unified inbox."""

from inbox.models.base import Base, CreatedAtMixin, TimestampMixin, UUIDMixin, utcnow
from inbox.models.conversation import Conversation, ConversationStatus
from inbox.models.customer import Customer, Platform
from inbox.models.message import Message, SenderType
from inbox.models.notification import Notification, NotificationType
from inbox.models.user import User, UserRole

__all__ = [
    # Base
    "Base",
    "CreatedAtMixin",
    "TimestampMixin",
    "UUIDMixin",
    "utcnow",
    # Models
    "User",
    "Customer",
    "Conversation",
    "Message",
    "Notification",
    # Enums
    "UserRole",
    "Platform",
    "ConversationStatus",
    "SenderType",
    "NotificationType",
]
