"""User model - admins and staff members who work the inbox."""

from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from inbox.models.base import Base, CreatedAtMixin, UUIDMixin

if TYPE_CHECKING:
    from inbox.models.conversation import Conversation


class UserRole(str, Enum):
    """User role enum."""

    ADMIN = "admin"
    STAFF = "staff"


class User(Base, UUIDMixin, CreatedAtMixin):
    """A dashboard user. Admins see every conversation, staff only their own."""

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("role IN ('admin', 'staff')", name="ck_users_role"),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    role: Mapped[str] = mapped_column(
        String(20), nullable=False, default=UserRole.STAFF.value, index=True
    )

    # Relationships
    assigned_conversations: Mapped[list["Conversation"]] = relationship(
        "Conversation", back_populates="assignee", passive_deletes=True
    )

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value

    def __repr__(self) -> str:
        """String representation."""
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"
