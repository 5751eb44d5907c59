"""Customer model - a person writing in from one messaging platform."""

from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from inbox.models.base import Base, CreatedAtMixin, UUIDMixin

if TYPE_CHECKING:
    from inbox.models.conversation import Conversation


class Platform(str, Enum):
    """Messaging platform enum."""

    WHATSAPP = "whatsapp"
    INSTAGRAM = "instagram"


PLATFORM_CHECK = "platform IN ('whatsapp', 'instagram')"


class Customer(Base, UUIDMixin, CreatedAtMixin):
    """A platform identity. Created on the first inbound message.

    (platform, platform_user_id) is the natural key: a WhatsApp wa_id or an
    Instagram-scoped user id. The same human on two platforms is two
    customers.
    """

    __tablename__ = "customers"
    __table_args__ = (
        UniqueConstraint("platform", "platform_user_id", name="uq_customer_platform_user"),
        CheckConstraint(PLATFORM_CHECK, name="ck_customers_platform"),
        Index("ix_customer_platform", "platform"),
    )

    platform: Mapped[str] = mapped_column(String(20), nullable=False)
    platform_user_id: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone_number: Mapped[str | None] = mapped_column(String(50), nullable=True)

    # Relationships
    conversations: Mapped[list["Conversation"]] = relationship(
        "Conversation", back_populates="customer", passive_deletes=True
    )

    def __repr__(self) -> str:
        """String representation."""
        name_display = self.name if self.name else "Unknown"
        return (
            f"<Customer(id={self.id}, platform='{self.platform}', "
            f"platform_user_id='{self.platform_user_id}', name='{name_display}')>"
        )
