"""Pydantic schemas for conversations."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from inbox.models import ConversationStatus
from inbox.schemas.message import MessageResponse


class CustomerSummary(BaseModel):
    """Customer fields shown alongside a conversation."""

    id: UUID
    name: str | None
    platform: str
    platform_user_id: str
    phone_number: str | None

    model_config = ConfigDict(from_attributes=True)


class AssigneeSummary(BaseModel):
    """Assigned user fields shown alongside a conversation."""

    id: UUID
    name: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class ConversationResponse(BaseModel):
    """Schema for conversation responses."""

    id: UUID
    customer_id: UUID
    platform: str
    status: str
    assigned_to: UUID | None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ConversationSummary(ConversationResponse):
    """Inbox row: conversation plus customer and assignee."""

    customer: CustomerSummary
    assignee: AssigneeSummary | None = None


class ConversationDetail(ConversationSummary):
    """Conversation with its full message history."""

    messages: list[MessageResponse] = Field(default_factory=list)


class AssignRequest(BaseModel):
    """Assign a conversation to a staff member."""

    staff_id: UUID = Field(..., description="ID of a staff-role user")


class StatusUpdate(BaseModel):
    """Open or resolve a conversation."""

    status: ConversationStatus
