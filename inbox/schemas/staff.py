"""Pydantic schemas for staff management."""

from datetime import datetime
from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StringConstraints

from inbox.schemas.auth import UserResponse


class StaffCreate(BaseModel):
    """Schema for creating a new staff member (role is always staff)."""

    name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
    email: EmailStr
    password: str = Field(..., min_length=6)


# Staff members are plain users on the wire
StaffResponse = UserResponse


class StaffReply(BaseModel):
    """A message a staff member sent, for the activity report."""

    id: UUID
    conversation_id: UUID
    content: str
    platform: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class StaffActivity(BaseModel):
    """Workload and recent replies of one staff member."""

    staff: StaffResponse
    assigned_conversations: int = Field(..., alias="assignedConversations")
    messages_sent: int = Field(..., alias="messagesSent")
    recent_replies: list[StaffReply] = Field(
        default_factory=list, alias="recentReplies"
    )

    model_config = ConfigDict(populate_by_name=True)
