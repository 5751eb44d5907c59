"""Pydantic schemas for messages."""

from datetime import datetime
from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, ConfigDict, StringConstraints


class MessageResponse(BaseModel):
    """Schema for message responses."""

    id: UUID
    conversation_id: UUID
    sender_type: str
    content: str
    platform: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ReplyRequest(BaseModel):
    """Staff reply to a conversation."""

    content: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
