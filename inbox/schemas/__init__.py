"""Pydantic schemas for the inbox API."""

from inbox.schemas.auth import (
    CurrentUser,
    LoginData,
    LoginRequest,
    RegisterRequest,
    UserResponse,
)
from inbox.schemas.common import ActionResponse, ApiResponse, PaginatedResponse, Pagination
from inbox.schemas.conversation import (
    AssigneeSummary,
    AssignRequest,
    ConversationDetail,
    ConversationResponse,
    ConversationSummary,
    CustomerSummary,
    StatusUpdate,
)
from inbox.schemas.message import MessageResponse, ReplyRequest
from inbox.schemas.notification import NotificationResponse
from inbox.schemas.staff import StaffActivity, StaffCreate, StaffReply, StaffResponse
from inbox.schemas.webhook import InboundInstagramMessage, InboundWhatsAppMessage

__all__ = [
    # Envelopes
    "ApiResponse",
    "ActionResponse",
    "PaginatedResponse",
    "Pagination",
    # Auth
    "LoginRequest",
    "RegisterRequest",
    "LoginData",
    "UserResponse",
    "CurrentUser",
    # Conversations
    "ConversationResponse",
    "ConversationSummary",
    "ConversationDetail",
    "CustomerSummary",
    "AssigneeSummary",
    "AssignRequest",
    "StatusUpdate",
    # Messages
    "MessageResponse",
    "ReplyRequest",
    # Staff
    "StaffCreate",
    "StaffResponse",
    "StaffReply",
    "StaffActivity",
    # Notifications
    "NotificationResponse",
    # Webhooks
    "InboundWhatsAppMessage",
    "InboundInstagramMessage",
]
