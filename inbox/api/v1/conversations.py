"""Conversation API endpoints - inbox listing, assignment, status and replies."""

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from inbox.api.deps import (
    MessagePaginationParams,
    PaginationParams,
    get_current_user,
    get_db,
    get_dispatcher,
    require_admin,
)
from inbox.models import ConversationStatus, Platform
from inbox.schemas.auth import CurrentUser
from inbox.schemas.common import ApiResponse, PaginatedResponse, Pagination
from inbox.schemas.conversation import (
    AssignRequest,
    ConversationDetail,
    ConversationResponse,
    ConversationSummary,
    StatusUpdate,
)
from inbox.schemas.message import MessageResponse, ReplyRequest
from inbox.services import conversation as conversation_service
from inbox.services import message as message_service
from inbox.services.dispatch import PlatformDispatcher

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/conversations", tags=["conversations"])


@router.get(
    "",
    response_model=PaginatedResponse[ConversationSummary],
    summary="List conversations",
)
async def list_conversations(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    pagination: Annotated[PaginationParams, Depends()],
    platform: Annotated[Platform | None, Query(description="Filter by platform")] = None,
    status_filter: Annotated[
        ConversationStatus | None, Query(alias="status", description="Filter by status")
    ] = None,
) -> PaginatedResponse[ConversationSummary]:
    """List conversations, most recently active first.

    Admins see every conversation; staff only those assigned to them.
    """
    conversations, total = await conversation_service.list_conversations(
        db,
        role=current_user.role,
        user_id=current_user.user_id,
        platform=platform,
        status=status_filter,
        page=pagination.page,
        limit=pagination.limit,
    )
    return PaginatedResponse(
        data=[ConversationSummary.model_validate(c) for c in conversations],
        pagination=Pagination.build(pagination.page, pagination.limit, total),
    )


@router.get(
    "/{conversation_id}",
    response_model=ApiResponse[ConversationDetail],
    summary="Get a conversation",
)
async def get_conversation(
    conversation_id: UUID,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse[ConversationDetail]:
    """Get a conversation with its customer and full message history."""
    conversation = await conversation_service.get_conversation(
        db, conversation_id, role=current_user.role, user_id=current_user.user_id
    )
    return ApiResponse(data=ConversationDetail.model_validate(conversation))


@router.post(
    "/{conversation_id}/assign",
    response_model=ApiResponse[ConversationSummary],
    summary="Assign a conversation to staff",
)
async def assign_conversation(
    conversation_id: UUID,
    request: AssignRequest,
    admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse[ConversationSummary]:
    """Assign a conversation to a staff member and notify them (admin only)."""
    conversation = await conversation_service.assign_conversation(
        db, conversation_id, request.staff_id
    )
    await db.commit()
    return ApiResponse(
        data=ConversationSummary.model_validate(conversation),
        message="Conversation assigned successfully.",
    )


@router.patch(
    "/{conversation_id}/status",
    response_model=ApiResponse[ConversationResponse],
    summary="Open or resolve a conversation",
)
async def update_status(
    conversation_id: UUID,
    request: StatusUpdate,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse[ConversationResponse]:
    """Change the status of a conversation the caller can access."""
    conversation = await conversation_service.update_status(
        db,
        conversation_id,
        request.status,
        role=current_user.role,
        user_id=current_user.user_id,
    )
    await db.commit()
    return ApiResponse(
        data=ConversationResponse.model_validate(conversation),
        message="Status updated.",
    )


@router.get(
    "/{conversation_id}/messages",
    response_model=PaginatedResponse[MessageResponse],
    summary="List messages of a conversation",
)
async def get_messages(
    conversation_id: UUID,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    pagination: Annotated[MessagePaginationParams, Depends()],
) -> PaginatedResponse[MessageResponse]:
    """Messages in chronological order."""
    messages, total = await message_service.get_messages(
        db,
        conversation_id,
        role=current_user.role,
        user_id=current_user.user_id,
        page=pagination.page,
        limit=pagination.limit,
    )
    return PaginatedResponse(
        data=[MessageResponse.model_validate(m) for m in messages],
        pagination=Pagination.build(pagination.page, pagination.limit, total),
    )


@router.post(
    "/{conversation_id}/reply",
    response_model=ApiResponse[MessageResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Reply to the customer",
)
async def reply(
    conversation_id: UUID,
    request: ReplyRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    dispatcher: Annotated[PlatformDispatcher, Depends(get_dispatcher)],
) -> ApiResponse[MessageResponse]:
    """Send a reply through the customer's platform and record it.

    Nothing is stored when the platform rejects the message.
    """
    message = await message_service.reply_to_conversation(
        db,
        dispatcher,
        conversation_id,
        request.content,
        role=current_user.role,
        user_id=current_user.user_id,
    )
    await db.commit()
    return ApiResponse(
        data=MessageResponse.model_validate(message),
        message="Reply sent successfully.",
    )
