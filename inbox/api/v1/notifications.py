"""Notification API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from inbox.api.deps import get_current_user, get_db
from inbox.schemas.auth import CurrentUser
from inbox.schemas.common import ActionResponse, ApiResponse
from inbox.schemas.notification import NotificationResponse
from inbox.services import notification as notification_service

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get(
    "",
    response_model=ApiResponse[list[NotificationResponse]],
    summary="List notifications",
)
async def list_notifications(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    unread: Annotated[bool, Query(description="Only unread notifications")] = False,
) -> ApiResponse[list[NotificationResponse]]:
    """The caller's latest notifications, newest first."""
    notifications = await notification_service.list_notifications(
        db, current_user.user_id, unread_only=unread
    )
    return ApiResponse(data=[NotificationResponse.model_validate(n) for n in notifications])


@router.patch(
    "/read-all",
    response_model=ActionResponse,
    summary="Mark all notifications as read",
)
async def mark_all_as_read(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ActionResponse:
    await notification_service.mark_all_as_read(db, current_user.user_id)
    await db.commit()
    return ActionResponse(message="All notifications marked as read.")


@router.patch(
    "/{notification_id}/read",
    response_model=ActionResponse,
    summary="Mark a notification as read",
)
async def mark_as_read(
    notification_id: UUID,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ActionResponse:
    await notification_service.mark_as_read(db, notification_id, current_user.user_id)
    await db.commit()
    return ActionResponse(message="Notification marked as read.")
