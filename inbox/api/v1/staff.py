"""Staff API endpoints (admin only)."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from inbox.api.deps import get_db, require_admin
from inbox.schemas.auth import CurrentUser
from inbox.schemas.common import ActionResponse, ApiResponse
from inbox.schemas.staff import StaffActivity, StaffCreate, StaffResponse
from inbox.services import staff as staff_service

router = APIRouter(prefix="/staff", tags=["staff"])


@router.get(
    "",
    response_model=ApiResponse[list[StaffResponse]],
    summary="List staff members",
)
async def list_staff(
    admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse[list[StaffResponse]]:
    """List all staff members, newest first."""
    staff_list = await staff_service.list_staff(db)
    return ApiResponse(data=[StaffResponse.model_validate(s) for s in staff_list])


@router.post(
    "",
    response_model=ApiResponse[StaffResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create a staff member",
)
async def create_staff(
    staff_data: StaffCreate,
    admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse[StaffResponse]:
    """Create a new staff member."""
    staff = await staff_service.create_staff(db, staff_data)
    await db.commit()
    return ApiResponse(data=StaffResponse.model_validate(staff), message="Staff member created.")


@router.get(
    "/{staff_id}",
    response_model=ApiResponse[StaffResponse],
    summary="Get a staff member",
)
async def get_staff(
    staff_id: UUID,
    admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse[StaffResponse]:
    """Get a staff member by ID."""
    staff = await staff_service.get_staff(db, staff_id)
    return ApiResponse(data=StaffResponse.model_validate(staff))


@router.delete(
    "/{staff_id}",
    response_model=ActionResponse,
    summary="Delete a staff member",
)
async def delete_staff(
    staff_id: UUID,
    admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ActionResponse:
    """Delete a staff member. Their conversations become unassigned."""
    await staff_service.delete_staff(db, staff_id)
    await db.commit()
    return ActionResponse(message="Staff member deleted.")


@router.get(
    "/{staff_id}/activity",
    response_model=ApiResponse[StaffActivity],
    summary="Get staff activity",
)
async def get_staff_activity(
    staff_id: UUID,
    admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse[StaffActivity]:
    """Assigned conversations, replies sent and the latest replies."""
    activity = await staff_service.get_staff_activity(db, staff_id)
    return ApiResponse(data=activity)
