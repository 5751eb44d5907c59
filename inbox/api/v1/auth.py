"""Authentication API endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from inbox.api.deps import get_current_user, get_db
from inbox.schemas.auth import (
    CurrentUser,
    LoginData,
    LoginRequest,
    RegisterRequest,
    UserResponse,
)
from inbox.schemas.common import ApiResponse
from inbox.services import auth as auth_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/login",
    response_model=ApiResponse[LoginData],
    summary="Log in with email and password",
)
async def login(
    request: LoginRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse[LoginData]:
    """Exchange credentials for a bearer token."""
    token, user = await auth_service.login(db, request.email, request.password)
    return ApiResponse(
        data=LoginData(token=token, user=UserResponse.model_validate(user)),
        message="Login successful.",
    )


@router.post(
    "/register",
    response_model=ApiResponse[UserResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Register a user",
)
async def register(
    request: RegisterRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse[UserResponse]:
    """Create a dashboard user. Role defaults to staff."""
    user = await auth_service.register(
        db,
        name=request.name,
        email=request.email,
        password=request.password,
        role=request.role,
    )
    await db.commit()
    return ApiResponse(
        data=UserResponse.model_validate(user),
        message="User registered successfully.",
    )


@router.get(
    "/me",
    response_model=ApiResponse[CurrentUser],
    summary="Get current user",
)
async def me(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> ApiResponse[CurrentUser]:
    """Identity carried by the caller's token."""
    return ApiResponse(data=current_user)
