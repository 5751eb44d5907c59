"""Dependency injection for API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, HTTPException, Query, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from inbox.database import get_db, get_session_factory
from inbox.models import UserRole
from inbox.schemas.auth import CurrentUser
from inbox.services.dispatch import PlatformDispatcher
from inbox.utils.jwt import decode_access_token

__all__ = [
    "get_db",
    "get_session_factory",
    "AsyncSession",
    "get_current_user",
    "require_admin",
    "get_dispatcher",
    "PaginationParams",
    "MessagePaginationParams",
]

# Bearer token security scheme
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> CurrentUser:
    """Get the caller's identity from the JWT token.

    Raises 401 if not authenticated or token is invalid.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required. Provide a Bearer token.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        return CurrentUser(
            user_id=UUID(payload.sub), email=payload.email, role=UserRole(payload.role)
        )
    except ValueError:
        # Signed by us but not an identity we issue
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token.",
            headers={"WWW-Authenticate": "Bearer"},
        )


async def require_admin(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    """Only admins pass."""
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Insufficient permissions.",
        )
    return current_user


def get_dispatcher(request: Request) -> PlatformDispatcher:
    """The platform dispatcher built at startup."""
    return request.app.state.dispatcher


# Pagination parameters
class PaginationParams:
    """Page-number pagination query parameters."""

    def __init__(
        self,
        page: Annotated[int, Query(ge=1, description="Page number, starting at 1")] = 1,
        limit: Annotated[
            int, Query(ge=1, le=100, description="Maximum number of records to return")
        ] = 20,
    ):
        self.page = page
        self.limit = limit


class MessagePaginationParams(PaginationParams):
    """Message history pages default to 50 entries."""

    def __init__(
        self,
        page: Annotated[int, Query(ge=1, description="Page number, starting at 1")] = 1,
        limit: Annotated[
            int, Query(ge=1, le=100, description="Maximum number of records to return")
        ] = 50,
    ):
        super().__init__(page=page, limit=limit)

