"""JWT utilities for authentication."""

from datetime import datetime, timedelta, timezone
from uuid import UUID

import jwt
from pydantic import BaseModel

from inbox.config import get_settings


class TokenPayload(BaseModel):
    """JWT token payload."""

    sub: str  # Subject - user id
    email: str
    role: str
    exp: datetime  # Expiration time
    iat: datetime  # Issued at
    type: str = "access"  # Token type


def create_access_token(user_id: UUID, email: str, role: str) -> str:
    """Create a JWT access token identifying a dashboard user."""
    settings = get_settings()

    now = datetime.now(timezone.utc)
    expires = now + timedelta(minutes=settings.jwt_access_token_expire_minutes)

    payload = {
        "sub": str(user_id),
        "email": email,
        "role": role,
        "exp": expires,
        "iat": now,
        "type": "access",
    }

    token = jwt.encode(
        payload,
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return token


def decode_access_token(token: str) -> TokenPayload | None:
    """Decode and validate a JWT access token.

    Returns TokenPayload if valid, None if invalid or expired.
    """
    settings = get_settings()

    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "exp", "iat"]},
        )
        return TokenPayload(
            sub=payload["sub"],
            email=payload.get("email", ""),
            role=payload.get("role", ""),
            exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            iat=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            type=payload.get("type", "access"),
        )
    except jwt.ExpiredSignatureError:
        return None
    except jwt.InvalidTokenError:
        return None
