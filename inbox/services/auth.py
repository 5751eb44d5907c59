"""Auth service - business logic for registration and login."""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from inbox.config import Settings
from inbox.exceptions import ConflictError, UnauthorizedError
from inbox.models import User, UserRole
from inbox.utils.jwt import create_access_token
from inbox.utils.security import hash_password, verify_password

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password."


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    """Get user by email address."""
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def register(
    db: AsyncSession,
    name: str,
    email: str,
    password: str,
    role: UserRole | str = UserRole.STAFF,
) -> User:
    """Create a dashboard user with a salted password hash.

    Raises:
        ConflictError: if the email is already taken
    """
    if await get_user_by_email(db, email):
        raise ConflictError("A user with this email already exists.")

    user = User(
        name=name,
        email=email,
        password_hash=hash_password(password),
        role=UserRole(role).value,
    )
    try:
        async with db.begin_nested():
            db.add(user)
    except IntegrityError as e:
        raise ConflictError("A user with this email already exists.") from e

    logger.info(f"User registered: {user.id} ({user.role})")
    return user


async def login(db: AsyncSession, email: str, password: str) -> tuple[str, User]:
    """Check credentials and issue an access token.

    Unknown emails and wrong passwords fail identically.

    Returns (token, user).
    """
    user = await get_user_by_email(db, email)
    if user is None or not verify_password(password, user.password_hash):
        logger.info(f"Failed login attempt for {email}")
        raise UnauthorizedError(INVALID_CREDENTIALS_MESSAGE)

    token = create_access_token(user.id, user.email, user.role)
    logger.info(f"User logged in: {user.id}")
    return token, user


async def ensure_admin(db: AsyncSession, settings: Settings) -> User | None:
    """Seed the configured admin account if it does not exist yet."""
    if not settings.admin_email or not settings.admin_password:
        return None

    existing = await get_user_by_email(db, settings.admin_email)
    if existing:
        return existing

    user = await register(
        db,
        name=settings.admin_name,
        email=settings.admin_email,
        password=settings.admin_password,
        role=UserRole.ADMIN,
    )
    logger.info(f"🔑 Seeded admin account {user.email}")
    return user
