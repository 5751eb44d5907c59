"""Pytest configuration and fixtures."""

import os

# Settings are cached on first use; point them at test values before any
# inbox module is imported.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-with-enough-length-for-hs256"
os.environ["WHATSAPP_VERIFY_TOKEN"] = "wa-verify-token"
os.environ["INSTAGRAM_VERIFY_TOKEN"] = "ig-verify-token"
os.environ["ADMIN_EMAIL"] = ""
os.environ["ADMIN_PASSWORD"] = ""

from collections.abc import AsyncGenerator
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from inbox.api.deps import get_dispatcher
from inbox.database import get_db, get_session_factory
from inbox.exceptions import DispatchError
from inbox.main import app
from inbox.models import (
    Base,
    Conversation,
    ConversationStatus,
    Customer,
    Platform,
    User,
    UserRole,
)
from inbox.utils.jwt import create_access_token
from inbox.utils.security import hash_password

TEST_PASSWORD = "secret123"


class FakeDispatcher:
    """Records outbound messages instead of calling the platforms."""

    def __init__(self):
        self.sent: list[tuple[str, str, str]] = []
        self.fail_with: DispatchError | None = None

    async def send(self, platform, customer, text):
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append((Platform(platform).value, customer.platform_user_id, text))

    async def close(self):
        pass


@pytest_asyncio.fixture(scope="function")
async def db_engine(tmp_path):
    """File-backed SQLite database with foreign keys and savepoints enabled."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'inbox_test.db'}")

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        # Let SQLAlchemy emit BEGIN itself so SAVEPOINT works
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        db_engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )


@pytest_asyncio.fixture(scope="function")
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    async with session_factory() as session:
        yield session
        await session.rollback()


async def _create_user(db: AsyncSession, name: str, email: str, role: UserRole) -> User:
    user = User(
        id=uuid4(),
        name=name,
        email=email,
        password_hash=hash_password(TEST_PASSWORD),
        role=role.value,
    )
    db.add(user)
    await db.commit()
    return user


@pytest_asyncio.fixture
async def admin_user(db: AsyncSession) -> User:
    """Create test admin."""
    return await _create_user(db, "Ana Admin", "ana@acme.io", UserRole.ADMIN)


@pytest_asyncio.fixture
async def staff_user(db: AsyncSession) -> User:
    """Create test staff member."""
    return await _create_user(db, "Sam Staff", "sam@acme.io", UserRole.STAFF)


@pytest_asyncio.fixture
async def other_staff(db: AsyncSession) -> User:
    """Create a second staff member."""
    return await _create_user(db, "Olga Other", "olga@acme.io", UserRole.STAFF)


@pytest_asyncio.fixture
async def customer(db: AsyncSession) -> Customer:
    """Create a WhatsApp customer."""
    customer = Customer(
        id=uuid4(),
        platform=Platform.WHATSAPP.value,
        platform_user_id="5215512345678",
        name="Maria García",
        phone_number="5215512345678",
    )
    db.add(customer)
    await db.commit()
    return customer


@pytest_asyncio.fixture
async def ig_customer(db: AsyncSession) -> Customer:
    """Create an Instagram customer."""
    customer = Customer(
        id=uuid4(),
        platform=Platform.INSTAGRAM.value,
        platform_user_id="17841400000000001",
        name=None,
    )
    db.add(customer)
    await db.commit()
    return customer


@pytest_asyncio.fixture
async def conversation(db: AsyncSession, customer: Customer) -> Conversation:
    """Open, unassigned WhatsApp conversation."""
    conversation = Conversation(
        id=uuid4(),
        customer_id=customer.id,
        platform=Platform.WHATSAPP.value,
        status=ConversationStatus.OPEN.value,
    )
    db.add(conversation)
    await db.commit()
    return conversation


@pytest_asyncio.fixture
async def assigned_conversation(
    db: AsyncSession, ig_customer: Customer, staff_user: User
) -> Conversation:
    """Open Instagram conversation assigned to ``staff_user``."""
    conversation = Conversation(
        id=uuid4(),
        customer_id=ig_customer.id,
        platform=Platform.INSTAGRAM.value,
        status=ConversationStatus.OPEN.value,
        assigned_to=staff_user.id,
    )
    db.add(conversation)
    await db.commit()
    return conversation


@pytest.fixture
def dispatcher() -> FakeDispatcher:
    return FakeDispatcher()


@pytest_asyncio.fixture
async def client(session_factory, dispatcher) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client against the app with test database and dispatcher."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_dispatcher] = lambda: dispatcher

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


def auth_headers(user: User) -> dict[str, str]:
    token = create_access_token(user.id, user.email, user.role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def headers_for():
    """Build bearer headers for any user."""
    return auth_headers


@pytest.fixture
def admin_headers(admin_user: User) -> dict[str, str]:
    return auth_headers(admin_user)


@pytest.fixture
def staff_headers(staff_user: User) -> dict[str, str]:
    return auth_headers(staff_user)
