"""FastAPI application entry point for the unified inbox."""

import logging
import time
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from inbox.api.v1.router import router as api_v1_router
from inbox.config import get_settings
from inbox.database import async_session_factory, engine
from inbox.exceptions import register_exception_handlers
from inbox.logging_config import configure_logging
from inbox.services import auth as auth_service
from inbox.services.dispatch import PlatformDispatcher

settings = get_settings()
configure_logging(settings.log_level)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan - startup and shutdown events."""
    # Startup
    logger.info("Starting Unified Inbox API...")
    logger.info(f"Environment: {settings.app_env}")
    logger.info(f"Database: {settings.async_database_url.split('@')[-1]}")  # Hide credentials

    app.state.dispatcher = PlatformDispatcher.from_settings(settings)

    # Test database connection and seed the admin account
    try:
        async with async_session_factory() as db:
            await auth_service.ensure_admin(db, settings)
            await db.commit()
        logger.info("✓ Database connection successful")
    except Exception as e:
        logger.error(f"✗ Database startup failed: {e}")

    yield

    # Shutdown
    logger.info("Shutting down Unified Inbox API...")
    await app.state.dispatcher.close()
    await engine.dispose()


# Create FastAPI app
app = FastAPI(
    title="Unified Inbox API",
    description="One inbox for WhatsApp and Instagram customer conversations",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.is_development else settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _status_log_level(status_code: int) -> int:
    """Client errors are routine; only server errors are logged as errors."""
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.INFO


@app.middleware("http")
async def log_requests(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """Log every request with its status and duration."""
    started = time.perf_counter()
    logger.debug(f"→ {request.method} {request.url.path}")
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    level = _status_log_level(response.status_code)
    logger.log(
        level,
        f"← {request.method} {request.url.path} {response.status_code} {elapsed_ms:.0f}ms",
    )
    return response


register_exception_handlers(app)

# Include routers
app.include_router(api_v1_router, prefix="/api")


@app.get("/health")
async def health() -> dict[str, str]:
    """Global health check."""
    return {"status": "ok"}
