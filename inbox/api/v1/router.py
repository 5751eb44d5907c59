"""Main API router for v1 endpoints."""

from fastapi import APIRouter

from inbox.api.v1 import auth, conversations, notifications, staff, webhooks

router = APIRouter()

# Include all sub-routers
router.include_router(auth.router)
router.include_router(conversations.router)
router.include_router(staff.router)
router.include_router(notifications.router)
router.include_router(webhooks.router)
