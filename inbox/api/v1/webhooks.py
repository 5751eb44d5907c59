"""Platform webhook endpoints - verification and inbound messages.

Meta retries any webhook that is not acknowledged with a 200, so the POST
handlers acknowledge first and store the messages in a background task.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Annotated, Any

from fastapi import APIRouter, BackgroundTasks, Depends, Query, Request, status
from fastapi.responses import PlainTextResponse, Response
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from inbox.api.deps import get_session_factory
from inbox.config import get_settings
from inbox.services import instagram, whatsapp
from inbox.services.inbox import process_instagram_messages, process_whatsapp_messages

router = APIRouter(prefix="/webhooks", tags=["webhooks"])
logger = logging.getLogger(__name__)


def _verify_subscription(
    platform: str, mode: str | None, token: str | None, challenge: str | None, expected: str
) -> Response:
    """Answer Meta's subscription handshake."""
    if mode == "subscribe" and expected and token == expected:
        logger.info(f"✅ {platform} webhook verified")
        return PlainTextResponse(content=challenge or "", status_code=status.HTTP_200_OK)

    logger.warning(f"{platform} webhook verification failed (mode={mode})")
    return PlainTextResponse(content="Forbidden", status_code=status.HTTP_403_FORBIDDEN)


async def _read_json(request: Request, platform: str) -> Any:
    try:
        return await request.json()
    except ValueError:
        logger.warning(f"{platform} webhook with invalid JSON body ignored")
        return None


async def _acknowledge(
    request: Request,
    background_tasks: BackgroundTasks,
    session_factory: async_sessionmaker[AsyncSession],
    platform: str,
    parse: Callable[[Any], list],
    process: Callable[..., Awaitable[None]],
) -> dict[str, bool]:
    body = await _read_json(request, platform)
    if body is not None:
        events = parse(body)
        logger.info(f"📬 {platform} webhook received ({len(events)} text message(s))")
        if events:
            background_tasks.add_task(process, session_factory, events)
    return {"success": True}


@router.get("/whatsapp", summary="WhatsApp webhook verification")
async def verify_whatsapp_webhook(
    mode: Annotated[str | None, Query(alias="hub.mode")] = None,
    token: Annotated[str | None, Query(alias="hub.verify_token")] = None,
    challenge: Annotated[str | None, Query(alias="hub.challenge")] = None,
) -> Response:
    return _verify_subscription(
        "WhatsApp", mode, token, challenge, get_settings().whatsapp_verify_token
    )


@router.post("/whatsapp", status_code=status.HTTP_200_OK, summary="Receive WhatsApp messages")
async def receive_whatsapp_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    session_factory: Annotated[async_sessionmaker[AsyncSession], Depends(get_session_factory)],
) -> dict[str, bool]:
    """Acknowledge a WhatsApp Cloud API webhook and store its text messages."""
    return await _acknowledge(
        request,
        background_tasks,
        session_factory,
        "WhatsApp",
        whatsapp.parse_webhook_payload,
        process_whatsapp_messages,
    )


@router.get("/instagram", summary="Instagram webhook verification")
async def verify_instagram_webhook(
    mode: Annotated[str | None, Query(alias="hub.mode")] = None,
    token: Annotated[str | None, Query(alias="hub.verify_token")] = None,
    challenge: Annotated[str | None, Query(alias="hub.challenge")] = None,
) -> Response:
    return _verify_subscription(
        "Instagram", mode, token, challenge, get_settings().instagram_verify_token
    )


@router.post("/instagram", status_code=status.HTTP_200_OK, summary="Receive Instagram messages")
async def receive_instagram_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    session_factory: Annotated[async_sessionmaker[AsyncSession], Depends(get_session_factory)],
) -> dict[str, bool]:
    """Acknowledge an Instagram webhook and store its text messages."""
    return await _acknowledge(
        request,
        background_tasks,
        session_factory,
        "Instagram",
        instagram.parse_webhook_payload,
        process_instagram_messages,
    )
