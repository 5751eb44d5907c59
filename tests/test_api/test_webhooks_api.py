"""Tests for the platform webhook endpoints."""

import pytest
from sqlalchemy import select

from inbox.models import Conversation, Customer, Message


pytestmark = pytest.mark.asyncio


def whatsapp_body(wa_id="5215598765432", text="Hola, ¿abren hoy?", name="Lucía"):
    return {
        "object": "whatsapp_business_account",
        "entry": [
            {
                "id": "102290129340398",
                "changes": [
                    {
                        "field": "messages",
                        "value": {
                            "messaging_product": "whatsapp",
                            "contacts": [{"wa_id": wa_id, "profile": {"name": name}}],
                            "messages": [
                                {
                                    "from": wa_id,
                                    "id": "wamid.IN1",
                                    "timestamp": "1700000000",
                                    "type": "text",
                                    "text": {"body": text},
                                }
                            ],
                        },
                    }
                ],
            }
        ],
    }


class TestVerification:
    """GET subscription handshake."""

    async def test_whatsapp_challenge_echoed(self, client):
        response = await client.get(
            "/api/webhooks/whatsapp",
            params={"hub.mode": "subscribe", "hub.verify_token": "wa-verify-token", "hub.challenge": "1158201444"},
        )

        assert response.status_code == 200
        assert response.text == "1158201444"
        assert response.headers["content-type"].startswith("text/plain")

    async def test_wrong_token_is_forbidden(self, client):
        response = await client.get(
            "/api/webhooks/whatsapp",
            params={"hub.mode": "subscribe", "hub.verify_token": "guess", "hub.challenge": "1"},
        )

        assert response.status_code == 403

    async def test_instagram_uses_its_own_token(self, client):
        ok = await client.get(
            "/api/webhooks/instagram",
            params={"hub.mode": "subscribe", "hub.verify_token": "ig-verify-token", "hub.challenge": "abc"},
        )
        crossed = await client.get(
            "/api/webhooks/instagram",
            params={"hub.mode": "subscribe", "hub.verify_token": "wa-verify-token", "hub.challenge": "abc"},
        )

        assert ok.status_code == 200
        assert ok.text == "abc"
        assert crossed.status_code == 403

    async def test_wrong_mode_is_forbidden(self, client):
        response = await client.get(
            "/api/webhooks/instagram",
            params={"hub.mode": "unsubscribe", "hub.verify_token": "ig-verify-token", "hub.challenge": "abc"},
        )

        assert response.status_code == 403


class TestReceive:
    """POST inbound delivery."""

    async def test_whatsapp_message_from_new_sender(self, client, session_factory):
        """One customer, one open conversation, one customer message."""
        response = await client.post("/api/webhooks/whatsapp", json=whatsapp_body())

        assert response.status_code == 200
        assert response.json() == {"success": True}

        # Background processing has finished once the ASGI call returns
        async with session_factory() as session:
            customers = (await session.execute(select(Customer))).scalars().all()
            conversations = (await session.execute(select(Conversation))).scalars().all()
            messages = (await session.execute(select(Message))).scalars().all()

        assert len(customers) == 1
        assert customers[0].platform_user_id == "5215598765432"
        assert customers[0].name == "Lucía"
        assert len(conversations) == 1
        assert conversations[0].status == "open"
        assert conversations[0].assigned_to is None
        assert len(messages) == 1
        assert messages[0].sender_type == "customer"
        assert messages[0].content == "Hola, ¿abren hoy?"

    async def test_instagram_message_lands_in_inbox(self, client, admin_headers):
        body = {
            "object": "instagram",
            "entry": [
                {
                    "id": "17841400000000000",
                    "messaging": [
                        {
                            "sender": {"id": "17841400000000077"},
                            "recipient": {"id": "17841400000000000"},
                            "timestamp": 1700000000000,
                            "message": {"mid": "mid.IN1", "text": "hi there"},
                        }
                    ],
                }
            ],
        }

        response = await client.post("/api/webhooks/instagram", json=body)
        assert response.status_code == 200

        inbox = await client.get("/api/conversations?platform=instagram", headers=admin_headers)
        data = inbox.json()["data"]
        assert len(data) == 1
        assert data[0]["customer"]["platform_user_id"] == "17841400000000077"

    async def test_invalid_json_is_still_acknowledged(self, client):
        response = await client.post(
            "/api/webhooks/whatsapp",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 200
        assert response.json() == {"success": True}

    async def test_unexpected_shape_is_acknowledged(self, client, session_factory):
        response = await client.post("/api/webhooks/instagram", json={"entry": "???"})

        assert response.status_code == 200
        async with session_factory() as session:
            assert (await session.execute(select(Message))).scalars().all() == []

    async def test_processing_failure_does_not_change_response(self, client, monkeypatch):
        from inbox.services import inbox as inbox_service

        async def explode(*args, **kwargs):
            raise RuntimeError("database unavailable")

        monkeypatch.setattr(inbox_service, "ingest_message", explode)

        response = await client.post("/api/webhooks/whatsapp", json=whatsapp_body())

        assert response.status_code == 200
        assert response.json() == {"success": True}
