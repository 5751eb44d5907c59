"""Tests for the outbound WhatsApp and Instagram clients."""

import json

import httpx
import pytest

from inbox.config import Settings
from inbox.exceptions import DispatchError
from inbox.models import Customer
from inbox.services.dispatch import PlatformDispatcher
from inbox.services.instagram import InstagramClient
from inbox.services.whatsapp import WhatsAppClient


pytestmark = pytest.mark.asyncio

WA_URL = "https://graph.facebook.com/v21.0/106540352242922/messages"
IG_URL = "https://graph.instagram.com/v21.0/17841400000000000/messages"


class Recorder:
    """httpx MockTransport handler that records requests."""

    def __init__(self, status_code=200, body=None, exc=None):
        self.status_code = status_code
        self.body = body if body is not None else {}
        self.exc = exc
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.exc is not None:
            raise self.exc
        return httpx.Response(self.status_code, json=self.body)


def whatsapp_client(recorder: Recorder, mock_mode: bool = False) -> WhatsAppClient:
    return WhatsAppClient(
        access_token="wa-token",
        messages_url=WA_URL,
        mock_mode=mock_mode,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(recorder)),
    )


def instagram_client(recorder: Recorder) -> InstagramClient:
    return InstagramClient(
        access_token="ig-token",
        messages_url=IG_URL,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(recorder)),
    )


class TestWhatsAppClient:
    """Tests for WhatsAppClient.send_message."""

    async def test_posts_text_payload_with_bearer_token(self):
        recorder = Recorder(body={"messages": [{"id": "wamid.OUT"}]})
        client = whatsapp_client(recorder)

        result = await client.send_message("5215512345678", "Hola!")

        assert result == {"messages": [{"id": "wamid.OUT"}]}
        request = recorder.requests[0]
        assert request.method == "POST"
        assert str(request.url) == WA_URL
        assert request.headers["Authorization"] == "Bearer wa-token"
        assert json.loads(request.content) == {
            "messaging_product": "whatsapp",
            "recipient_type": "individual",
            "to": "5215512345678",
            "type": "text",
            "text": {"body": "Hola!"},
        }
        await client.close()

    async def test_upstream_error_message_becomes_detail(self):
        recorder = Recorder(
            status_code=400,
            body={"error": {"message": "Recipient phone number not in allowed list", "code": 131030}},
        )
        client = whatsapp_client(recorder)

        with pytest.raises(DispatchError) as exc_info:
            await client.send_message("5215512345678", "Hola!")

        assert exc_info.value.platform == "whatsapp"
        assert exc_info.value.detail == "Recipient phone number not in allowed list"
        assert len(recorder.requests) == 1  # No retry

    async def test_transport_failure_raises_dispatch_error(self):
        recorder = Recorder(exc=httpx.ConnectError("connection refused"))
        client = whatsapp_client(recorder)

        with pytest.raises(DispatchError) as exc_info:
            await client.send_message("5215512345678", "Hola!")

        assert exc_info.value.detail == "connection refused"

    async def test_mock_mode_makes_no_request(self):
        recorder = Recorder()
        client = whatsapp_client(recorder, mock_mode=True)

        result = await client.send_message("5215512345678", "Hola!")

        assert recorder.requests == []
        assert result["messages"][0]["id"].startswith("mock_wamid_")

    async def test_from_settings_without_token_is_mock(self):
        client = WhatsAppClient.from_settings(
            Settings(whatsapp_access_token="", whatsapp_phone_number_id="106540352242922")
        )

        assert client.mock_mode is True
        assert client.messages_url == WA_URL
        await client.close()


class TestInstagramClient:
    """Tests for InstagramClient.send_message."""

    async def test_posts_recipient_payload(self):
        recorder = Recorder(body={"recipient_id": "111", "message_id": "mid.OUT"})
        client = instagram_client(recorder)

        await client.send_message("111", "hey")

        request = recorder.requests[0]
        assert str(request.url) == IG_URL
        assert request.headers["Authorization"] == "Bearer ig-token"
        assert json.loads(request.content) == {"recipient": {"id": "111"}, "message": {"text": "hey"}}

    async def test_error_without_body_uses_status(self):
        recorder = Recorder(status_code=500, body={"unexpected": True})
        client = instagram_client(recorder)

        with pytest.raises(DispatchError) as exc_info:
            await client.send_message("111", "hey")

        assert exc_info.value.platform == "instagram"
        assert exc_info.value.detail == "HTTP 500"


class TestPlatformDispatcher:
    """Tests for PlatformDispatcher.send recipient selection."""

    async def test_whatsapp_prefers_phone_number(self):
        wa, ig = Recorder(), Recorder()
        dispatcher = PlatformDispatcher(whatsapp_client(wa), instagram_client(ig))
        customer = Customer(platform="whatsapp", platform_user_id="wa-id", phone_number="5215500000000")

        await dispatcher.send("whatsapp", customer, "hi")

        assert json.loads(wa.requests[0].content)["to"] == "5215500000000"
        assert ig.requests == []

    async def test_whatsapp_falls_back_to_platform_user_id(self):
        wa, ig = Recorder(), Recorder()
        dispatcher = PlatformDispatcher(whatsapp_client(wa), instagram_client(ig))
        customer = Customer(platform="whatsapp", platform_user_id="5215511111111", phone_number=None)

        await dispatcher.send("whatsapp", customer, "hi")

        assert json.loads(wa.requests[0].content)["to"] == "5215511111111"

    async def test_instagram_uses_platform_user_id(self):
        wa, ig = Recorder(), Recorder()
        dispatcher = PlatformDispatcher(whatsapp_client(wa), instagram_client(ig))
        customer = Customer(platform="instagram", platform_user_id="111")

        await dispatcher.send("instagram", customer, "hi")

        assert json.loads(ig.requests[0].content)["recipient"] == {"id": "111"}
        assert wa.requests == []
        await dispatcher.close()
