"""Shared HTTP plumbing for the outbound platform clients."""

import logging
from typing import Any

import httpx

from inbox.exceptions import DispatchError

logger = logging.getLogger(__name__)


def extract_error_detail(response: httpx.Response) -> str:
    """Pull Meta's ``error.message`` out of a failed response, if present."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    return f"HTTP {response.status_code}"


class PlatformClient:
    """Base client: one bearer-authenticated JSON POST per message, no retries."""

    platform: str = ""

    def __init__(
        self,
        access_token: str,
        messages_url: str,
        mock_mode: bool = False,
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        """Initialize the client.

        Args:
            access_token: Bearer token for the platform API
            messages_url: Full URL of the platform's send-message endpoint
            mock_mode: If True, log instead of calling the API (for development)
            timeout: Request timeout in seconds
            http_client: Pre-built httpx client (tests inject a mock transport)
        """
        self.access_token = access_token
        self.messages_url = messages_url
        self.mock_mode = mock_mode
        self.client = http_client or httpx.AsyncClient(timeout=timeout)

    async def _post(self, payload: dict[str, Any]) -> dict[str, Any]:
        """POST a payload to the messages endpoint.

        Raises:
            DispatchError: on a non-2xx response or a transport failure
        """
        try:
            response = await self.client.post(
                self.messages_url,
                json=payload,
                headers={
                    "Authorization": f"Bearer {self.access_token}",
                    "Content-Type": "application/json",
                },
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            detail = extract_error_detail(e.response)
            logger.error(
                f"❌ {self.platform} API error: status={e.response.status_code} detail={detail}"
            )
            raise DispatchError(self.platform, detail) from e
        except httpx.HTTPError as e:
            detail = str(e) or e.__class__.__name__
            logger.error(f"❌ {self.platform} API request failed: {detail}")
            raise DispatchError(self.platform, detail) from e

        try:
            return response.json()
        except ValueError:
            return {}

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()
