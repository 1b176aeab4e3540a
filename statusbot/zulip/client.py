"""
Minimal Zulip REST client.

Status Bot only needs to send direct messages (feedback forwarding), so
that is all this client does.
"""

import json

import httpx
from loguru import logger

from statusbot.errors import ZulipError

API_MESSAGES = "/api/v1/messages"


class ZulipClient:
    """Sends messages as the bot user, authenticated with its email and API key."""

    def __init__(
        self,
        site: str,
        email: str,
        api_key: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.site = site
        self.email = email
        self._client = httpx.AsyncClient(
            base_url=site,
            auth=(email, api_key),
            timeout=timeout,
            transport=transport,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def send_direct_message(self, to: list[int | str], content: str) -> int:
        """
        Send a direct message.

        Args:
            to: Recipient user ids or emails.
            content: Message body (Zulip markdown).

        Returns:
            The id of the new message.
        """
        if not to:
            raise ZulipError("No recipients given")

        data = {
            "type": "direct",
            "to": json.dumps(list(to)),
            "content": content,
        }
        try:
            response = await self._client.post(API_MESSAGES, data=data)
        except httpx.TimeoutException as e:
            logger.error(f"Zulip send message timed out: {e}")
            raise ZulipError("Zulip did not respond in time") from e
        except httpx.HTTPError as e:
            logger.error(f"Zulip send message failed: {e}")
            raise ZulipError(f"Could not reach Zulip ({e})") from e

        try:
            body = response.json()
        except ValueError:
            body = {}

        if response.status_code != httpx.codes.OK or body.get("result") != "success":
            msg = body.get("msg") or f"HTTP {response.status_code}"
            logger.error(f"Zulip rejected message: code={body.get('code')} msg={msg}")
            raise ZulipError(f"Zulip rejected the message: {msg}")

        return body.get("id", 0)
