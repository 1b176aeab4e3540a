"""
HTTP client for the Virtual RC API.

Provides:
- Desk listing and lookup
- Desk status updates
- Bot avatar updates (movement)

Every call is a single attempt bounded by the client timeout. Failures
are raised as RecurseError; the caller decides what the user sees.
"""

from typing import Any, TypeVar

import httpx
from loguru import logger
from pydantic import BaseModel, TypeAdapter, ValidationError

from statusbot.errors import RecurseError
from statusbot.rc.models import (
    BotEntity,
    Desk,
    DeskUpdate,
    Position,
    UpdateBotRequest,
)

API_DESKS = "/api/desks"
API_BOTS = "/api/bots"

# Largest response body we are willing to decode (the full desk list is well below this)
MAX_RESPONSE_BYTES = 284701 * 16

DEFAULT_TIMEOUT = 10.0

T = TypeVar("T")

_DESK_LIST = TypeAdapter(list[Desk])


class RecurseClient:
    """
    Makes API requests to Virtual RC on behalf of one bot.

    Authenticates with HTTP Basic auth, using the application id as the
    username and the application secret as the password.
    """

    def __init__(
        self,
        site: str,
        app_id: str,
        app_secret: str,
        bot_id: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Args:
            site: Base URL of the Virtual RC instance, e.g. https://recurse.rctogether.com
            app_id: Application id (Basic auth username).
            app_secret: Application secret (Basic auth password).
            bot_id: Id of the bot this client moves around.
            timeout: Per-request timeout in seconds.
            transport: Optional httpx transport (tests use httpx.MockTransport).
        """
        self.site = site
        self.bot_id = str(bot_id)
        self._client = httpx.AsyncClient(
            base_url=site,
            auth=(app_id, app_secret),
            timeout=timeout,
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    async def close(self) -> None:
        await self._client.aclose()

    # ------------------------------------------------------------------
    # Plumbing
    # ------------------------------------------------------------------

    async def _request(
        self,
        method: str,
        path: str,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        try:
            response = await self._client.request(method, path, json=json)
        except httpx.TimeoutException as e:
            logger.error(f"Virtual RC {method} {path} timed out: {e}")
            raise RecurseError("The Virtual RC API did not respond in time") from e
        except httpx.HTTPError as e:
            logger.error(f"Virtual RC {method} {path} failed: {e}")
            raise RecurseError(f"Could not reach the Virtual RC API ({e})") from e

        if response.status_code == httpx.codes.OK:
            return response

        logger.debug(f"Virtual RC {method} {path} -> HTTP {response.status_code}: {response.text[:500]}")
        if response.status_code == httpx.codes.UNPROCESSABLE_ENTITY:
            raise RecurseError("The request had an invalid JSON body and the Virtual RC API rejected it")
        if response.status_code == httpx.codes.BAD_REQUEST:
            raise RecurseError("The request was invalid in some way and the Virtual RC API rejected it")
        if response.status_code == httpx.codes.INTERNAL_SERVER_ERROR:
            raise RecurseError("The Virtual RC API fell over because of our request")
        raise RecurseError(f"The Virtual RC API returned an unexpected HTTP status: {response.status_code}")

    @staticmethod
    def _decode(response: httpx.Response, adapter: TypeAdapter[T] | type[BaseModel]) -> Any:
        """Decode a JSON body after checking its size."""
        declared = response.headers.get("content-length")
        if declared and declared.isdigit() and int(declared) > MAX_RESPONSE_BYTES:
            raise RecurseError(f"Received more than {MAX_RESPONSE_BYTES} bytes in this response")
        if len(response.content) > MAX_RESPONSE_BYTES:
            raise RecurseError(f"Received more than {MAX_RESPONSE_BYTES} bytes in this response")

        try:
            if isinstance(adapter, TypeAdapter):
                return adapter.validate_json(response.content)
            return adapter.model_validate_json(response.content)
        except ValidationError as e:
            logger.error(f"Could not decode Virtual RC response from {response.request.url}: {e}")
            raise RecurseError("The Virtual RC API sent a response we could not understand") from e

    # ------------------------------------------------------------------
    # API calls
    # ------------------------------------------------------------------

    async def get_desks(self) -> list[Desk]:
        """GET /api/desks - fetch every desk in Virtual RC."""
        response = await self._request("GET", API_DESKS)
        return self._decode(response, _DESK_LIST)

    async def get_desk(self, desk_id: int) -> Desk:
        """Fetch a single desk by id."""
        for desk in await self.get_desks():
            if desk.id == desk_id:
                return desk
        raise RecurseError(f"Did not find a Virtual RC desk with id = {desk_id}")

    async def update_desk(self, desk_id: int, update: DeskUpdate) -> Desk:
        """
        PATCH /api/desks/:id

        The bot must already be standing next to the desk.

        Args:
            desk_id: Desk to update.
            update: New emoji/status/expires_at; None clears a field.

        Returns:
            The desk with the update applied.
        """
        body = {"bot_id": self.bot_id, "desk": update.to_json()}
        logger.debug(f"Updating desk {desk_id}: {body}")
        response = await self._request("PATCH", f"{API_DESKS}/{desk_id}", json=body)
        return self._decode(response, Desk)

    async def update_bot(self, update: UpdateBotRequest) -> BotEntity:
        """PATCH /api/bots/:id - update the bot's properties or location."""
        body = {"bot": update.to_json()}
        logger.debug(f"Updating bot {self.bot_id}: {body}")
        response = await self._request("PATCH", f"{API_BOTS}/{self.bot_id}", json=body)
        return self._decode(response, BotEntity)

    async def move_bot(self, pos: Position) -> BotEntity:
        """Move the bot avatar to a grid position."""
        return await self.update_bot(UpdateBotRequest(x=pos.x, y=pos.y))
