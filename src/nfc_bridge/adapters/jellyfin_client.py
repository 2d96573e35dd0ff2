"""Jellyfin media server API client."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Protocol

import httpx

from nfc_bridge.domain.errors import MediaServerError

_logger = logging.getLogger(__name__)


class MediaDirectoryClient(Protocol):
    """Interface for media server lookups and playback commands."""

    async def list_users(self) -> list[dict[str, object]]:
        """Return raw user records."""

    async def search_items(
        self, user_id: str, search_term: str, item_type: str
    ) -> list[dict[str, object]]:
        """Search a user's library and return raw item records."""

    async def list_sessions(self) -> list[dict[str, object]]:
        """Return raw records for currently connected sessions."""

    async def play_now(self, session_id: str, item_ids: list[str]) -> None:
        """Tell a session to start playing the given items immediately."""


@dataclass
class HttpxJellyfinClient(MediaDirectoryClient):
    """HTTPX-backed Jellyfin client."""

    base_url: str
    api_key: str
    http_client: httpx.AsyncClient
    timeout: float = 10.0

    @classmethod
    def create(
        cls, base_url: str, api_key: str, timeout: float = 10.0
    ) -> "HttpxJellyfinClient":
        """Create a Jellyfin client with a managed httpx session."""
        return cls(
            base_url=base_url.rstrip("/"),
            api_key=api_key,
            http_client=httpx.AsyncClient(),
            timeout=timeout,
        )

    async def list_users(self) -> list[dict[str, object]]:
        """Fetch all users visible to the API key."""
        payload = await self._request(
            lambda: self.http_client.get(
                f"{self.base_url}/Users", headers=self._headers, timeout=self.timeout
            ),
            action="list users",
        )
        return _expect_list(payload, "list users")

    async def search_items(
        self, user_id: str, search_term: str, item_type: str
    ) -> list[dict[str, object]]:
        """Search the user's library recursively for one item type."""
        payload = await self._request(
            lambda: self.http_client.get(
                f"{self.base_url}/Users/{user_id}/Items",
                headers=self._headers,
                params={
                    "SearchTerm": search_term,
                    "IncludeItemTypes": item_type,
                    "Recursive": "true",
                },
                timeout=self.timeout,
            ),
            action="search items",
        )
        if not isinstance(payload, dict):
            raise MediaServerError("Unexpected search items response")
        return _expect_list(payload.get("Items", []), "search items")

    async def list_sessions(self) -> list[dict[str, object]]:
        """Fetch the sessions currently connected to the server."""
        payload = await self._request(
            lambda: self.http_client.get(
                f"{self.base_url}/Sessions",
                headers=self._headers,
                timeout=self.timeout,
            ),
            action="list sessions",
        )
        return _expect_list(payload, "list sessions")

    async def play_now(self, session_id: str, item_ids: list[str]) -> None:
        """Send a PlayNow command to a session."""
        await self._request(
            lambda: self.http_client.post(
                f"{self.base_url}/Sessions/{session_id}/Playing",
                headers=self._headers,
                params={"PlayCommand": "PlayNow", "ItemIds": ",".join(item_ids)},
                json={"playCommand": "PlayNow", "itemIds": item_ids},
                timeout=self.timeout,
            ),
            action="play now",
            expect_body=False,
        )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    @property
    def _headers(self) -> dict[str, str]:
        return {"X-Emby-Token": self.api_key}

    async def _request(
        self,
        send: Callable[[], Awaitable[httpx.Response]],
        *,
        action: str,
        expect_body: bool = True,
    ) -> object:
        """Send a request and translate transport failures to MediaServerError."""
        try:
            response = await send()
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            # Response bodies stay out of the error message.
            _logger.warning(
                "Jellyfin %s returned %s: %s",
                action,
                exc.response.status_code,
                exc.response.text[:200],
            )
            raise MediaServerError(
                f"Jellyfin {action} failed with status {exc.response.status_code}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            raise MediaServerError(
                f"Jellyfin {action} failed: {type(exc).__name__}: {exc}"
            ) from exc
        if not expect_body:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise MediaServerError(f"Jellyfin {action} returned invalid JSON") from exc


def _expect_list(payload: object, action: str) -> list[dict[str, object]]:
    if not isinstance(payload, list):
        raise MediaServerError(f"Unexpected {action} response")
    return [item for item in payload if isinstance(item, dict)]
