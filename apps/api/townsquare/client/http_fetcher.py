from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from townsquare.client.errors import FetchError
from townsquare.client.models import CommunityTab, CurrentUser, FeedItem
from townsquare.core.config import FEED_VIEW_FOLLOWING, FEED_VIEW_FOR_YOU, settings

logger = logging.getLogger(__name__)


class HttpFeedClient:
    """Page fetcher backed by the REST API.

    Transport failures, non-2xx responses and malformed bodies all surface
    as ``FetchError``.
    """

    def __init__(
        self,
        *,
        current_user: CurrentUser | None,
        base_url: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.current_user = current_user
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(settings.http_timeout_seconds, connect=settings.http_connect_timeout_seconds)
        )

    def set_current_user(self, user: CurrentUser | None) -> None:
        self.current_user = user

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def fetch_page(self, view: str, page: int) -> list[FeedItem]:
        payload = await self._get_json(self.path_for_view(view), resource="posts", params={"page": page})
        rows = payload.get("items") if isinstance(payload, dict) else payload
        if not isinstance(rows, list):
            raise FetchError("Malformed feed payload")
        try:
            return [FeedItem.model_validate(row) for row in rows]
        except ValueError as exc:
            raise FetchError("Malformed feed item") from exc

    async def list_user_communities(self) -> list[CommunityTab]:
        payload = await self._get_json("/communities/user", resource="communities")
        rows = payload.get("communities") if isinstance(payload, dict) else payload
        if not isinstance(rows, list):
            raise FetchError("Malformed communities payload")
        try:
            return [CommunityTab.model_validate(row) for row in rows]
        except ValueError as exc:
            raise FetchError("Malformed community") from exc

    @staticmethod
    def path_for_view(view: str) -> str:
        if view == FEED_VIEW_FOR_YOU:
            return "/posts/for-you"
        if view == FEED_VIEW_FOLLOWING:
            return "/posts/following"
        return f"/communities/{quote(view, safe='')}/posts"

    async def _get_json(self, path: str, *, resource: str, params: dict[str, Any] | None = None) -> Any:
        if self.current_user is None:
            raise FetchError(f"Sign in to load {resource}")
        url = f"{self.base_url}{path}"
        headers = {"Authorization": f"Bearer {self.current_user.access_token}"}
        try:
            response = await self._client.get(url, params=params, headers=headers)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            logger.warning("feed api returned error status", extra={"url": url, "status_code": status_code})
            raise FetchError(f"Failed to fetch {resource} (HTTP {status_code})", status_code=status_code) from exc
        except httpx.HTTPError as exc:
            raise FetchError(f"Failed to fetch {resource}: {exc.__class__.__name__}") from exc
        except ValueError as exc:
            raise FetchError(f"Failed to decode {resource} response") from exc
