"""Infinite-scroll feed state.

``FeedAggregator`` owns the list of posts shown for one feed view and grows it
one page at a time. It is driven by explicit calls from the UI layer
(``mount``, ``refresh``, ``load_more``, ``set_active_view``) and runs on a
single asyncio event loop: ``is_loading`` is checked and set with no ``await``
in between, which is what keeps page loads from overlapping.

Results that arrive after the feed was reset (view switch, refresh, user
change, unmount) are dropped. A generation counter captured at request time
identifies them.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Protocol

from townsquare.client.errors import FetchError
from townsquare.client.models import CommunityTab, CurrentUser, FeedItem
from townsquare.core.config import FEED_VIEW_FOR_YOU, settings

logger = logging.getLogger(__name__)


class PageFetcher(Protocol):
    async def fetch_page(self, view: str, page: int) -> list[FeedItem]:
        """Return one page (1-based) of ``view``, newest first. Raises ``FetchError``."""
        ...

    async def list_user_communities(self) -> list[CommunityTab]:
        """Return the communities the signed-in user belongs to. Raises ``FetchError``."""
        ...

    def set_current_user(self, user: CurrentUser | None) -> None:
        """Authenticate every later request as ``user``."""
        ...


@dataclass
class FeedState:
    active_view: str = FEED_VIEW_FOR_YOU
    items: list[FeedItem] = field(default_factory=list)
    page_cursor: int = 0
    has_more: bool = True
    is_loading: bool = False
    last_error: str | None = None


def merge_unique(existing: Iterable[FeedItem], batch: Iterable[FeedItem]) -> list[FeedItem]:
    """Return the items of ``batch`` whose id is not in ``existing``.

    Order is kept and only the first occurrence of an id inside ``batch`` survives.
    """
    seen = {item.id for item in existing}
    fresh: list[FeedItem] = []
    for item in batch:
        if item.id in seen:
            continue
        seen.add(item.id)
        fresh.append(item)
    return fresh


class FeedAggregator:
    def __init__(
        self,
        fetcher: PageFetcher,
        *,
        current_user: CurrentUser | None,
        page_size: int | None = None,
        default_view: str = FEED_VIEW_FOR_YOU,
    ) -> None:
        self.fetcher = fetcher
        self.current_user = current_user
        self.page_size = page_size or settings.feed_page_size
        self.default_view = default_view
        self.state = FeedState(active_view=default_view)
        self.communities: list[CommunityTab] = []
        self.communities_error: str | None = None
        self.mounted = False
        self._generation = 0

    @property
    def items(self) -> list[FeedItem]:
        return self.state.items

    @property
    def has_more(self) -> bool:
        return self.state.has_more

    @property
    def is_loading(self) -> bool:
        return self.state.is_loading

    @property
    def last_error(self) -> str | None:
        return self.state.last_error

    async def mount(self) -> None:
        """Load page 1 of the default view once per mount.

        Signed-out feeds stay empty until a user is set.
        """
        if self.mounted:
            return
        self.mounted = True
        if self.current_user is None:
            return
        await self.refresh()

    def unmount(self) -> None:
        self.mounted = False
        self._generation += 1
        self.state = FeedState(active_view=self.default_view)
        self.communities = []
        self.communities_error = None

    async def set_current_user(self, user: CurrentUser | None) -> None:
        if user == self.current_user:
            return

        self.current_user = user
        self.fetcher.set_current_user(user)
        self.communities = []
        self.communities_error = None
        self._generation += 1
        self.state = FeedState(active_view=self.default_view)
        if user is not None and self.mounted:
            await self.refresh()

    async def set_active_view(self, view: str) -> None:
        view = view.strip()
        if not view:
            logger.debug("ignored blank feed view")
            return
        if view == self.state.active_view:
            return
        self.state.active_view = view
        await self.refresh()

    async def refresh(self) -> None:
        self._reset()
        generation = self._generation
        view = self.state.active_view
        self.state.is_loading = True

        try:
            batch = await self.fetcher.fetch_page(view, 1)
        except FetchError as exc:
            if self._is_current(generation):
                self.state.items = []
                self._record_failure(view=view, page=1, exc=exc)
            return
        else:
            if not self._is_current(generation):
                logger.debug("dropped stale feed page", extra={"view": view, "page": 1})
                return
            self.state.items = merge_unique([], batch)
            self.state.page_cursor = 1
            self.state.has_more = len(batch) >= self.page_size
        finally:
            if self._is_current(generation):
                self.state.is_loading = False

    async def load_more(self) -> None:
        if not self.state.has_more or self.state.is_loading:
            return

        generation = self._generation
        view = self.state.active_view
        page = self.state.page_cursor + 1
        self.state.is_loading = True

        try:
            batch = await self.fetcher.fetch_page(view, page)
        except FetchError as exc:
            if self._is_current(generation):
                self._record_failure(view=view, page=page, exc=exc)
            return
        else:
            if not self._is_current(generation):
                logger.debug("dropped stale feed page", extra={"view": view, "page": page})
                return
            fresh = merge_unique(self.state.items, batch)
            if not fresh:
                # nothing new on this page: treat as the end of the feed
                self.state.has_more = False
                return
            self.state.items.extend(fresh)
            self.state.page_cursor = page
            self.state.has_more = len(batch) >= self.page_size
        finally:
            if self._is_current(generation):
                self.state.is_loading = False

    async def load_communities(self) -> None:
        if self.current_user is None:
            return
        generation = self._generation
        try:
            communities = await self.fetcher.list_user_communities()
        except FetchError as exc:
            if self._is_current(generation):
                self.communities_error = str(exc)
                logger.warning("failed to load communities", extra={"error": str(exc)})
            return
        if self._is_current(generation):
            self.communities = communities
            self.communities_error = None

    def _reset(self) -> None:
        self._generation += 1
        self.state.items = []
        self.state.page_cursor = 0
        self.state.has_more = True
        self.state.last_error = None
        self.state.is_loading = False

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    def _record_failure(self, *, view: str, page: int, exc: FetchError) -> None:
        self.state.last_error = str(exc) or "Failed to fetch posts"
        self.state.has_more = False
        logger.warning(
            "feed page fetch failed",
            extra={"view": view, "page": page, "status_code": exc.status_code},
        )
