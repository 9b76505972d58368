"""Browsing session: ties filter state, the URL and fetching together.

A session owns exactly one FilterState. User interactions go through
apply(), which runs a transition, mirrors the result into the URL and
fetches when the state actually changed. Free-text search is debounced so
only the last keystroke of a burst reaches the server.
"""

import asyncio
from typing import Any, Callable, Optional

from config import config
from config.logging_config import get_logger
from browsing.orchestrator import FetchOrchestrator
from browsing.state import FilterState, clamp_page
from browsing.url_codec import UrlSynchronizer, decode

logger = get_logger("session")


class BrowsingSession:
    """State container for one user browsing the catalog."""

    def __init__(
        self,
        orchestrator: FetchOrchestrator,
        url_sync: UrlSynchronizer,
        search_debounce_seconds: Optional[float] = None,
    ):
        self.orchestrator = orchestrator
        self.url_sync = url_sync
        self.search_debounce_seconds = (
            config.browsing.search_debounce_seconds
            if search_debounce_seconds is None
            else search_debounce_seconds
        )
        self.state = FilterState.default()
        self._pending_search: Optional[asyncio.Task] = None
        self._fetching_search: Optional[asyncio.Task] = None

    async def load(self, query: Optional[str] = None) -> FilterState:
        """Seed state from the URL (or the navigator's current URL) and fetch."""
        self.state = self.url_sync.read() if query is None else decode(query)
        logger.info(f"Session loaded: {self.state.get_summary()}")
        self.url_sync.write(self.state)
        await self.orchestrator.fetch(self.state)
        return self.state

    async def apply(self, transition: Callable[..., FilterState], *args: Any) -> bool:
        """
        Run a FilterState transition.

        Args:
            transition: Unbound FilterState method, e.g. FilterState.set_rarities.
            *args: Arguments for the transition.

        Returns:
            True if the state changed (and a fetch was issued).
        """
        return await self._commit(transition(self.state, *args))

    # Alias kept for callers that think in terms of "updating" filters
    update = apply

    async def _commit(self, new_state: FilterState) -> bool:
        if new_state == self.state:
            return False
        self.state = new_state
        self.url_sync.write(new_state)
        await self.orchestrator.fetch(new_state)
        return True

    async def navigate(self, query: str) -> bool:
        """
        Handle an inbound URL change (back/forward, pasted link).

        Echoes of our own URL writes are ignored.
        """
        navigated = self.url_sync.resolve_navigation(query, self.state)
        if navigated is None:
            return False
        logger.debug(f"Navigated to: {navigated.get_summary()}")
        self.state = navigated
        await self.orchestrator.fetch(navigated)
        return True

    async def go_to_page(self, page: int) -> bool:
        """Move to a page, clamped to the last known page count."""
        target = clamp_page(page, self.orchestrator.result.total_pages)
        return await self._commit(self.state.set_page(target))

    # -------------------------------------------------------------------------
    # Debounced search
    # -------------------------------------------------------------------------

    def search(self, term: str) -> asyncio.Task:
        """
        Schedule a search-term update.

        A new keystroke within the debounce window cancels the pending one.
        Once the pending update has started fetching it is left to finish;
        supersession discards its result if a newer state follows.
        """
        pending = self._pending_search
        if pending is not None and not pending.done() and pending is not self._fetching_search:
            pending.cancel()
        self._pending_search = asyncio.ensure_future(self._debounced_search(term))
        return self._pending_search

    async def _debounced_search(self, term: str) -> bool:
        await asyncio.sleep(self.search_debounce_seconds)
        self._fetching_search = asyncio.current_task()
        try:
            return await self.apply(FilterState.set_search_term, term)
        finally:
            if self._fetching_search is asyncio.current_task():
                self._fetching_search = None

    async def flush_search(self) -> Optional[bool]:
        """Wait for the pending search update, if any."""
        task = self._pending_search
        if task is None:
            return None
        try:
            return await task
        except asyncio.CancelledError:
            return None
