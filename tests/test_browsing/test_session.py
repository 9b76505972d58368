"""Tests for the browsing session."""

import asyncio

import httpx

from browsing.orchestrator import FetchOrchestrator
from browsing.session import BrowsingSession
from browsing.state import FilterState
from browsing.url_codec import MemoryNavigator, UrlSynchronizer


class FakeEndpoint:
    """Records requests and answers with a fixed page count."""

    def __init__(self, total_count=60, page_size=25):
        self.requests = []
        self.total_count = total_count
        self.page_size = page_size

    def __call__(self, request):
        self.requests.append(dict(request.url.params))
        total_pages = -(-self.total_count // self.page_size)
        return httpx.Response(200, json={
            "products": [{"id": 1}],
            "totalCount": self.total_count,
            "page": int(request.url.params["page"]),
            "pageSize": self.page_size,
            "totalPages": total_pages,
            "canAccessCompetitive": True,
        })


def run_session(scenario, query="", endpoint=None, debounce=0.01):
    """Run an async scenario against a fresh session; return (session, endpoint, navigator)."""
    endpoint = endpoint or FakeEndpoint()
    navigator = MemoryNavigator(query)

    async def go():
        transport = httpx.MockTransport(endpoint)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            session = BrowsingSession(
                FetchOrchestrator(client, "/api/daily-products"),
                UrlSynchronizer(navigator),
                search_debounce_seconds=debounce,
            )
            await scenario(session)
            return session

    session = asyncio.run(go())
    return session, endpoint, navigator


class TestLoad:
    """Tests for seeding a session from the URL."""

    def test_load_from_navigator(self):
        async def scenario(session):
            await session.load()

        session, endpoint, navigator = run_session(scenario, query="category=1&rarity=Common")

        assert session.state.category == 1
        assert session.state.rarities == frozenset({"Common"})
        assert len(endpoint.requests) == 1
        assert endpoint.requests[0]["category"] == "1"
        assert navigator.replace_count == 0

    def test_load_canonicalizes_url(self):
        async def scenario(session):
            await session.load("rarity=Rare,Common&page=1&bogus=1")

        session, _, navigator = run_session(scenario)
        assert navigator.current_query() == "category=3&rarity=Common,Rare"


class TestApply:
    """Tests for transitions driven through the session."""

    def test_change_syncs_url_and_fetches(self):
        results = []

        async def scenario(session):
            await session.load()
            results.append(await session.apply(FilterState.set_price_range, "5-20"))

        session, endpoint, navigator = run_session(scenario)

        assert results == [True]
        assert navigator.current_query() == "category=3&price=5-20"
        assert len(endpoint.requests) == 2
        assert endpoint.requests[-1]["price"] == "5-20"

    def test_noop_does_not_fetch(self):
        results = []

        async def scenario(session):
            await session.load()
            results.append(await session.update(FilterState.set_category, 3))

        _, endpoint, navigator = run_session(scenario)

        assert results == [False]
        assert len(endpoint.requests) == 1
        assert navigator.replace_count == 1


class TestNavigate:
    """Tests for inbound URL navigation."""

    def test_echo_is_ignored(self):
        results = []

        async def scenario(session):
            await session.load()
            await session.apply(FilterState.set_rarities, ["Rare"])
            results.append(await session.navigate(session.url_sync.navigator.current_query()))

        _, endpoint, _ = run_session(scenario)

        assert results == [False]
        assert len(endpoint.requests) == 2

    def test_back_navigation_refetches(self):
        async def scenario(session):
            await session.load()
            await session.apply(FilterState.set_rarities, ["Rare"])
            await session.navigate("category=3")

        session, endpoint, _ = run_session(scenario)

        assert session.state == FilterState.default()
        assert len(endpoint.requests) == 3
        assert endpoint.requests[-1]["rarity"] == ""


class TestPagination:
    """Tests for page navigation."""

    def test_go_to_page_clamps_to_last_page(self):
        async def scenario(session):
            await session.load()
            await session.go_to_page(10)

        session, endpoint, _ = run_session(scenario, endpoint=FakeEndpoint(total_count=60))

        assert session.state.page == 3
        assert endpoint.requests[-1]["page"] == "3"

    def test_go_to_page_before_first(self):
        results = []

        async def scenario(session):
            await session.load()
            results.append(await session.go_to_page(0))

        session, _, _ = run_session(scenario)
        assert results == [False]
        assert session.state.page == 1


class TestDebouncedSearch:
    """Tests for debounced free-text search."""

    def test_burst_issues_one_fetch(self):
        async def scenario(session):
            await session.load()
            session.search("c")
            session.search("ch")
            session.search("char")
            await asyncio.sleep(0)
            session.search("chari")
            await session.flush_search()

        session, endpoint, navigator = run_session(scenario)

        assert session.state.search_term == "chari"
        assert len(endpoint.requests) == 2
        assert endpoint.requests[-1]["q"] == "chari"
        assert navigator.current_query() == "category=3&q=chari"

    def test_separate_searches_both_fetch(self):
        async def scenario(session):
            await session.load()
            session.search("mew")
            await session.flush_search()
            session.search("pikachu")
            await session.flush_search()

        session, endpoint, _ = run_session(scenario)

        assert [r["q"] for r in endpoint.requests[1:]] == ["mew", "pikachu"]

    def test_flush_without_search(self):
        results = []

        async def scenario(session):
            results.append(await session.flush_search())

        run_session(scenario)
        assert results == [None]
