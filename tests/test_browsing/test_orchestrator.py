"""Tests for the fetch orchestrator."""

import asyncio
import logging

import httpx

from browsing.orchestrator import (
    GENERIC_ERROR_MESSAGE,
    AccessLevel,
    FetchOrchestrator,
    FetchStatus,
    QueryResult,
    create_client,
)
from browsing.state import FilterState
from config import config

ENDPOINT = "/api/daily-products"


def products_body(ids, total_count=None, page_size=25, **extra):
    body = {
        "products": [{"id": i, "name": f"Product {i}"} for i in ids],
        "totalCount": len(ids) if total_count is None else total_count,
        "page": 1,
        "pageSize": page_size,
        "totalPages": 1,
        "canAccessCompetitive": True,
    }
    body.update(extra)
    return body


def run_fetches(handler, *states):
    """Run fetches sequentially against a mock endpoint; return the orchestrator."""
    async def go():
        transport = httpx.MockTransport(handler)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            orchestrator = FetchOrchestrator(client, ENDPOINT)
            applied = [await orchestrator.fetch(state) for state in states]
            return orchestrator, applied

    return asyncio.run(go())


class TestSuccess:
    """Tests for successful fetches."""

    def test_initial_state(self):
        orchestrator = FetchOrchestrator(httpx.AsyncClient(), ENDPOINT)
        assert orchestrator.status is FetchStatus.IDLE
        assert orchestrator.result == QueryResult()

    def test_success(self):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json=products_body([1, 2, 3], total_count=60, totalPages=3))

        orchestrator, applied = run_fetches(handler, FilterState.default())

        assert applied == [True]
        assert orchestrator.status is FetchStatus.SUCCESS
        assert [item["id"] for item in orchestrator.result.items] == [1, 2, 3]
        assert orchestrator.result.total_count == 60
        assert orchestrator.result.total_pages == 3
        assert orchestrator.result.access_level is AccessLevel.FULL
        assert orchestrator.error_message is None

        params = requests[0].url.params
        assert requests[0].url.path == ENDPOINT
        assert params["category"] == "3"
        assert params["type"] == "card"
        assert params["sort_by"] == "diff_market_price"
        assert params["limit"] == "25"

    def test_total_pages_derived_when_missing(self):
        def handler(request):
            body = products_body([1], total_count=51)
            del body["totalPages"]
            return httpx.Response(200, json=body)

        orchestrator, _ = run_fetches(handler, FilterState.default())
        assert orchestrator.result.total_pages == 3

    def test_loading_keeps_previous_items(self):
        observed = []
        orchestrator_ref = {}

        def handler(request):
            orchestrator = orchestrator_ref.get("o")
            if orchestrator is not None:
                observed.append((orchestrator.status, len(orchestrator.result.items)))
            return httpx.Response(200, json=products_body([1, 2]))

        async def go():
            transport = httpx.MockTransport(handler)
            async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
                orchestrator = FetchOrchestrator(client, ENDPOINT)
                orchestrator_ref["o"] = orchestrator
                await orchestrator.fetch(FilterState.default())
                await orchestrator.fetch(FilterState.default().set_rarities(["Rare"]))

        asyncio.run(go())
        assert observed == [(FetchStatus.LOADING, 0), (FetchStatus.LOADING, 2)]


class TestAccessDenied:
    """Tests for restricted-access responses."""

    def test_forbidden_with_preview(self):
        def handler(request):
            return httpx.Response(403, json={
                "error": "Access denied",
                "products": [{"id": i} for i in range(3)],
                "totalCount": 3,
                "totalPages": 1,
            })

        orchestrator, _ = run_fetches(handler, FilterState.default())

        assert orchestrator.status is FetchStatus.ACCESS_DENIED
        assert orchestrator.access_denied is True
        assert len(orchestrator.result.items) == 3
        assert orchestrator.result.total_count == 3
        assert orchestrator.result.total_pages == 1
        assert orchestrator.result.access_level is AccessLevel.RESTRICTED
        assert orchestrator.error_message is None

    def test_forbidden_with_legacy_cards_key(self):
        def handler(request):
            return httpx.Response(403, json={
                "cards": [{"id": i} for i in range(12)],
                "totalCount": 12,
                "totalPages": 1,
            })

        orchestrator, _ = run_fetches(handler, FilterState.default())
        assert orchestrator.status is FetchStatus.ACCESS_DENIED
        assert len(orchestrator.result.items) == 12

    def test_forbidden_with_error_body_only(self):
        def handler(request):
            return httpx.Response(403, json={"error": "Access denied", "details": "x"})

        orchestrator, _ = run_fetches(handler, FilterState.default())

        assert orchestrator.status is FetchStatus.ACCESS_DENIED
        assert orchestrator.access_denied is True
        assert orchestrator.error_message is None
        assert orchestrator.result.items == []
        assert orchestrator.result.total_count == 0
        assert orchestrator.result.total_pages == 0
        assert orchestrator.result.access_level is AccessLevel.RESTRICTED

    def test_forbidden_with_text_body(self):
        def handler(request):
            return httpx.Response(403, text="Forbidden")

        orchestrator, _ = run_fetches(handler, FilterState.default())

        assert orchestrator.status is FetchStatus.ACCESS_DENIED
        assert orchestrator.access_denied is True
        assert orchestrator.error_message is None
        assert orchestrator.result.items == []

    def test_forbidden_with_unusable_counts(self):
        def handler(request):
            return httpx.Response(403, json={
                "products": [{"id": 1}],
                "totalCount": "many",
                "totalPages": None,
            })

        orchestrator, _ = run_fetches(handler, FilterState.default())

        assert orchestrator.status is FetchStatus.ACCESS_DENIED
        assert orchestrator.result.total_count == 1
        assert orchestrator.result.total_pages == 1

    def test_success_without_competitive_access(self):
        def handler(request):
            return httpx.Response(200, json=products_body([1, 2], canAccessCompetitive=False))

        orchestrator, _ = run_fetches(handler, FilterState.default())
        assert orchestrator.status is FetchStatus.ACCESS_DENIED
        assert len(orchestrator.result.items) == 2

    def test_next_fetch_clears_denied_flag(self):
        responses = iter([
            httpx.Response(403, json={"products": [], "totalCount": 0, "totalPages": 1}),
            httpx.Response(200, json=products_body([5])),
        ])

        orchestrator, _ = run_fetches(
            lambda request: next(responses),
            FilterState.default(),
            FilterState.default().set_page(2),
        )
        assert orchestrator.status is FetchStatus.SUCCESS
        assert orchestrator.access_denied is False


class TestErrors:
    """Tests for failed fetches."""

    def test_server_error(self, caplog):
        responses = iter([
            httpx.Response(200, json=products_body([1, 2])),
            httpx.Response(500, json={"error": "Failed to load products"}),
        ])

        with caplog.at_level(logging.ERROR, logger="tcg_trends"):
            orchestrator, applied = run_fetches(
                lambda request: next(responses),
                FilterState.default(),
                FilterState.default().set_page(2),
            )

        assert applied == [True, True]
        assert orchestrator.status is FetchStatus.ERROR
        assert orchestrator.result.items == []
        assert orchestrator.result.total_count == 0
        assert orchestrator.error_message == GENERIC_ERROR_MESSAGE
        assert any("Error fetching products" in r.message for r in caplog.records)

    def test_bad_request_is_error(self):
        def handler(request):
            return httpx.Response(400, json={"error": "Invalid request"})

        orchestrator, _ = run_fetches(handler, FilterState.default().set_product_types(["x"]))
        assert orchestrator.status is FetchStatus.ERROR

    def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        orchestrator, _ = run_fetches(handler, FilterState.default())
        assert orchestrator.status is FetchStatus.ERROR
        assert orchestrator.error_message == GENERIC_ERROR_MESSAGE

    def test_malformed_body(self):
        def handler(request):
            return httpx.Response(200, text="<html>oops</html>")

        orchestrator, _ = run_fetches(handler, FilterState.default())
        assert orchestrator.status is FetchStatus.ERROR

    def test_body_without_products(self):
        def handler(request):
            return httpx.Response(200, json={"totalCount": 4})

        orchestrator, _ = run_fetches(handler, FilterState.default())
        assert orchestrator.status is FetchStatus.ERROR

    def test_no_retry(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(502)

        run_fetches(handler, FilterState.default())
        assert len(calls) == 1


class TestSupersession:
    """Tests for discarding stale results."""

    def test_slow_stale_response_is_discarded(self):
        first = FilterState.default()
        second = FilterState.default().set_rarities(["Rare"])

        async def handler(request):
            if request.url.params["rarity"] == "Rare":
                return httpx.Response(200, json=products_body([2]))
            await asyncio.sleep(0.05)
            return httpx.Response(200, json=products_body([1]))

        async def go():
            transport = httpx.MockTransport(handler)
            async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
                orchestrator = FetchOrchestrator(client, ENDPOINT)
                applied = await asyncio.gather(
                    orchestrator.fetch(first),
                    orchestrator.fetch(second),
                )
                return orchestrator, applied

        orchestrator, applied = asyncio.run(go())

        assert applied == [False, True]
        assert [item["id"] for item in orchestrator.result.items] == [2]
        assert orchestrator.latest_state == second
        assert orchestrator.status is FetchStatus.SUCCESS

    def test_stale_failure_does_not_clobber(self):
        first = FilterState.default()
        second = FilterState.default().set_page(2)

        async def handler(request):
            if request.url.params["page"] == "2":
                return httpx.Response(200, json=products_body([7]))
            await asyncio.sleep(0.05)
            return httpx.Response(500)

        async def go():
            transport = httpx.MockTransport(handler)
            async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
                orchestrator = FetchOrchestrator(client, ENDPOINT)
                await asyncio.gather(orchestrator.fetch(first), orchestrator.fetch(second))
                return orchestrator

        orchestrator = asyncio.run(go())
        assert orchestrator.status is FetchStatus.SUCCESS
        assert orchestrator.error_message is None


class TestClientSettings:
    """Tests for request timeout and client construction."""

    def test_timeout_applied_to_request(self):
        timeouts = []

        def handler(request):
            timeouts.append(request.extensions["timeout"])
            return httpx.Response(200, json=products_body([1]))

        async def go():
            transport = httpx.MockTransport(handler)
            async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
                await FetchOrchestrator(client, ENDPOINT, timeout=2.5).fetch(FilterState.default())

        asyncio.run(go())
        assert timeouts[0]["read"] == 2.5
        assert timeouts[0]["connect"] == 2.5

    def test_timeout_defaults_to_config(self, monkeypatch):
        monkeypatch.setattr(config.browsing, "request_timeout", 7.0)
        orchestrator = FetchOrchestrator(httpx.AsyncClient(), ENDPOINT)
        assert orchestrator.timeout == 7.0

    def test_create_client_uses_config(self, monkeypatch):
        monkeypatch.setattr(config.browsing, "api_base_url", "http://catalog.test:9000")
        monkeypatch.setattr(config.browsing, "request_timeout", 4.0)

        client = create_client()
        assert str(client.base_url) == "http://catalog.test:9000"
        assert client.timeout.read == 4.0

        assert str(create_client("http://other.test").base_url) == "http://other.test"
