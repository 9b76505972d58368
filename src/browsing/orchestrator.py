"""Fetch orchestration for a browsing session.

One fetch is issued per meaningful state change. Each fetch carries the
FilterState it was issued for; when it completes, its result is applied only
if that state is still the latest one issued, so a slow response can never
overwrite a newer one.

Status transitions:
    IDLE -> LOADING -> SUCCESS | ACCESS_DENIED | ERROR -> LOADING -> ...
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

import httpx

from config import config
from config.logging_config import get_logger
from browsing.state import FilterState
from browsing.url_codec import to_request_params

logger = get_logger("orchestrator")

GENERIC_ERROR_MESSAGE = "Failed to load products. Please try again."


class FetchStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ACCESS_DENIED = "access_denied"
    ERROR = "error"


class AccessLevel(str, Enum):
    FULL = "full"
    RESTRICTED = "restricted"


class MalformedResponseError(ValueError):
    """Response body is not a usable product listing."""


@dataclass
class QueryResult:
    """Products returned for one FilterState."""

    items: List[Dict[str, Any]] = field(default_factory=list)
    total_count: int = 0
    page: int = 1
    page_size: int = 0
    total_pages: int = 0
    access_level: AccessLevel = AccessLevel.FULL


def _parse_result(body: Any, state: FilterState, access_level: AccessLevel) -> QueryResult:
    if not isinstance(body, dict):
        raise MalformedResponseError("Response body is not an object")

    items = body.get("products")
    if items is None:
        # Older restricted responses carried the preview under "cards"
        items = body.get("cards")
    if not isinstance(items, list):
        raise MalformedResponseError("Response body has no product list")

    try:
        total_count = int(body.get("totalCount", len(items)))
        page_size = int(body.get("pageSize", state.page_size))
        total_pages = body.get("totalPages")
        if total_pages is None:
            total_pages = math.ceil(total_count / page_size) if page_size else 0
        total_pages = int(total_pages)
        page = int(body.get("page", state.page))
    except (TypeError, ValueError) as e:
        raise MalformedResponseError(f"Invalid pagination fields: {e}")

    return QueryResult(
        items=items,
        total_count=total_count,
        page=page,
        page_size=page_size,
        total_pages=total_pages,
        access_level=access_level,
    )


def create_client(base_url: Optional[str] = None) -> httpx.AsyncClient:
    """AsyncClient pointed at the catalog API."""
    return httpx.AsyncClient(
        base_url=base_url or config.browsing.api_base_url,
        timeout=config.browsing.request_timeout,
    )


def _parse_preview(response: httpx.Response, state: FilterState) -> QueryResult:
    """Read whatever preview a 403 carries; a missing or unreadable body is an empty preview."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if not isinstance(body, dict):
        body = {}

    items = body.get("products")
    if items is None:
        items = body.get("cards")
    if not isinstance(items, list):
        items = []

    def count(key: str, default: int) -> int:
        try:
            return int(body.get(key, default))
        except (TypeError, ValueError):
            return default

    return QueryResult(
        items=items,
        total_count=count("totalCount", len(items)),
        page=count("page", state.page),
        page_size=count("pageSize", state.page_size),
        total_pages=count("totalPages", 1 if items else 0),
        access_level=AccessLevel.RESTRICTED,
    )


class FetchOrchestrator:
    """
    Issues product reads and tracks the latest result.

    Usage:
        async with create_client() as client:
            orchestrator = FetchOrchestrator(client)
            await orchestrator.fetch(FilterState.default())
            orchestrator.result.items
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        endpoint: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.client = client
        self.endpoint = endpoint or config.browsing.products_endpoint
        self.timeout = timeout if timeout is not None else config.browsing.request_timeout

        self.status = FetchStatus.IDLE
        self.result = QueryResult()
        self.error_message: Optional[str] = None
        self.access_denied = False

        self._latest: Optional[FilterState] = None
        self._issued = 0

    @property
    def latest_state(self) -> Optional[FilterState]:
        """The state of the most recently issued fetch."""
        return self._latest

    def _begin(self, state: FilterState) -> int:
        self._issued += 1
        self._latest = state
        self.status = FetchStatus.LOADING
        self.error_message = None
        self.access_denied = False
        return self._issued

    def _is_current(self, state: FilterState, ticket: int) -> bool:
        # A repeated fetch of an equal state still supersedes the earlier one
        return ticket == self._issued and state == self._latest

    async def fetch(self, state: FilterState) -> bool:
        """
        Fetch products for a state.

        Prior items stay visible while loading.

        Returns:
            True if the outcome was applied, False if it was superseded.
        """
        ticket = self._begin(state)
        params = to_request_params(state)
        logger.debug(f"Fetching products (#{ticket}): {params}")

        try:
            response = await self.client.get(
                self.endpoint, params=params, timeout=self.timeout
            )
            status, result = self._classify(response, state)
        except (httpx.HTTPError, MalformedResponseError, ValueError) as e:
            if not self._is_current(state, ticket):
                logger.debug(f"Discarding failed superseded fetch #{ticket}")
                return False
            logger.error(f"Error fetching products: {e}")
            self._fail()
            return True

        if not self._is_current(state, ticket):
            logger.debug(f"Discarding superseded fetch #{ticket}")
            return False

        self.status = status
        self.result = result
        self.access_denied = status is FetchStatus.ACCESS_DENIED
        if self.access_denied:
            logger.info(
                f"Access restricted: showing {len(result.items)} preview products"
            )
        return True

    def _classify(self, response: httpx.Response, state: FilterState):
        if response.status_code == 403:
            return FetchStatus.ACCESS_DENIED, _parse_preview(response, state)

        if response.status_code != 200:
            raise MalformedResponseError(
                f"Unexpected status {response.status_code} from {self.endpoint}"
            )

        body = response.json()
        if isinstance(body, dict) and body.get("canAccessCompetitive") is False:
            return FetchStatus.ACCESS_DENIED, _parse_result(
                body, state, AccessLevel.RESTRICTED
            )
        return FetchStatus.SUCCESS, _parse_result(body, state, AccessLevel.FULL)

    def _fail(self) -> None:
        self.status = FetchStatus.ERROR
        self.result = QueryResult()
        self.error_message = GENERIC_ERROR_MESSAGE
        self.access_denied = False
