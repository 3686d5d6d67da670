"""
Dofus Retro Tracker - REST API client

Async client for the tracker's own REST API, used by the dashboard. Every
call goes through RetryInterceptor, so callers only see an exception once
retries are exhausted and the user has already been notified.

Query contract:
    - page and size are always sent
    - search, categoryId, startDate, endDate are sent only when provided
"""

from __future__ import annotations

from datetime import date
from typing import Any, Callable, TypeVar

import httpx
import structlog
from pydantic import TypeAdapter

from src.client.interceptor import RetryInterceptor
from src.client.notifier import Notifier
from src.config import settings
from src.schemas import CategoryDTO, ItemDTO, PagedResponse, PriceEntryDTO

logger = structlog.get_logger(__name__)

T = TypeVar("T")

_ITEM_LIST = TypeAdapter(list[ItemDTO])
_CATEGORY_LIST = TypeAdapter(list[CategoryDTO])
_PRICE_LIST = TypeAdapter(list[PriceEntryDTO])


# ---------------------------------------------------------------------------
# Query builders
# ---------------------------------------------------------------------------


def build_item_query(
    page: int = 0,
    size: int | None = None,
    search: str | None = None,
    category_id: int | None = None,
) -> dict[str, str]:
    """
    Query parameters for GET /items.

    An empty search string is treated as absent; category id 0 is a real id
    and is sent.
    """
    params = {
        "page": str(page),
        "size": str(size if size is not None else settings.CLIENT_DEFAULT_PAGE_SIZE),
    }
    if search:
        params["search"] = search
    if category_id is not None:
        params["categoryId"] = str(category_id)
    return params


def _iso_date(value: date | str) -> str:
    if isinstance(value, date):
        return value.isoformat()
    # Normalises and rejects anything that is not YYYY-MM-DD
    return date.fromisoformat(value).isoformat()


def build_price_query(
    start_date: date | str | None = None,
    end_date: date | str | None = None,
) -> dict[str, str]:
    """Query parameters for GET /items/{id}/prices. Bounds are independent."""
    params: dict[str, str] = {}
    if start_date:
        params["startDate"] = _iso_date(start_date)
    if end_date:
        params["endDate"] = _iso_date(end_date)
    return params


# ---------------------------------------------------------------------------
# API Client
# ---------------------------------------------------------------------------


class ApiClient:
    """
    Async client for the price tracker API.

    Usage:
        async with ApiClient(notifier=InMemoryNotifier()) as client:
            page = await client.list_items(search="wheat")
            prices = await client.list_item_prices(page.content[0].id)
    """

    def __init__(
        self,
        base_url: str | None = None,
        notifier: Notifier | None = None,
        interceptor: RetryInterceptor | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self._interceptor = interceptor or RetryInterceptor(notifier=notifier)
        self._timeout = timeout if timeout is not None else settings.HTTP_TIMEOUT_SECONDS
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> ApiClient:
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={"Accept": "application/json"},
            timeout=self._timeout,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *args: Any) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        path: str,
        parse: Callable[[Any], T],
        params: dict[str, str] | None = None,
    ) -> T:
        """GET ``path`` through the interceptor and parse the JSON body."""
        assert self._client is not None, "Client not initialized. Use 'async with'."
        client = self._client

        request = client.build_request("GET", self._base_url + path, params=params)

        async def send(req: httpx.Request) -> T:
            response = await client.send(req)
            response.raise_for_status()
            return parse(response.json())

        return await self._interceptor.intercept(request, send)

    # -----------------------------------------------------------------------
    # Items
    # -----------------------------------------------------------------------

    async def list_items(
        self,
        page: int = 0,
        size: int | None = None,
        search: str | None = None,
        category_id: int | None = None,
    ) -> PagedResponse[ItemDTO]:
        """One page of items, optionally filtered by name and category."""
        params = build_item_query(page, size, search, category_id)
        logger.debug("api_list_items", **params)
        return await self._request(
            "/items", PagedResponse[ItemDTO].model_validate, params=params
        )

    async def get_item(self, item_id: int) -> ItemDTO:
        return await self._request(f"/items/{item_id}", ItemDTO.model_validate)

    async def list_item_prices(
        self,
        item_id: int,
        start_date: date | str | None = None,
        end_date: date | str | None = None,
    ) -> list[PriceEntryDTO]:
        """
        Price observations of one item between inclusive day bounds.

        The list comes back in arrival order; sort it yourself for display.
        """
        params = build_price_query(start_date, end_date)
        return await self._request(
            f"/items/{item_id}/prices", _PRICE_LIST.validate_python, params=params
        )

    # -----------------------------------------------------------------------
    # Categories
    # -----------------------------------------------------------------------

    async def list_categories(self) -> list[CategoryDTO]:
        return await self._request("/categories", _CATEGORY_LIST.validate_python)

    async def get_category(self, category_id: int) -> CategoryDTO:
        return await self._request(f"/categories/{category_id}", CategoryDTO.model_validate)

    async def list_category_items(self, category_id: int) -> list[ItemDTO]:
        return await self._request(
            f"/categories/{category_id}/items", _ITEM_LIST.validate_python
        )

    # -----------------------------------------------------------------------
    # Health
    # -----------------------------------------------------------------------

    async def health_check(self) -> dict[str, Any]:
        return await self._request("/health", dict)
