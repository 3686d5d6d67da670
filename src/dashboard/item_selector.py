"""
Dofus Retro Tracker - Item selector

Search-as-you-type over items with an optional category filter. Terms
shorter than MIN_SEARCH_LENGTH clear the results without calling the API.
"""

from __future__ import annotations

from typing import Awaitable, Callable

import structlog

from src.client.api_client import ApiClient
from src.config import settings
from src.schemas import CategoryDTO, ItemDTO, PagedResponse

logger = structlog.get_logger(__name__)

SelectCallback = Callable[[ItemDTO], Awaitable[None]]


class ItemSelector:
    """
    State behind the item search box.

    Failures are already retried and reported by the client's interceptor;
    here they only set ``has_error`` so the UI can offer ``retry()``.
    """

    def __init__(
        self,
        client: ApiClient,
        page_size: int | None = None,
        on_select: SelectCallback | None = None,
    ):
        self._client = client
        self._page_size = (
            page_size if page_size is not None else settings.CLIENT_DEFAULT_PAGE_SIZE
        )
        self._on_select = on_select
        self._generation = 0
        # Page of the most recent request, which retry() repeats
        self._requested_page = 0

        self.search_text: str = ""
        self.category_id: int | None = None
        self.categories: list[CategoryDTO] = []
        self.result: PagedResponse[ItemDTO] | None = None
        self.selected: ItemDTO | None = None
        self.is_loading: bool = False
        self.has_error: bool = False

    @property
    def items(self) -> list[ItemDTO]:
        return list(self.result.content) if self.result else []

    async def load_categories(self) -> None:
        """Fill the category filter. A failure leaves the filter empty."""
        try:
            self.categories = await self._client.list_categories()
        except Exception as e:
            logger.warning("item_selector_categories_failed", error=str(e))
            self.categories = []

    async def search(self, text: str) -> None:
        """Run a new search from page 0. Repeating the current term is a no-op."""
        text = text.strip()
        if text == self.search_text and self.result is not None:
            return
        self.search_text = text
        await self._load(page=0)

    async def filter_by_category(self, category_id: int | None) -> None:
        """Change the category filter and re-run the current search."""
        self.category_id = category_id
        await self._load(page=0)

    async def next_page(self) -> None:
        if self.result is not None and self.result.has_next:
            await self._load(page=self.result.page_number + 1)

    async def previous_page(self) -> None:
        if self.result is not None and self.result.has_previous:
            await self._load(page=self.result.page_number - 1)

    async def retry(self) -> None:
        """Repeat the most recent request, including one that failed."""
        await self._load(page=self._requested_page)

    async def select(self, item: ItemDTO) -> None:
        self.selected = item
        logger.info("item_selected", item_id=item.id, item_gid=item.item_gid)
        if self._on_select is not None:
            await self._on_select(item)

    async def _load(self, page: int) -> None:
        self._generation += 1
        generation = self._generation
        self._requested_page = page

        if len(self.search_text) < settings.MIN_SEARCH_LENGTH:
            self.result = None
            self.is_loading = False
            self.has_error = False
            return

        self.is_loading = True
        self.has_error = False
        try:
            result = await self._client.list_items(
                page=page,
                size=self._page_size,
                search=self.search_text,
                category_id=self.category_id,
            )
        except Exception as e:
            if generation != self._generation:
                return
            logger.warning(
                "item_selector_load_failed",
                search=self.search_text,
                page=page,
                error=str(e),
            )
            self.is_loading = False
            self.has_error = True
            return

        if generation != self._generation:
            logger.debug("item_selector_stale_response_dropped", page=page)
            return

        self.result = result
        self.is_loading = False
