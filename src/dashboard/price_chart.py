"""
Dofus Retro Tracker - Price chart

Loads the recent price history of the selected item and derives the chart
series and summary statistics.

Each load() bumps a generation counter; a response that arrives after a
newer load() started is dropped, so switching items quickly can never show
the previous item's prices.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Callable

import structlog

from src.client.api_client import ApiClient
from src.config import settings
from src.engine.price_stats import PriceStats, compute_price_stats
from src.schemas import ItemDTO, PriceEntryDTO

logger = structlog.get_logger(__name__)


def _utc_today() -> date:
    # The server reads startDate/endDate as UTC days
    return datetime.now(timezone.utc).date()


@dataclass(frozen=True)
class ChartSeries:
    """Parallel arrays for a time-series chart, oldest point first."""

    timestamps: list[datetime] = field(default_factory=list)
    prices: list[int] = field(default_factory=list)
    quantities: list[int] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.timestamps


class PriceChart:
    """State behind the price history chart."""

    def __init__(
        self,
        client: ApiClient,
        history_days: int | None = None,
        today: Callable[[], date] | None = None,
    ):
        self._client = client
        self._history_days = (
            history_days if history_days is not None else settings.PRICE_HISTORY_DAYS
        )
        self._today = today or _utc_today
        self._generation = 0

        self.item: ItemDTO | None = None
        self.prices: list[PriceEntryDTO] = []
        self.is_loading: bool = False
        self.has_error: bool = False

    async def load(self, item: ItemDTO | None) -> None:
        """Fetch the last ``history_days`` days of prices for ``item``."""
        if item is None:
            return

        self.item = item
        self._generation += 1
        generation = self._generation

        self.is_loading = True
        self.has_error = False

        end_date = self._today()
        start_date = end_date - timedelta(days=self._history_days)

        try:
            prices = await self._client.list_item_prices(item.id, start_date, end_date)
        except Exception as e:
            if generation != self._generation:
                return
            logger.warning("price_chart_load_failed", item_id=item.id, error=str(e))
            self.prices = []
            self.has_error = True
            self.is_loading = False
            return

        if generation != self._generation:
            logger.debug("price_chart_stale_response_dropped", item_id=item.id)
            return

        self.prices = list(prices)
        self.is_loading = False

    async def retry(self) -> None:
        await self.load(self.item)

    def clear(self) -> None:
        # Any in-flight response now belongs to an old generation
        self._generation += 1
        self.item = None
        self.prices = []
        self.is_loading = False
        self.has_error = False

    @property
    def stats(self) -> PriceStats | None:
        return compute_price_stats(self.prices)

    @property
    def series(self) -> ChartSeries:
        ordered = sorted(self.prices, key=lambda p: p.created_at)
        return ChartSeries(
            timestamps=[p.created_at for p in ordered],
            prices=[p.price for p in ordered],
            quantities=[p.quantity for p in ordered],
        )
