"""
Dofus Retro Tracker - Dashboard

Wires the item selector to the price chart and renders both as text for
the command-line dashboard.
"""

from __future__ import annotations

import structlog

from src.client.api_client import ApiClient
from src.client.notifier import InMemoryNotifier
from src.dashboard.item_selector import ItemSelector
from src.dashboard.price_chart import PriceChart
from src.schemas import ItemDTO

logger = structlog.get_logger(__name__)


class Dashboard:
    """
    Item search on one side, price history of the selected item on the other.

    Usage:
        notifier = InMemoryNotifier()
        async with ApiClient(notifier=notifier) as client:
            dashboard = Dashboard(client, notifier)
            await dashboard.start()
            await dashboard.item_selector.search("wheat")
            await dashboard.item_selector.select(dashboard.item_selector.items[0])
            print(dashboard.render())
    """

    def __init__(self, client: ApiClient, notifier: InMemoryNotifier | None = None):
        self.notifier = notifier
        self.price_chart = PriceChart(client)
        self.item_selector = ItemSelector(client, on_select=self._on_item_selected)

    @property
    def selected_item(self) -> ItemDTO | None:
        return self.price_chart.item

    async def start(self) -> None:
        await self.item_selector.load_categories()

    async def _on_item_selected(self, item: ItemDTO) -> None:
        await self.price_chart.load(item)

    def clear_selection(self) -> None:
        self.item_selector.selected = None
        self.price_chart.clear()

    def render(self) -> str:
        """Plain-text view of the current dashboard state."""
        lines: list[str] = []

        if self.notifier is not None:
            for notification in self.notifier.visible():
                lines.append(f"[!] {notification.message}")

        selector = self.item_selector
        lines.append(f"Search: {selector.search_text or '-'}")
        if selector.is_loading:
            lines.append("  loading...")
        elif selector.has_error:
            lines.append("  Failed to load items (retry available)")
        elif selector.result is not None:
            result = selector.result
            for item in result.content:
                name = item.item_name or f"Item #{item.item_gid}"
                category = item.category.name if item.category else "-"
                lines.append(f"  [{item.id}] {name} ({category})")
            lines.append(
                f"  page {result.page_number + 1}/{max(result.total_pages, 1)}"
                f" - {result.total_elements} items"
            )

        chart = self.price_chart
        if chart.item is None:
            lines.append("No item selected")
            return "\n".join(lines)

        lines.append(f"Price history: {chart.item.item_name or chart.item.item_gid}")
        if chart.is_loading:
            lines.append("  loading...")
        elif chart.has_error:
            lines.append("  Failed to load price data (retry available)")
        else:
            stats = chart.stats
            if stats is None:
                lines.append("  No statistics available")
            else:
                lines.append(
                    f"  min {stats.min:,} | max {stats.max:,} | "
                    f"avg {stats.avg:,} | {stats.count} observations"
                )
            series = chart.series
            for ts, price, quantity in zip(series.timestamps, series.prices, series.quantities):
                lines.append(f"  {ts:%Y-%m-%d %H:%M}  x{quantity:<3}  {price:>12,} kamas")

        return "\n".join(lines)
