"""
Dofus Retro Tracker - Command-line dashboard

Searches items through the REST API and prints the price history of one of
them, the same way the web dashboard does.

Usage:
    python scripts/dashboard.py --search wheat
    python scripts/dashboard.py --search ore --category-id 3 --select 1
    python scripts/dashboard.py --item-id 42
"""

from __future__ import annotations

import argparse
import asyncio
import os
import sys

# Resolve project root so this script can be run from any working directory
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from src.client.api_client import ApiClient
from src.client.notifier import InMemoryNotifier
from src.config import settings
from src.dashboard import Dashboard
from src.logging_setup import configure_logging


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Browse auction house prices from the terminal.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/dashboard.py --search wheat
  python scripts/dashboard.py --search ore --category-id 3 --select 1
  python scripts/dashboard.py --item-id 42 --api-url http://tracker:8080/api/v1
""",
    )
    parser.add_argument("--search", type=str, default="", help="Item name to search for.")
    parser.add_argument(
        "--category-id",
        type=int,
        default=None,
        help="Restrict the search to one category (local id).",
    )
    parser.add_argument(
        "--select",
        type=int,
        default=None,
        help="1-based position in the search results whose prices to show.",
    )
    parser.add_argument(
        "--item-id",
        type=int,
        default=None,
        help="Show the price history of this item id directly.",
    )
    parser.add_argument(
        "--api-url",
        type=str,
        default=settings.API_BASE_URL,
        help=f"API base URL (default: {settings.API_BASE_URL}).",
    )
    return parser.parse_args()


async def run(args: argparse.Namespace) -> int:
    notifier = InMemoryNotifier()

    async with ApiClient(base_url=args.api_url, notifier=notifier) as client:
        dashboard = Dashboard(client, notifier)
        await dashboard.start()

        if args.category_id is not None:
            dashboard.item_selector.category_id = args.category_id
        if args.search:
            await dashboard.item_selector.search(args.search)

        if args.item_id is not None:
            try:
                item = await client.get_item(args.item_id)
            except Exception:
                # Already reported through the notifier
                item = None
            if item is not None:
                await dashboard.item_selector.select(item)
        elif args.select is not None:
            items = dashboard.item_selector.items
            if not 1 <= args.select <= len(items):
                print(f"--select must be between 1 and {len(items)}", file=sys.stderr)
                return 2
            await dashboard.item_selector.select(items[args.select - 1])

        print(dashboard.render())

    return 1 if notifier.visible() else 0


def main() -> None:
    args = parse_args()
    configure_logging(log_level="WARNING")
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
