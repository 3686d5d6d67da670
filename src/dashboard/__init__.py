"""
Dashboard view-models: item search, price chart and their composition.

Each view-model owns its state and replaces it wholesale when a response
arrives. Responses that belong to a superseded request are dropped.
"""

from src.dashboard.dashboard import Dashboard
from src.dashboard.item_selector import ItemSelector
from src.dashboard.price_chart import ChartSeries, PriceChart

__all__ = ["ChartSeries", "Dashboard", "ItemSelector", "PriceChart"]
