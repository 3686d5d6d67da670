from src.engine.price_stats import PriceStats, compute_price_stats

__all__ = [
    "PriceStats",
    "compute_price_stats",
]
