"""
Dofus Retro Tracker - Price statistics

Summary figures shown under the price chart.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Protocol, Union


class _HasPrice(Protocol):
    price: int


PriceLike = Union[int, _HasPrice]


@dataclass(frozen=True)
class PriceStats:
    """min/max/avg in kamas over ``count`` observations."""

    min: int
    max: int
    avg: int
    count: int


def _price_of(observation: PriceLike) -> int:
    if isinstance(observation, int):
        return observation
    return observation.price


def compute_price_stats(observations: Iterable[PriceLike]) -> PriceStats | None:
    """
    Statistics over price observations (DTOs, entities or bare prices).

    The mean is rounded half-up to a whole number of kamas.

    Returns:
        PriceStats, or None when there are no observations.
    """
    prices = [_price_of(o) for o in observations]
    if not prices:
        return None

    mean = Decimal(sum(prices)) / Decimal(len(prices))
    avg = int(mean.quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    return PriceStats(min=min(prices), max=max(prices), avg=avg, count=len(prices))
