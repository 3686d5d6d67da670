"""
Models package - export all SQLAlchemy models.
"""

from src.models.base import Base
from src.models.item import Item
from src.models.price_entry import PriceEntry
from src.models.sub_category import SubCategory

__all__ = ["Base", "Item", "PriceEntry", "SubCategory"]
