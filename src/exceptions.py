"""
Dofus Retro Tracker - Server-side exception hierarchy.

Raised by repositories and services; translated into ErrorResponse bodies by
src/api/errors.py.
"""

from __future__ import annotations


class PriceTrackerError(Exception):
    """Base class for all price tracker errors."""


class ResourceNotFoundError(PriceTrackerError):
    """A requested item or category does not exist. Rendered as HTTP 404."""

    @classmethod
    def for_item(cls, item_id: int) -> ResourceNotFoundError:
        return cls(f"Item with ID {item_id} not found")

    @classmethod
    def for_category(cls, category_id: int) -> ResourceNotFoundError:
        return cls(f"Category with ID {category_id} not found")


class BusinessError(PriceTrackerError):
    """
    A business rule was violated (invalid price data, failed persistence).

    Rendered as HTTP 400.
    """

    @classmethod
    def invalid_price_data(cls, reason: str) -> BusinessError:
        return cls(f"Invalid price data: {reason}")

    @classmethod
    def database_error(cls, operation: str, cause: Exception) -> BusinessError:
        return cls(f"Database error during {operation}: {cause}")
