"""REST API for items, categories and price history."""

from src.api.app import create_app

__all__ = ["create_app"]
