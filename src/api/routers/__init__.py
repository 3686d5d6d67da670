"""API routers."""

from src.api.routers.categories import router as categories_router
from src.api.routers.health import router as health_router
from src.api.routers.items import router as items_router

__all__ = ["categories_router", "health_router", "items_router"]
