"""API layer module.

Contains FastAPI routers and request/response schemas.
"""

from storefront.api.categories import admin_router as categories_admin_router
from storefront.api.categories import router as categories_router
from storefront.api.health import router as health_router

__all__ = [
    "categories_admin_router",
    "categories_router",
    "health_router",
]
