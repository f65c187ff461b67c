"""Routers package for the product generator server."""

from shopify_generator.server.routers.generate import router as generate_router
from shopify_generator.server.routers.health import router as health_router

__all__ = [
    "generate_router",
    "health_router",
]
