"""Catalogue domain API package."""

from catalogue.api.routes import event_router, like_router, product_router

__all__ = ["product_router", "event_router", "like_router"]
