"""Messaging domain API package."""

from messaging.api.routes import chat_router, contact_router

__all__ = ["chat_router", "contact_router"]
