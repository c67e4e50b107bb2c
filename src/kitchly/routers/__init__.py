"""API routers for the kitchly application."""

from kitchly.routers.conversations import router as conversations_router

__all__ = ["conversations_router"]
