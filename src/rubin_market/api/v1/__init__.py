"""Version 1 API endpoints."""

from .endpoints import (
    chat_router,
    moderation_router,
    notifications_router,
    reports_router,
)

__all__ = [
    "chat_router",
    "moderation_router",
    "notifications_router",
    "reports_router",
]
