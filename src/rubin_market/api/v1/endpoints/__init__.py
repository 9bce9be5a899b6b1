# src/rubin_market/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .chat import router as chat_router
from .moderation import router as moderation_router
from .notifications import router as notifications_router
from .reports import router as reports_router

__all__ = [
    "chat_router",
    "moderation_router",
    "notifications_router",
    "reports_router",
]
