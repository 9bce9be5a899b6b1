# src/rubin_market/models/__init__.py
"""SQLAlchemy models for the Rubin Market application."""

from .chat import ChatMessage, ChatRoom
from .listing import Listing
from .notification import Notification
from .report import Report
from .user import User

__all__ = [
    "ChatMessage", "ChatRoom",
    "Listing",
    "Notification",
    "Report",
    "User",
]
