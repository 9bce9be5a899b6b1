# src/rubin_market/services/__init__.py
"""Business logic services for the Rubin Market application."""

from .chat import ChatService
from .cipher import CipherService, get_cipher_service
from .message_store import MessageStore
from .moderation import ModerationService, require_moderator
from .notifications import NotificationService
from .reports import ReportService

__all__ = [
    "ChatService",
    "CipherService",
    "MessageStore",
    "ModerationService",
    "NotificationService",
    "ReportService",
    "get_cipher_service",
    "require_moderator",
]
