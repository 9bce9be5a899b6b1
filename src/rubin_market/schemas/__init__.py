# src/rubin_market/schemas/__init__.py
"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .chat import (
    ChatListingSummary,
    ChatMessageCreate,
    ChatMessagePage,
    ChatMessageResponse,
    ChatParticipant,
    ChatRoomCreate,
    ChatRoomResponse,
    RmtWarningResponse,
)
from .moderation import BanStatusResponse, ModerationActionResponse
from .notification import (
    NotificationPageResponse,
    NotificationResponse,
    UnreadNotificationsResponse,
)
from .report import (
    ChatLogEntryResponse,
    ReportCreate,
    ReportDetailResponse,
    ReportResolve,
    ReportResponse,
)

__all__ = [
    "ChatListingSummary", "ChatMessageCreate", "ChatMessagePage", "ChatMessageResponse",
    "ChatParticipant",
    "ChatRoomCreate", "ChatRoomResponse", "RmtWarningResponse",
    "BanStatusResponse", "ModerationActionResponse",
    "NotificationPageResponse", "NotificationResponse", "UnreadNotificationsResponse",
    "ChatLogEntryResponse", "ReportCreate", "ReportDetailResponse",
    "ReportResolve", "ReportResponse",
]
