# src/rubin_market/schemas/notification.py
"""Notification-related Pydantic schemas."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict


class NotificationResponse(BaseModel):
    """Schema for a queued notification."""

    id: str
    user_id: str
    type: Literal["new_message", "listing_sold", "listing_expiring", "report_action"]
    payload: dict[str, Any]
    delivered_via: Literal["discord", "web"] | None = None
    status: Literal["pending", "delivered", "failed"]
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class NotificationPageResponse(BaseModel):
    """One page of notifications, newest first."""

    notifications: list[NotificationResponse]
    next_cursor: str | None = None

    model_config = ConfigDict(from_attributes=True)


class UnreadNotificationsResponse(BaseModel):
    """Pending notifications and their count."""

    notifications: list[NotificationResponse]
    count: int
