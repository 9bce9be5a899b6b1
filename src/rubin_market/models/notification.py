# src/rubin_market/models/notification.py
"""Queued notifications awaiting delivery by an external channel."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from rubin_market.db.session import Base
from rubin_market.db.time import utcnow

NOTIFICATION_NEW_MESSAGE = "new_message"
NOTIFICATION_LISTING_SOLD = "listing_sold"
NOTIFICATION_LISTING_EXPIRING = "listing_expiring"
NOTIFICATION_REPORT_ACTION = "report_action"

NOTIFICATION_STATUS_PENDING = "pending"
NOTIFICATION_STATUS_DELIVERED = "delivered"
NOTIFICATION_STATUS_FAILED = "failed"


class Notification(Base):
    """Notification addressed to a single user."""

    __tablename__ = "notification"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    user_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("user_profile.id"),
        nullable=False,
        index=True,
    )
    type: Mapped[str] = mapped_column(String(32), nullable=False)
    payload: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    # "discord" or "web" once delivered
    delivered_via: Mapped[str | None] = mapped_column(String(16), nullable=True)
    status: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=NOTIFICATION_STATUS_PENDING,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(default=utcnow)
