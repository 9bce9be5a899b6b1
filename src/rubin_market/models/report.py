# src/rubin_market/models/report.py
"""Models tracking user reports and their moderator resolution."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import ForeignKey, Index, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from rubin_market.db.session import Base
from rubin_market.db.time import utcnow

REPORT_STATUS_PENDING = "pending"
REPORT_STATUS_RESOLVED = "resolved"
REPORT_STATUS_DISMISSED = "dismissed"

TARGET_LISTING = "listing"
TARGET_USER = "user"

REPORT_REASONS = ("spam", "scam", "unrealistic_price", "offense")

ACTION_DISMISS = "dismiss"
ACTION_REMOVE_LISTING = "remove_listing"
ACTION_BAN_USER = "ban_user"


class Report(Base):
    """A report against a listing or user, resolved exactly once by a moderator."""

    __tablename__ = "report"
    __table_args__ = (
        Index("ix_report_target", "target_type", "target_id"),
        # At most one pending report per reporter and target.
        Index(
            "uq_report_pending_target",
            "reporter_id",
            "target_type",
            "target_id",
            unique=True,
            sqlite_where=text("status = 'pending'"),
            postgresql_where=text("status = 'pending'"),
        ),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    reporter_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("user_profile.id"),
        nullable=False,
    )
    target_type: Mapped[str] = mapped_column(String(16), nullable=False)
    target_id: Mapped[str] = mapped_column(String(64), nullable=False)
    reason: Mapped[str] = mapped_column(String(32), nullable=False)
    # Snapshot taken at filing time, encrypted independently of the live messages.
    encrypted_chat_log: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=REPORT_STATUS_PENDING,
        index=True,
    )
    moderator_id: Mapped[str | None] = mapped_column(
        String(64),
        ForeignKey("user_profile.id"),
        nullable=True,
    )
    resolution: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=utcnow)
    resolved_at: Mapped[datetime | None] = mapped_column(nullable=True)
