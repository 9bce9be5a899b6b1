# src/rubin_market/models/listing.py
"""Listing rows owned by the catalog; chat and reports only read and flag them."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import BigInteger, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from rubin_market.db.session import Base
from rubin_market.db.time import utcnow

LISTING_STATUS_ACTIVE = "active"
LISTING_STATUS_SOLD = "sold"
LISTING_STATUS_ARCHIVED = "archived"
LISTING_STATUS_DELETED = "deleted"


class Listing(Base):
    """A seller's offer to trade an item for in-game currency."""

    __tablename__ = "listing"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    seller_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("user_profile.id"),
        nullable=False,
        index=True,
    )
    item_name: Mapped[str] = mapped_column(Text, nullable=False)
    price: Mapped[int] = mapped_column(BigInteger, nullable=False)
    # "gold" or "rubin"
    currency: Mapped[str] = mapped_column(String(8), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=LISTING_STATUS_ACTIVE,
        index=True,
    )
    last_interaction_at: Mapped[datetime] = mapped_column(default=utcnow)
    created_at: Mapped[datetime] = mapped_column(default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow, onupdate=utcnow)
