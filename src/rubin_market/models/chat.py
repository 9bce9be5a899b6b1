# src/rubin_market/models/chat.py
"""Models describing negotiation rooms and their encrypted message log."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rubin_market.db.session import Base
from rubin_market.db.time import utcnow

if TYPE_CHECKING:
    from .listing import Listing
    from .user import User

ROOM_STATUS_ACTIVE = "active"
ROOM_STATUS_CLOSED = "closed"


class ChatRoom(Base):
    """Two-party negotiation thread between a buyer and a listing's seller."""

    __tablename__ = "chat_room"
    # One room per buyer per listing; create_room is get-or-create on this pair.
    __table_args__ = (UniqueConstraint("listing_id", "buyer_id", name="uq_chat_room_listing_buyer"),)

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    listing_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("listing.id"),
        nullable=False,
        index=True,
    )
    buyer_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("user_profile.id"),
        nullable=False,
        index=True,
    )
    seller_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("user_profile.id"),
        nullable=False,
        index=True,
    )
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=ROOM_STATUS_ACTIVE)
    created_at: Mapped[datetime] = mapped_column(default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow)

    listing: Mapped["Listing"] = relationship("Listing")
    buyer: Mapped["User"] = relationship("User", foreign_keys=[buyer_id])
    seller: Mapped["User"] = relationship("User", foreign_keys=[seller_id])

    def has_participant(self, user_id: str) -> bool:
        """Return True if ``user_id`` is the buyer or the seller."""
        return user_id in (self.buyer_id, self.seller_id)


class ChatMessage(Base):
    """Append-only chat message. Content is stored only as ciphertext."""

    __tablename__ = "chat_message"

    # Autoincrement id breaks ties between messages sharing a timestamp.
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    room_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("chat_room.id"),
        nullable=False,
        index=True,
    )
    sender_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("user_profile.id"),
        nullable=False,
    )
    # nonce:tag:ciphertext, hex encoded
    encrypted_content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=utcnow, index=True)
