# src/rubin_market/models/user.py
"""Marketplace profile for identities issued by the external auth provider."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from rubin_market.db.session import Base
from rubin_market.db.time import utcnow

ROLE_PLAYER = "player"
ROLE_MODERATOR = "moderator"


class User(Base):
    """Marketplace view of a user: role and ban flag keyed by the auth subject."""

    __tablename__ = "user_profile"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    display_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    role: Mapped[str] = mapped_column(String(16), nullable=False, default=ROLE_PLAYER)
    is_banned: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(default=utcnow)

    @property
    def is_moderator(self) -> bool:
        """Return True if the user holds the moderator role."""
        return self.role == ROLE_MODERATOR
