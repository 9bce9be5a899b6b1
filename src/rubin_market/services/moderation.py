# src/rubin_market/services/moderation.py
"""Moderator authorization and account suspension."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from rubin_market.core.errors import AuthorizationError, BadRequestError, NotFoundError
from rubin_market.models import User

logger = logging.getLogger(__name__)


def require_moderator(db: Session, user_id: str) -> User:
    """Return the user if they hold the moderator role.

    Call this as the first statement of every moderator-only operation.

    Raises:
        AuthorizationError: If the user is unknown or not a moderator
    """
    user = db.get(User, user_id)
    if user is None or not user.is_moderator:
        raise AuthorizationError("Moderator access required")
    return user


def require_active_user(db: Session, user_id: str) -> User:
    """Return the user if they exist and are not banned.

    Raises:
        NotFoundError: If the user does not exist
        AuthorizationError: If the account is suspended
    """
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    if user.is_banned:
        raise AuthorizationError("Account suspended")
    return user


class ModerationService:
    """Moderator actions on user accounts."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def ban_user(self, moderator_id: str, user_id: str) -> User:
        """Suspend a user account.

        Raises:
            AuthorizationError: If the caller is not a moderator
            NotFoundError: If the user does not exist
            BadRequestError: If the user is already banned
        """
        require_moderator(self.db, moderator_id)
        target = self._load_user(user_id)
        if target.is_banned:
            raise BadRequestError("User is already banned")

        target.is_banned = True
        self.db.commit()
        self.db.refresh(target)
        logger.info("User %s banned by moderator %s", user_id, moderator_id)
        return target

    def unban_user(self, moderator_id: str, user_id: str) -> User:
        """Lift the suspension of a user account."""
        require_moderator(self.db, moderator_id)
        target = self._load_user(user_id)
        if not target.is_banned:
            raise BadRequestError("User is not banned")

        target.is_banned = False
        self.db.commit()
        self.db.refresh(target)
        logger.info("User %s unbanned by moderator %s", user_id, moderator_id)
        return target

    def ban_status(self, user_id: str) -> bool:
        """Return whether the user is currently banned."""
        user = self.db.get(User, user_id)
        return bool(user and user.is_banned)

    def _load_user(self, user_id: str) -> User:
        user = self.db.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user
