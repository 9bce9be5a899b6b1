# src/rubin_market/services/notifications.py
"""Notification queue written by chat and report flows and polled by clients."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

from sqlalchemy import and_, or_, update
from sqlalchemy.orm import Session

from rubin_market.core.errors import AuthorizationError, BadRequestError, NotFoundError
from rubin_market.models import Notification
from rubin_market.models.notification import (
    NOTIFICATION_LISTING_EXPIRING,
    NOTIFICATION_LISTING_SOLD,
    NOTIFICATION_NEW_MESSAGE,
    NOTIFICATION_REPORT_ACTION,
    NOTIFICATION_STATUS_DELIVERED,
    NOTIFICATION_STATUS_PENDING,
)
from rubin_market.services.pagination import decode_cursor, encode_cursor
from rubin_market.utils.ids import new_id

NOTIFICATION_TYPES = frozenset(
    {
        NOTIFICATION_NEW_MESSAGE,
        NOTIFICATION_LISTING_SOLD,
        NOTIFICATION_LISTING_EXPIRING,
        NOTIFICATION_REPORT_ACTION,
    }
)
DELIVERED_VIA_WEB = "web"


class Notifier(Protocol):
    """Anything that can queue a notification for a user."""

    def queue(self, user_id: str, type_: str, payload: dict[str, Any]) -> Notification: ...


@dataclass
class NotificationPage:
    """One page of notifications, newest first."""

    notifications: list[Notification]
    next_cursor: str | None


class NotificationService:
    """Database-backed notification queue.

    ``queue`` only adds the row to the session; the caller's commit persists
    it together with the state change that caused it.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def queue(self, user_id: str, type_: str, payload: dict[str, Any]) -> Notification:
        """Queue a pending notification for ``user_id``."""
        if type_ not in NOTIFICATION_TYPES:
            raise BadRequestError(f"Unknown notification type: {type_}")
        notification = Notification(
            id=new_id(),
            user_id=user_id,
            type=type_,
            payload=payload,
            status=NOTIFICATION_STATUS_PENDING,
        )
        self.db.add(notification)
        return notification

    def list_for_user(
        self,
        user_id: str,
        limit: int = 20,
        cursor: str | None = None,
    ) -> NotificationPage:
        """Return the user's notifications newest first, one page at a time."""
        query = self.db.query(Notification).filter(Notification.user_id == user_id)

        if cursor is not None:
            anchor = self.db.get(Notification, decode_cursor(cursor))
            if anchor is None or anchor.user_id != user_id:
                raise BadRequestError("Invalid cursor")
            query = query.filter(
                or_(
                    Notification.created_at < anchor.created_at,
                    and_(
                        Notification.created_at == anchor.created_at,
                        Notification.id < anchor.id,
                    ),
                )
            )

        rows = (
            query.order_by(Notification.created_at.desc(), Notification.id.desc())
            .limit(limit + 1)
            .all()
        )
        has_next = len(rows) > limit
        items = rows[:limit]
        return NotificationPage(
            notifications=items,
            next_cursor=encode_cursor(items[-1].id) if has_next else None,
        )

    def unread(self, user_id: str) -> list[Notification]:
        """Return the user's pending notifications, newest first."""
        return (
            self.db.query(Notification)
            .filter(
                Notification.user_id == user_id,
                Notification.status == NOTIFICATION_STATUS_PENDING,
            )
            .order_by(Notification.created_at.desc())
            .all()
        )

    def mark_read(self, user_id: str, notification_id: str) -> Notification:
        """Mark one notification as delivered through the web client."""
        notification = self.db.get(Notification, notification_id)
        if notification is None:
            raise NotFoundError("Notification not found")
        if notification.user_id != user_id:
            raise AuthorizationError("Not authorized")

        notification.status = NOTIFICATION_STATUS_DELIVERED
        notification.delivered_via = DELIVERED_VIA_WEB
        self.db.commit()
        self.db.refresh(notification)
        return notification

    def mark_all_read(self, user_id: str) -> None:
        """Mark every pending notification of the user as delivered."""
        self.db.execute(
            update(Notification)
            .where(
                Notification.user_id == user_id,
                Notification.status == NOTIFICATION_STATUS_PENDING,
            )
            .values(status=NOTIFICATION_STATUS_DELIVERED, delivered_via=DELIVERED_VIA_WEB)
        )
        self.db.commit()
