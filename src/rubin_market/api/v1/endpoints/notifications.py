# src/rubin_market/api/v1/endpoints/notifications.py
"""Notification inbox endpoints, polled by the web client."""

from __future__ import annotations

from fastapi import APIRouter, Query

from rubin_market.api.v1.dependencies import CurrentUserDep, NotificationServiceDep
from rubin_market.models import Notification
from rubin_market.schemas.notification import (
    NotificationPageResponse,
    NotificationResponse,
    UnreadNotificationsResponse,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=NotificationPageResponse)
async def list_notifications(
    current_user: CurrentUserDep,
    notifications: NotificationServiceDep,
    limit: int = Query(20, ge=1, le=50),
    cursor: str | None = Query(None),
) -> NotificationPageResponse:
    """List the caller's notifications, newest first."""
    page = notifications.list_for_user(current_user.id, limit=limit, cursor=cursor)
    return NotificationPageResponse.model_validate(page)


@router.get("/unread", response_model=UnreadNotificationsResponse)
async def list_unread(
    current_user: CurrentUserDep,
    notifications: NotificationServiceDep,
) -> UnreadNotificationsResponse:
    """List the caller's pending notifications."""
    unread = notifications.unread(current_user.id)
    return UnreadNotificationsResponse(
        notifications=[NotificationResponse.model_validate(item) for item in unread],
        count=len(unread),
    )


@router.post("/read-all")
async def mark_all_read(
    current_user: CurrentUserDep,
    notifications: NotificationServiceDep,
) -> dict[str, bool]:
    """Mark every pending notification as read."""
    notifications.mark_all_read(current_user.id)
    return {"success": True}


@router.post("/{notification_id}/read", response_model=NotificationResponse)
async def mark_read(
    notification_id: str,
    current_user: CurrentUserDep,
    notifications: NotificationServiceDep,
) -> Notification:
    """Mark one notification as read."""
    return notifications.mark_read(current_user.id, notification_id)
