# src/rubin_market/api/v1/endpoints/moderation.py
"""Account moderation endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from rubin_market.api.v1.dependencies import CurrentUserDep, ModerationServiceDep
from rubin_market.schemas.moderation import BanStatusResponse, ModerationActionResponse

router = APIRouter(prefix="/moderation", tags=["moderation"])


@router.post("/users/{user_id}/ban", response_model=ModerationActionResponse)
async def ban_user(
    user_id: str,
    current_user: CurrentUserDep,
    moderation: ModerationServiceDep,
) -> ModerationActionResponse:
    """Suspend a user account. Moderators only."""
    moderation.ban_user(current_user.id, user_id)
    return ModerationActionResponse(success=True, message="User banned")


@router.post("/users/{user_id}/unban", response_model=ModerationActionResponse)
async def unban_user(
    user_id: str,
    current_user: CurrentUserDep,
    moderation: ModerationServiceDep,
) -> ModerationActionResponse:
    """Lift a user's suspension. Moderators only."""
    moderation.unban_user(current_user.id, user_id)
    return ModerationActionResponse(success=True, message="User unbanned")


@router.get("/ban-status", response_model=BanStatusResponse)
async def get_ban_status(
    current_user: CurrentUserDep,
    moderation: ModerationServiceDep,
) -> BanStatusResponse:
    """Report whether the caller's account is suspended."""
    return BanStatusResponse(is_banned=moderation.ban_status(current_user.id))
