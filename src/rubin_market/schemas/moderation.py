# src/rubin_market/schemas/moderation.py
"""Moderation-related Pydantic schemas."""

from pydantic import BaseModel


class ModerationActionResponse(BaseModel):
    """Outcome of a ban or unban."""

    success: bool
    message: str


class BanStatusResponse(BaseModel):
    """Whether the caller's account is suspended."""

    is_banned: bool
