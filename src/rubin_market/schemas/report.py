# src/rubin_market/schemas/report.py
"""Report-related Pydantic schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

ReportReason = Literal["spam", "scam", "unrealistic_price", "offense"]
ReportAction = Literal["dismiss", "remove_listing", "ban_user"]


class ReportCreate(BaseModel):
    """Schema for filing a report."""

    target_type: Literal["listing", "user"]
    target_id: str = Field(..., min_length=1)
    reason: ReportReason
    chat_room_id: str | None = Field(
        None,
        description="Room whose recent messages are attached as evidence",
    )


class ReportResolve(BaseModel):
    """Schema for a moderator resolving a report."""

    action: ReportAction
    resolution: str | None = Field(None, max_length=500)


class ReportResponse(BaseModel):
    """Schema for report information returned by the API.

    The encrypted snapshot itself is never returned; ``has_chat_log`` tells
    whether one was captured.
    """

    id: str
    reporter_id: str
    target_type: Literal["listing", "user"]
    target_id: str
    reason: ReportReason
    status: Literal["pending", "resolved", "dismissed"]
    has_chat_log: bool
    moderator_id: str | None = None
    resolution: str | None = None
    created_at: datetime
    resolved_at: datetime | None = None


class ChatLogEntryResponse(BaseModel):
    """One message of a decrypted report snapshot."""

    sender_id: str
    content: str
    created_at: str

    model_config = ConfigDict(from_attributes=True)


class ReportDetailResponse(ReportResponse):
    """Report as shown to moderators, with the decrypted snapshot when visible."""

    chat_log: list[ChatLogEntryResponse] | None = None
