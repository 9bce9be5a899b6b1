# src/rubin_market/schemas/chat.py
"""Chat-related Pydantic schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class ChatRoomCreate(BaseModel):
    """Schema for opening a negotiation on a listing."""

    listing_id: str = Field(..., min_length=1, description="Listing to negotiate on")


class ChatListingSummary(BaseModel):
    """Listing shown in a chat thread header."""

    id: str
    item_name: str
    price: int
    currency: str
    status: str

    model_config = ConfigDict(from_attributes=True)


class ChatParticipant(BaseModel):
    """Public profile of a buyer or seller."""

    id: str
    display_name: str | None = None

    model_config = ConfigDict(from_attributes=True)


class ChatRoomResponse(BaseModel):
    """Schema for chat room information returned by the API."""

    id: str
    listing_id: str
    buyer_id: str
    seller_id: str
    status: Literal["active", "closed"]
    created_at: datetime
    updated_at: datetime
    listing: ChatListingSummary
    buyer: ChatParticipant
    seller: ChatParticipant

    model_config = ConfigDict(from_attributes=True)


class ChatMessageCreate(BaseModel):
    """Schema for sending a chat message."""

    content: str = Field(..., min_length=1, max_length=2000, description="Plaintext message")


class ChatMessageResponse(BaseModel):
    """A decrypted chat message."""

    id: int
    room_id: str
    sender_id: str
    content: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ChatMessagePage(BaseModel):
    """Messages in chronological order plus the cursor of the next older page."""

    messages: list[ChatMessageResponse]
    next_cursor: str | None = None

    model_config = ConfigDict(from_attributes=True)


class RmtWarningResponse(BaseModel):
    """Notice displayed in every negotiation."""

    message: str
