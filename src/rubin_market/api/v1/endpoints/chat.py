# src/rubin_market/api/v1/endpoints/chat.py
"""Negotiation chat endpoints.

Clients poll ``GET /rooms/{room_id}/messages``; there is no push channel.
"""

from __future__ import annotations

from fastapi import APIRouter, Query, status

from rubin_market.api.v1.dependencies import ChatServiceDep, CurrentUserDep
from rubin_market.models import ChatRoom
from rubin_market.schemas.chat import (
    ChatMessageCreate,
    ChatMessagePage,
    ChatMessageResponse,
    ChatRoomCreate,
    ChatRoomResponse,
    RmtWarningResponse,
)
from rubin_market.services.chat import ChatService
from rubin_market.services.message_store import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE

router = APIRouter(prefix="/chat", tags=["chat"])


@router.post("/rooms", response_model=ChatRoomResponse, status_code=status.HTTP_201_CREATED)
async def create_room(
    payload: ChatRoomCreate,
    current_user: CurrentUserDep,
    chat: ChatServiceDep,
) -> ChatRoom:
    """Open a negotiation on a listing, or return the caller's existing room."""
    return chat.create_room(payload.listing_id, current_user.id)


@router.get("/rooms", response_model=list[ChatRoomResponse])
async def list_my_rooms(current_user: CurrentUserDep, chat: ChatServiceDep) -> list[ChatRoom]:
    """List rooms where the caller is buyer or seller."""
    return chat.list_my_rooms(current_user.id)


@router.get("/rmt-warning", response_model=RmtWarningResponse)
async def get_rmt_warning(current_user: CurrentUserDep) -> RmtWarningResponse:
    """Return the real-money-trading notice."""
    return RmtWarningResponse(message=ChatService.rmt_warning())


@router.get("/rooms/{room_id}", response_model=ChatRoomResponse)
async def get_room(room_id: str, current_user: CurrentUserDep, chat: ChatServiceDep) -> ChatRoom:
    """Get a room the caller participates in."""
    return chat.get_room(room_id, current_user.id)


@router.post("/rooms/{room_id}/close", response_model=ChatRoomResponse)
async def close_room(room_id: str, current_user: CurrentUserDep, chat: ChatServiceDep) -> ChatRoom:
    """Close a room. Seller only."""
    return chat.close_room(room_id, current_user.id)


@router.post(
    "/rooms/{room_id}/messages",
    response_model=ChatMessageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def send_message(
    room_id: str,
    payload: ChatMessageCreate,
    current_user: CurrentUserDep,
    chat: ChatServiceDep,
) -> ChatMessageResponse:
    """Send an encrypted message to an active room."""
    message = chat.send_message(room_id, current_user.id, payload.content)
    return ChatMessageResponse.model_validate(message)


@router.get("/rooms/{room_id}/messages", response_model=ChatMessagePage)
async def get_messages(
    room_id: str,
    current_user: CurrentUserDep,
    chat: ChatServiceDep,
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    cursor: str | None = Query(None, description="Cursor of the next older page"),
) -> ChatMessagePage:
    """Get decrypted messages, oldest first, one page at a time."""
    page = chat.get_messages(room_id, current_user.id, limit=limit, cursor=cursor)
    return ChatMessagePage.model_validate(page)
