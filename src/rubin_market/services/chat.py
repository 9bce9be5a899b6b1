# src/rubin_market/services/chat.py
"""Negotiation rooms between a buyer and a listing's seller."""

from __future__ import annotations

import logging

from sqlalchemy import exc as sa_exc
from sqlalchemy import or_, update
from sqlalchemy.orm import Session, selectinload

from rubin_market.core.errors import (
    AuthorizationError,
    BadRequestError,
    NotFoundError,
    StateError,
)
from rubin_market.db.time import utcnow
from rubin_market.models import ChatRoom, Listing
from rubin_market.models.chat import ROOM_STATUS_ACTIVE, ROOM_STATUS_CLOSED
from rubin_market.models.listing import LISTING_STATUS_ACTIVE
from rubin_market.models.notification import NOTIFICATION_NEW_MESSAGE
from rubin_market.services.cipher import CipherService
from rubin_market.services.message_store import (
    DEFAULT_PAGE_SIZE,
    DecryptedMessage,
    MessagePage,
    MessageStore,
)
from rubin_market.services.moderation import require_active_user
from rubin_market.services.notifications import Notifier
from rubin_market.utils.ids import new_id

logger = logging.getLogger(__name__)

MAX_MESSAGE_LENGTH = 2000

RMT_WARNING = (
    "WARNING: trading items for real money (RMT) is forbidden. All trades must be "
    "settled in in-game currency only (Gold Coins or Rubin Coins). Violations "
    "result in a permanent ban."
)


# Listing and both participants, as shown in the thread header and room list.
_ROOM_DETAILS = (
    selectinload(ChatRoom.listing),
    selectinload(ChatRoom.buyer),
    selectinload(ChatRoom.seller),
)


class ChatService:
    """Room lifecycle and message exchange for a single request."""

    def __init__(self, db: Session, cipher: CipherService, notifier: Notifier) -> None:
        self.db = db
        self.cipher = cipher
        self.notifier = notifier
        self.messages = MessageStore(db, cipher)

    def create_room(self, listing_id: str, buyer_id: str) -> ChatRoom:
        """Open a negotiation on an active listing, or return the existing room.

        Args:
            listing_id: Listing being negotiated
            buyer_id: Caller starting the negotiation

        Returns:
            The new room, or the existing room for this buyer and listing

        Raises:
            AuthorizationError: If the buyer is banned or is the seller
            NotFoundError: If the buyer or listing does not exist
            StateError: If the listing is not active
        """
        require_active_user(self.db, buyer_id)

        listing = self.db.get(Listing, listing_id)
        if listing is None:
            raise NotFoundError("Listing not found")
        if listing.status != LISTING_STATUS_ACTIVE:
            raise StateError("Listing is not active")
        if listing.seller_id == buyer_id:
            raise AuthorizationError("Cannot negotiate on your own listing")

        existing = self._find_room(listing_id, buyer_id)
        if existing is not None:
            return existing

        room = ChatRoom(
            id=new_id(),
            listing_id=listing_id,
            buyer_id=buyer_id,
            seller_id=listing.seller_id,
            status=ROOM_STATUS_ACTIVE,
        )
        self.db.add(room)
        try:
            self.db.flush()
        except sa_exc.IntegrityError:
            # A concurrent request created the room first.
            self.db.rollback()
            existing = self._find_room(listing_id, buyer_id)
            if existing is None:
                raise
            return existing

        listing.last_interaction_at = utcnow()
        self.db.commit()
        self.db.refresh(room)
        logger.info("Chat room %s opened on listing %s", room.id, listing_id)
        return room

    def get_room(self, room_id: str, requester_id: str) -> ChatRoom:
        """Return a room the requester participates in, with its listing and both profiles."""
        room = self.db.get(ChatRoom, room_id, options=_ROOM_DETAILS)
        if room is None:
            raise NotFoundError("Chat room not found")
        self._ensure_participant(room, requester_id)
        return room

    def list_my_rooms(self, user_id: str) -> list[ChatRoom]:
        """Return rooms where the user is buyer or seller, most recent first."""
        return (
            self.db.query(ChatRoom)
            .options(*_ROOM_DETAILS)
            .filter(or_(ChatRoom.buyer_id == user_id, ChatRoom.seller_id == user_id))
            .order_by(ChatRoom.updated_at.desc())
            .all()
        )

    def close_room(self, room_id: str, requester_id: str) -> ChatRoom:
        """Close a room. Only the seller may do so; closed is terminal.

        Raises:
            NotFoundError: If the room does not exist
            AuthorizationError: If the requester is not the seller
        """
        room = self._load_room(room_id)
        if room.seller_id != requester_id:
            raise AuthorizationError("Only the seller can close the chat")
        if room.status == ROOM_STATUS_CLOSED:
            return room

        self.db.execute(
            update(ChatRoom)
            .where(ChatRoom.id == room_id, ChatRoom.status == ROOM_STATUS_ACTIVE)
            .values(status=ROOM_STATUS_CLOSED, updated_at=utcnow())
        )
        self.db.commit()
        self.db.refresh(room)
        logger.info("Chat room %s closed by seller", room_id)
        return room

    def send_message(self, room_id: str, sender_id: str, content: str) -> DecryptedMessage:
        """Encrypt and append a message to an active room.

        The returned message echoes ``content`` instead of decrypting the
        stored blob again.

        Raises:
            NotFoundError: If the room does not exist
            AuthorizationError: If the sender is not a participant
            StateError: If the room is closed
            BadRequestError: If the content is empty or too long
        """
        room = self._load_room(room_id)
        self._ensure_participant(room, sender_id)
        if room.status != ROOM_STATUS_ACTIVE:
            raise StateError("Chat room is closed")
        if not content or len(content) > MAX_MESSAGE_LENGTH:
            raise BadRequestError(
                f"Message content must be between 1 and {MAX_MESSAGE_LENGTH} characters"
            )

        blob = self.cipher.encrypt(content)

        # Re-check the room is still active at the point of mutation.
        bumped = self.db.execute(
            update(ChatRoom)
            .where(ChatRoom.id == room_id, ChatRoom.status == ROOM_STATUS_ACTIVE)
            .values(updated_at=utcnow())
        )
        if bumped.rowcount != 1:
            self.db.rollback()
            raise StateError("Chat room is closed")

        message = self.messages.append(room_id, sender_id, blob)
        recipient_id = room.seller_id if sender_id == room.buyer_id else room.buyer_id
        self.notifier.queue(
            recipient_id,
            NOTIFICATION_NEW_MESSAGE,
            {"room_id": room_id, "message_id": message.id, "sender_id": sender_id},
        )
        self.db.commit()

        return DecryptedMessage(
            id=message.id,
            room_id=room_id,
            sender_id=sender_id,
            content=content,
            created_at=message.created_at,
        )

    def get_messages(
        self,
        room_id: str,
        requester_id: str,
        limit: int = DEFAULT_PAGE_SIZE,
        cursor: str | None = None,
    ) -> MessagePage:
        """Return a page of decrypted messages for a participant."""
        room = self._load_room(room_id)
        self._ensure_participant(room, requester_id)
        return self.messages.list_messages(room_id, limit=limit, cursor=cursor)

    @staticmethod
    def rmt_warning() -> str:
        """Return the real-money-trading notice shown in every chat."""
        return RMT_WARNING

    def _find_room(self, listing_id: str, buyer_id: str) -> ChatRoom | None:
        return (
            self.db.query(ChatRoom)
            .filter(ChatRoom.listing_id == listing_id, ChatRoom.buyer_id == buyer_id)
            .first()
        )

    def _load_room(self, room_id: str) -> ChatRoom:
        room = self.db.get(ChatRoom, room_id)
        if room is None:
            raise NotFoundError("Chat room not found")
        return room

    @staticmethod
    def _ensure_participant(room: ChatRoom, user_id: str) -> None:
        if not room.has_participant(user_id):
            raise AuthorizationError("Not a participant of this chat")
