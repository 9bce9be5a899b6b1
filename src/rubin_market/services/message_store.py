# src/rubin_market/services/message_store.py
"""Append-only encrypted message log, decrypted at the read boundary."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from rubin_market.core.errors import BadRequestError, FormatError
from rubin_market.models import ChatMessage
from rubin_market.services.cipher import CipherService
from rubin_market.services.pagination import decode_cursor, encode_cursor

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 100
# Largest id a signed 64-bit INTEGER column can hold.
MAX_MESSAGE_ID = 2**63 - 1


@dataclass
class DecryptedMessage:
    """A chat message with its content in plaintext."""

    id: int
    room_id: str
    sender_id: str
    content: str
    created_at: datetime


@dataclass
class MessagePage:
    """Messages in chronological order plus the cursor of the next older page."""

    messages: list[DecryptedMessage]
    next_cursor: str | None


class MessageStore:
    """Encrypted per-room message log.

    Rows are only ever inserted. A message that fails to decrypt aborts the
    read instead of being skipped.
    """

    def __init__(self, db: Session, cipher: CipherService) -> None:
        self.db = db
        self.cipher = cipher

    def append(self, room_id: str, sender_id: str, ciphertext: str) -> ChatMessage:
        """Add an encrypted message to the session and assign its id.

        The caller commits.
        """
        if not self.cipher.is_valid_ciphertext(ciphertext):
            raise FormatError("Refusing to store malformed ciphertext")
        message = ChatMessage(room_id=room_id, sender_id=sender_id, encrypted_content=ciphertext)
        self.db.add(message)
        self.db.flush()
        return message

    def list_messages(
        self,
        room_id: str,
        limit: int = DEFAULT_PAGE_SIZE,
        cursor: str | None = None,
    ) -> MessagePage:
        """Return one page of decrypted messages.

        Pages walk backwards in time from the newest message; each page is
        returned oldest-first for display.

        Raises:
            BadRequestError: If ``limit`` is out of range or the cursor is invalid
            IntegrityError: If any message on the page fails authentication
        """
        if not 1 <= limit <= MAX_PAGE_SIZE:
            raise BadRequestError(f"limit must be between 1 and {MAX_PAGE_SIZE}")

        query = self.db.query(ChatMessage).filter(ChatMessage.room_id == room_id)
        if cursor is not None:
            anchor = self._resolve_cursor(room_id, cursor)
            query = query.filter(
                or_(
                    ChatMessage.created_at < anchor.created_at,
                    and_(
                        ChatMessage.created_at == anchor.created_at,
                        ChatMessage.id < anchor.id,
                    ),
                )
            )

        rows = self._newest_first(query).limit(limit + 1).all()
        has_next = len(rows) > limit
        items = rows[:limit]

        decrypted = [self._decrypt(row) for row in items]
        decrypted.reverse()
        return MessagePage(
            messages=decrypted,
            next_cursor=encode_cursor(items[-1].id) if has_next else None,
        )

    def recent(self, room_id: str, count: int) -> list[DecryptedMessage]:
        """Return the newest ``count`` messages of a room in chronological order."""
        query = self.db.query(ChatMessage).filter(ChatMessage.room_id == room_id)
        rows = self._newest_first(query).limit(count).all()
        return [self._decrypt(row) for row in reversed(rows)]

    @staticmethod
    def _newest_first(query):  # type: ignore[no-untyped-def]
        return query.order_by(ChatMessage.created_at.desc(), ChatMessage.id.desc())

    def _resolve_cursor(self, room_id: str, cursor: str) -> ChatMessage:
        raw = decode_cursor(cursor)
        try:
            anchor_id = int(raw)
        except ValueError as err:
            raise BadRequestError("Invalid cursor") from err
        if not 0 < anchor_id <= MAX_MESSAGE_ID:
            raise BadRequestError("Invalid cursor")
        anchor = self.db.get(ChatMessage, anchor_id)
        if anchor is None or anchor.room_id != room_id:
            raise BadRequestError("Invalid cursor")
        return anchor

    def _decrypt(self, message: ChatMessage) -> DecryptedMessage:
        return DecryptedMessage(
            id=message.id,
            room_id=message.room_id,
            sender_id=message.sender_id,
            content=self.cipher.decrypt(message.encrypted_content),
            created_at=message.created_at,
        )
