# src/rubin_market/services/pagination.py
"""Opaque cursor helpers shared by paginated listings."""

from __future__ import annotations

import base64
import binascii

from rubin_market.core.errors import BadRequestError


def encode_cursor(anchor_id: int | str) -> str:
    """Encode the id of the last row on a page as an opaque cursor."""
    return base64.urlsafe_b64encode(str(anchor_id).encode()).decode().rstrip("=")


def decode_cursor(cursor: str) -> str:
    """Decode a cursor produced by :func:`encode_cursor`.

    Raises:
        BadRequestError: If the cursor is not valid
    """
    padding = "=" * (-len(cursor) % 4)
    try:
        decoded = base64.urlsafe_b64decode(cursor + padding).decode()
    except (binascii.Error, UnicodeDecodeError, ValueError) as err:
        raise BadRequestError("Invalid cursor") from err
    if not decoded:
        raise BadRequestError("Invalid cursor")
    return decoded
