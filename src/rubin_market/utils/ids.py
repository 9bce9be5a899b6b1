# src/rubin_market/utils/ids.py
"""Identifier generation for rooms, reports and notifications."""

from __future__ import annotations

import secrets

ID_BYTES = 16


def new_id() -> str:
    """Return a URL-safe random identifier (22 characters)."""
    return secrets.token_urlsafe(ID_BYTES)
