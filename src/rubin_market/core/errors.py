"""Domain error taxonomy shared by the chat, report and moderation services.

Every error carries a stable machine-readable ``kind`` and the HTTP status the
API layer renders it with. Services raise these; only the exception handler
in :mod:`rubin_market.main` turns them into responses.
"""

from __future__ import annotations


class MarketError(RuntimeError):
    """Base exception for all marketplace domain failures."""

    kind = "error"
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(MarketError):
    """Raised when a room, report, notification or target does not exist."""

    kind = "not_found"
    status_code = 404


class AuthorizationError(MarketError):
    """Raised for non-participants, non-moderators and suspended accounts."""

    kind = "forbidden"
    status_code = 403


class BadRequestError(MarketError):
    """Raised when the request cannot be applied to the current data."""

    kind = "bad_request"
    status_code = 400


class StateError(BadRequestError):
    """Raised when a state machine forbids the operation (closed room, inactive listing)."""

    kind = "invalid_state"


class ConflictError(MarketError):
    """Raised when a duplicate pending report already exists."""

    kind = "conflict"
    status_code = 409


class FormatError(MarketError):
    """Raised when a ciphertext blob is structurally malformed."""

    kind = "invalid_ciphertext"


class IntegrityError(MarketError):
    """Raised when authenticated decryption fails (tampering, wrong key, corruption)."""

    kind = "integrity_failure"


class ConfigurationError(MarketError):
    """Raised when required configuration is missing. Fatal at startup."""

    kind = "configuration"
