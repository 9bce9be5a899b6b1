# src/rubin_market/services/cipher.py
"""Authenticated encryption for chat messages and report snapshots.

Blobs use the wire format ``nonce:tag:ciphertext`` where every field is hex
encoded, the nonce and tag are 16 bytes each and the ciphertext has the same
length as the UTF-8 plaintext. The key is derived from two configured secrets
with scrypt the first time it is needed and then kept for the lifetime of the
service instance.
"""

from __future__ import annotations

import os
import re
from functools import cached_property

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

from rubin_market.core.errors import ConfigurationError, FormatError, IntegrityError
from rubin_market.core.settings import settings

KEY_LENGTH_BYTES = 32
NONCE_LENGTH_BYTES = 16
TAG_LENGTH_BYTES = 16

# scrypt cost parameters; changing them invalidates every stored blob.
SCRYPT_N = 2**14
SCRYPT_R = 8
SCRYPT_P = 1

_HEX_RE = re.compile(r"(?:[0-9a-fA-F]{2})*")


class CipherService:
    """AES-256-GCM encryption of UTF-8 text with a server-held key."""

    def __init__(self, secret: str | None, salt: str | None) -> None:
        if not secret:
            raise ConfigurationError("ENCRYPTION_SECRET environment variable is required")
        if not salt:
            raise ConfigurationError("ENCRYPTION_SALT environment variable is required")
        self._secret = secret.encode()
        self._salt = salt.encode()

    @classmethod
    def from_settings(cls) -> CipherService:
        """Build a cipher service from the application settings."""
        return cls(settings.encryption_secret, settings.encryption_salt)

    @cached_property
    def _aead(self) -> AESGCM:
        kdf = Scrypt(salt=self._salt, length=KEY_LENGTH_BYTES, n=SCRYPT_N, r=SCRYPT_R, p=SCRYPT_P)
        return AESGCM(kdf.derive(self._secret))

    def warm_up(self) -> None:
        """Derive the key now instead of on the first request."""
        _ = self._aead

    def encrypt(self, plaintext: str) -> str:
        """Encrypt ``plaintext`` under a fresh random nonce.

        Args:
            plaintext: Text to protect

        Returns:
            Blob in ``nonce:tag:ciphertext`` hex format
        """
        nonce = os.urandom(NONCE_LENGTH_BYTES)
        sealed = self._aead.encrypt(nonce, plaintext.encode("utf-8"), None)
        ciphertext, tag = sealed[:-TAG_LENGTH_BYTES], sealed[-TAG_LENGTH_BYTES:]
        return f"{nonce.hex()}:{tag.hex()}:{ciphertext.hex()}"

    def decrypt(self, blob: str) -> str:
        """Decrypt and authenticate a blob produced by :meth:`encrypt`.

        Args:
            blob: Blob in ``nonce:tag:ciphertext`` hex format

        Returns:
            The original plaintext

        Raises:
            FormatError: If the blob is structurally invalid
            IntegrityError: If the authentication tag does not verify
        """
        nonce, tag, ciphertext = _split_blob(blob)
        try:
            plaintext = self._aead.decrypt(nonce, ciphertext + tag, None)
        except InvalidTag as err:
            raise IntegrityError("Ciphertext failed authentication") from err
        try:
            return plaintext.decode("utf-8")
        except UnicodeDecodeError as err:  # pragma: no cover - tag already verified
            raise IntegrityError("Decrypted payload is not valid UTF-8") from err

    @staticmethod
    def is_valid_ciphertext(blob: str) -> bool:
        """Return True if ``blob`` is structurally well formed.

        This does not authenticate the blob; only :meth:`decrypt` does.
        """
        try:
            _split_blob(blob)
        except FormatError:
            return False
        return True


def _split_blob(blob: str) -> tuple[bytes, bytes, bytes]:
    parts = blob.split(":")
    if len(parts) != 3:
        raise FormatError("Invalid ciphertext format")
    if not all(_HEX_RE.fullmatch(part) for part in parts):
        raise FormatError("Ciphertext fields must be hex encoded")

    nonce, tag, ciphertext = (bytes.fromhex(part) for part in parts)
    if len(nonce) != NONCE_LENGTH_BYTES:
        raise FormatError("Invalid nonce length")
    if len(tag) != TAG_LENGTH_BYTES:
        raise FormatError("Invalid auth tag length")
    return nonce, tag, ciphertext


class _CipherServiceSingleton:
    """Singleton wrapper for CipherService."""

    _instance: CipherService | None = None

    @classmethod
    def get_instance(cls) -> CipherService:
        """Get or create the process-wide CipherService instance."""
        if cls._instance is None:
            cls._instance = CipherService.from_settings()
        return cls._instance


def get_cipher_service() -> CipherService:
    """Return the process-wide cipher service."""
    return _CipherServiceSingleton.get_instance()
