# tests/services/test_cipher.py
"""Tests for chat message encryption."""

import pytest
from hypothesis import given, settings, strategies as st

from rubin_market.core.errors import ConfigurationError, FormatError, IntegrityError
from rubin_market.services.cipher import (
    NONCE_LENGTH_BYTES,
    TAG_LENGTH_BYTES,
    CipherService,
)

# Key derivation is deliberately slow; share one instance across examples.
CIPHER = CipherService("unit-test-secret", "unit-test-salt")

text_strategy = st.text(max_size=4096)


@settings(max_examples=50, deadline=None)
@given(plaintext=text_strategy)
def test_decrypt_inverts_encrypt(plaintext: str) -> None:
    """Any text, including emoji and multi-KB input, survives a round trip."""
    assert CIPHER.decrypt(CIPHER.encrypt(plaintext)) == plaintext


@settings(max_examples=25, deadline=None)
@given(plaintext=text_strategy)
def test_encrypt_uses_fresh_nonce(plaintext: str) -> None:
    first = CIPHER.encrypt(plaintext)
    second = CIPHER.encrypt(plaintext)

    assert first != second
    assert first.split(":")[0] != second.split(":")[0]
    assert CIPHER.decrypt(first) == plaintext
    assert CIPHER.decrypt(second) == plaintext


@settings(max_examples=25, deadline=None)
@given(plaintext=st.text(min_size=1, max_size=256), data=st.data())
def test_flipped_ciphertext_byte_fails_authentication(plaintext: str, data: st.DataObject) -> None:
    nonce_hex, tag_hex, ciphertext_hex = CIPHER.encrypt(plaintext).split(":")
    ciphertext = bytearray.fromhex(ciphertext_hex)
    index = data.draw(st.integers(min_value=0, max_value=len(ciphertext) - 1))
    ciphertext[index] ^= 0x01

    with pytest.raises(IntegrityError):
        CIPHER.decrypt(f"{nonce_hex}:{tag_hex}:{ciphertext.hex()}")


def test_tampered_tag_fails_authentication() -> None:
    nonce_hex, tag_hex, ciphertext_hex = CIPHER.encrypt("quanto custa?").split(":")
    tag = bytearray.fromhex(tag_hex)
    tag[0] ^= 0xFF

    with pytest.raises(IntegrityError):
        CIPHER.decrypt(f"{nonce_hex}:{tag.hex()}:{ciphertext_hex}")


def test_wrong_key_fails_authentication() -> None:
    blob = CIPHER.encrypt("oi")
    other = CipherService("another-secret", "unit-test-salt")

    with pytest.raises(IntegrityError):
        other.decrypt(blob)


def test_blob_layout() -> None:
    nonce_hex, tag_hex, ciphertext_hex = CIPHER.encrypt("héllo").split(":")

    assert len(nonce_hex) == NONCE_LENGTH_BYTES * 2
    assert len(tag_hex) == TAG_LENGTH_BYTES * 2
    # Ciphertext length matches the UTF-8 plaintext length.
    assert len(bytes.fromhex(ciphertext_hex)) == len("héllo".encode("utf-8"))


def test_empty_plaintext_round_trips() -> None:
    blob = CIPHER.encrypt("")
    assert blob.endswith(":")
    assert CIPHER.is_valid_ciphertext(blob)
    assert CIPHER.decrypt(blob) == ""


@settings(max_examples=25, deadline=None)
@given(plaintext=text_strategy)
def test_encrypt_output_is_valid_ciphertext(plaintext: str) -> None:
    assert CipherService.is_valid_ciphertext(CIPHER.encrypt(plaintext))


@pytest.mark.parametrize(
    "blob",
    [
        "",
        "abcd",
        "00" * 16 + ":" + "00" * 16,
        "00" * 16 + ":" + "00" * 16 + ":00:00",
        "00" * 15 + ":" + "00" * 16 + ":00",
        "00" * 16 + ":" + "00" * 17 + ":00",
        "zz" * 16 + ":" + "00" * 16 + ":00",
        "00" * 16 + ":" + "00" * 16 + ":0",
    ],
)
def test_malformed_blobs_are_rejected(blob: str) -> None:
    assert not CipherService.is_valid_ciphertext(blob)
    with pytest.raises(FormatError):
        CIPHER.decrypt(blob)


@pytest.mark.parametrize(
    ("secret", "salt"),
    [(None, "salt"), ("", "salt"), ("secret", None), ("secret", "")],
)
def test_missing_key_material_is_a_configuration_error(secret, salt) -> None:
    with pytest.raises(ConfigurationError):
        CipherService(secret, salt)


def test_key_is_derived_lazily_and_once() -> None:
    service = CipherService("lazy-secret", "lazy-salt")
    assert "_aead" not in service.__dict__

    service.warm_up()
    aead = service.__dict__["_aead"]
    service.encrypt("oi")

    assert service.__dict__["_aead"] is aead
