"""
Text Encryption
===============
AES-256-GCM helpers for optional at-rest protection of stored test text.
Independent of the parsing pipeline.

Blob format: base64(nonce[12] || ciphertext || tag[16])
"""

from __future__ import annotations

import base64
import binascii
import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .errors import DecryptionError

KEY_SIZE = 32
NONCE_SIZE = 12


def generate_key() -> bytes:
    """Generate a fresh 256-bit key."""
    return AESGCM.generate_key(bit_length=256)


def encode_key(key: bytes) -> str:
    return base64.urlsafe_b64encode(key).decode("ascii")


def decode_key(text: str) -> bytes:
    """Parse a key produced by ``encode_key``."""
    try:
        key = base64.urlsafe_b64decode(text.strip().encode("ascii"))
    except (binascii.Error, UnicodeEncodeError) as e:
        raise ValueError(f"Invalid key encoding: {e}") from e
    _check_key(key)
    return key


def _check_key(key: bytes):
    if len(key) != KEY_SIZE:
        raise ValueError(f"Key must be {KEY_SIZE} bytes, got {len(key)}")


def encrypt(plaintext: str, key: bytes) -> str:
    """Encrypt text with a random nonce prepended to the ciphertext."""
    _check_key(key)
    nonce = os.urandom(NONCE_SIZE)
    ciphertext = AESGCM(key).encrypt(nonce, plaintext.encode("utf-8"), None)
    return base64.b64encode(nonce + ciphertext).decode("ascii")


def decrypt(blob: str, key: bytes) -> str:
    """
    Decrypt a blob produced by ``encrypt``.

    Raises:
        DecryptionError: If the blob is malformed or too short, the key is
            wrong, or the authentication tag does not verify.
        ValueError: If the key is not 256 bits.
    """
    _check_key(key)
    try:
        data = base64.b64decode(blob, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecryptionError(f"Blob is not valid base64: {e}") from e

    if len(data) < NONCE_SIZE:
        raise DecryptionError("Blob is shorter than the nonce")

    nonce, ciphertext = data[:NONCE_SIZE], data[NONCE_SIZE:]
    try:
        plaintext = AESGCM(key).decrypt(nonce, ciphertext, None)
    except InvalidTag as e:
        raise DecryptionError("Authentication failed; wrong key or tampered blob") from e
    return plaintext.decode("utf-8")
