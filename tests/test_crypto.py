"""
Tests for the AES-GCM text encryption helpers.
"""

from __future__ import annotations

import base64

import pytest

from mocktest import crypto
from mocktest.errors import DecryptionError


class TestEncryption:

    @pytest.mark.parametrize("plaintext", [
        "",
        "**Question 1:** What is JavaScript?",
        "ภาษาไทย — 日本語 — emoji 🎉",
    ])
    def test_round_trip(self, plaintext):
        key = crypto.generate_key()
        assert crypto.decrypt(crypto.encrypt(plaintext, key), key) == plaintext

    def test_blob_layout(self):
        key = crypto.generate_key()
        raw = base64.b64decode(crypto.encrypt("abc", key))
        # nonce + ciphertext + 16-byte tag
        assert len(raw) == crypto.NONCE_SIZE + 3 + 16

    def test_nonce_is_random(self):
        key = crypto.generate_key()
        assert crypto.encrypt("same", key) != crypto.encrypt("same", key)

    def test_wrong_key_fails(self):
        blob = crypto.encrypt("secret", crypto.generate_key())
        with pytest.raises(DecryptionError):
            crypto.decrypt(blob, crypto.generate_key())

    def test_tampered_blob_fails(self):
        key = crypto.generate_key()
        raw = bytearray(base64.b64decode(crypto.encrypt("secret", key)))
        raw[-1] ^= 0x01
        with pytest.raises(DecryptionError):
            crypto.decrypt(base64.b64encode(bytes(raw)).decode(), key)

    def test_short_blob_fails(self):
        with pytest.raises(DecryptionError):
            crypto.decrypt(base64.b64encode(b"short").decode(), crypto.generate_key())

    def test_invalid_base64_fails(self):
        with pytest.raises(DecryptionError):
            crypto.decrypt("not base64!", crypto.generate_key())

    def test_key_size_enforced(self):
        with pytest.raises(ValueError):
            crypto.encrypt("x", b"too short")

    def test_key_text_round_trip(self):
        key = crypto.generate_key()
        assert len(key) == crypto.KEY_SIZE
        assert crypto.decode_key(crypto.encode_key(key)) == key
