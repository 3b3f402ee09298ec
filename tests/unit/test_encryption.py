"""
Unit tests for the encryption adapter
"""

import pytest

from src.services.stego_codec.core.encryption import (
    KEY_LENGTH,
    decrypt,
    derive_key,
    encrypt,
    encrypt_bytes,
)
from src.services.stego_codec.core.errors import AuthenticationFailed


class TestDeriveKey:
    """Test cases for key derivation."""

    def test_key_length(self, iterations):
        assert len(derive_key("pw", b"\x00" * 16, iterations)) == KEY_LENGTH

    def test_deterministic(self, iterations):
        salt = b"\x01" * 16

        assert derive_key("pw", salt, iterations) == derive_key("pw", salt, iterations)

    def test_salt_and_iterations_matter(self, iterations):
        base = derive_key("pw", b"\x01" * 16, iterations)

        assert derive_key("pw", b"\x02" * 16, iterations) != base
        assert derive_key("pw", b"\x01" * 16, iterations + 1) != base


class TestEncryptDecrypt:
    """Test cases for encrypt / decrypt."""

    def test_round_trip(self, iterations):
        blob = encrypt_bytes(b"secret message", "correct horse", iterations)

        assert decrypt(blob, "correct horse", iterations) == b"secret message"

    def test_blob_layout(self, iterations):
        payload = encrypt(b"abc", "pw", iterations)
        blob = payload.to_bytes()

        assert len(payload.salt) == 16
        assert len(payload.iv) == 12
        assert len(payload.auth_tag) == 16
        assert len(blob) == 44 + 3
        assert blob[:16] == payload.salt
        assert blob[16:28] == payload.iv
        assert blob[28:44] == payload.auth_tag
        assert blob[44:] == payload.ciphertext

    def test_non_deterministic(self, iterations):
        first = encrypt_bytes(b"same", "pw", iterations)
        second = encrypt_bytes(b"same", "pw", iterations)

        assert first != second
        assert decrypt(first, "pw", iterations) == b"same"
        assert decrypt(second, "pw", iterations) == b"same"

    def test_empty_plaintext(self, iterations):
        blob = encrypt_bytes(b"", "pw", iterations)

        assert len(blob) == 44
        assert decrypt(blob, "pw", iterations) == b""

    def test_wrong_password(self, iterations):
        blob = encrypt_bytes(b"data", "right", iterations)

        with pytest.raises(AuthenticationFailed):
            decrypt(blob, "wrong", iterations)

    def test_wrong_iterations(self, iterations):
        blob = encrypt_bytes(b"data", "pw", iterations)

        with pytest.raises(AuthenticationFailed):
            decrypt(blob, "pw", iterations * 2)

    @pytest.mark.parametrize("index", [0, 16, 28, 43, 44, 50])
    def test_tampering_detected(self, iterations, index):
        blob = bytearray(encrypt_bytes(b"tamper-evident!", "pw", iterations))
        blob[index] ^= 0x01

        with pytest.raises(AuthenticationFailed):
            decrypt(bytes(blob), "pw", iterations)

    def test_short_blob(self):
        with pytest.raises(AuthenticationFailed):
            decrypt(b"\x00" * 43, "pw")
